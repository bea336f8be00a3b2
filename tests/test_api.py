"""End-to-end tests for the auth and users routers through the FastAPI app."""

import os
import tempfile
import unittest
from datetime import datetime
from unittest.mock import patch

from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.exc import OperationalError

from messagely.core.db_manager import SQLiteDatabaseManager
from messagely.core.exceptions import StoreError
from messagely.core.gateways import UserDirectory
from messagely.main import create_app

from support import SECRET_KEY, make_config, seed_message_sync


AMY = {
    "username": "amy",
    "password": "pw1",
    "first_name": "Amy",
    "last_name": "X",
    "phone": "555",
}
BOB = {
    "username": "bob",
    "password": "pw2",
    "first_name": "Bob",
    "last_name": "Y",
    "phone": "777",
}


class ApiTestCase(unittest.TestCase):
    """Base fixture: app bound to a fresh SQLite file, lifespan running."""

    raise_server_exceptions = True

    def setUp(self):
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.db_path = os.path.join(self._tmpdir.name, "messagely.db")

        self.client = TestClient(
            create_app(make_config(self._tmpdir.name)),
            raise_server_exceptions=self.raise_server_exceptions,
        )
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def register(self, data):
        response = self.client.post("/register", json=data)
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["token"]

    def assert_error(self, response, status_code):
        self.assertEqual(response.status_code, status_code, response.text)
        error = response.json()["error"]
        self.assertEqual(error["status"], status_code)
        self.assertTrue(error["message"])
        return error


class TestRegister(ApiTestCase):

    def test_register_returns_token_and_logs_in(self):
        token = self.register(AMY)

        self.assertEqual(jwt.decode(token, SECRET_KEY, algorithms=["HS256"])["username"], "amy")

        response = self.client.get("/users/amy")
        self.assertEqual(response.status_code, 200)
        user = response.json()["user"]
        self.assertEqual(user["username"], "amy")
        self.assertEqual(user["first_name"], "Amy")
        self.assertEqual(user["last_name"], "X")
        self.assertEqual(user["phone"], "555")
        self.assertIsNotNone(user["join_at"])
        self.assertIsNotNone(user["last_login_at"])
        self.assertNotIn("password", user)

    def test_duplicate_username_is_conflict(self):
        self.register(AMY)

        response = self.client.post("/register", json={**AMY, "first_name": "Other"})

        self.assert_error(response, 409)
        self.assertEqual(self.client.get("/users/amy").json()["user"]["first_name"], "Amy")

    def test_missing_fields_is_validation_error(self):
        response = self.client.post("/register", json={"username": "amy", "password": "pw1"})

        error = self.assert_error(response, 400)
        self.assertIn("first_name", error["message"])


class TestLogin(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.register(AMY)

    def test_login_returns_token(self):
        response = self.client.post("/login", json={"username": "amy", "password": "pw1"})

        self.assertEqual(response.status_code, 200)
        payload = jwt.decode(response.json()["token"], SECRET_KEY, algorithms=["HS256"])
        self.assertEqual(payload["username"], "amy")

    def test_login_advances_last_login_at(self):
        before = datetime.fromisoformat(self.client.get("/users/amy").json()["user"]["last_login_at"])

        self.client.post("/login", json={"username": "amy", "password": "pw1"})

        after = datetime.fromisoformat(self.client.get("/users/amy").json()["user"]["last_login_at"])
        self.assertGreater(after, before)

    def test_wrong_password_is_invalid_credentials(self):
        response = self.client.post("/login", json={"username": "amy", "password": "nope"})

        error = self.assert_error(response, 400)
        self.assertEqual(error["message"], "Invalid username/password")

    def test_unknown_user_looks_like_wrong_password(self):
        """Unknown usernames get the same response as wrong passwords."""
        wrong_password = self.client.post("/login", json={"username": "amy", "password": "nope"})
        unknown_user = self.client.post("/login", json={"username": "nobody", "password": "nope"})

        self.assertEqual(unknown_user.status_code, wrong_password.status_code)
        self.assertEqual(unknown_user.json(), wrong_password.json())

    def test_missing_password_is_validation_error(self):
        response = self.client.post("/login", json={"username": "amy"})

        self.assert_error(response, 400)

    def test_non_object_body_is_validation_error(self):
        response = self.client.post("/login", json=[1])

        error = self.assert_error(response, 400)
        self.assertEqual(error["message"], "Invalid request body")


class TestUsers(ApiTestCase):

    def test_list_users_empty(self):
        response = self.client.get("/users")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"users": []})

    def test_list_users(self):
        self.register(AMY)
        self.register(BOB)

        users = self.client.get("/users").json()["users"]

        self.assertEqual(
            sorted(users, key=lambda u: u["username"]),
            [
                {"username": "amy", "first_name": "Amy", "last_name": "X", "phone": "555"},
                {"username": "bob", "first_name": "Bob", "last_name": "Y", "phone": "777"},
            ],
        )

    def test_unknown_user_is_not_found(self):
        self.assert_error(self.client.get("/users/nobody"), 404)

    def test_messages_to_and_from(self):
        self.register(AMY)
        self.register(BOB)
        seed_message_sync(self.db_path, "amy", "bob", "hi bob")
        seed_message_sync(self.db_path, "bob", "amy", "hi amy")
        seed_message_sync(self.db_path, "bob", "amy", "again")

        sent = self.client.get("/users/amy/from").json()["msgs"]
        received = self.client.get("/users/amy/to").json()["msgs"]

        self.assertEqual(len(sent), 1)
        self.assertEqual(sent[0]["body"], "hi bob")
        self.assertEqual(
            sent[0]["to_user"],
            {"username": "bob", "first_name": "Bob", "last_name": "Y", "phone": "777"},
        )
        self.assertIsNone(sent[0]["read_at"])
        self.assertEqual(set(sent[0]), {"id", "body", "sent_at", "read_at", "to_user"})

        self.assertEqual([m["body"] for m in received], ["hi amy", "again"])
        self.assertEqual(received[0]["from_user"]["username"], "bob")
        self.assertEqual(set(received[0]), {"id", "body", "sent_at", "read_at", "from_user"})

    def test_messages_for_user_without_messages(self):
        self.register(AMY)

        self.assertEqual(self.client.get("/users/amy/to").json(), {"msgs": []})
        self.assertEqual(self.client.get("/users/amy/from").json(), {"msgs": []})


class TestMisc(ApiTestCase):

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_health_reports_unavailable_database(self):
        failure = OperationalError("SELECT 1", {}, Exception("unable to open database file"))

        with patch.object(SQLiteDatabaseManager, "session", side_effect=failure):
            response = self.client.get("/health")

        error = self.assert_error(response, 503)
        self.assertEqual(error["message"], "Service unavailable")

    def test_unknown_route_uses_error_envelope(self):
        self.assert_error(self.client.get("/nowhere"), 404)


class TestServerErrors(ApiTestCase):
    """Failures inside handlers come back as 500 envelopes."""

    raise_server_exceptions = False

    @patch.object(UserDirectory, "all", side_effect=StoreError("Error getting users"))
    def test_store_error_is_500_envelope(self, mock_all):
        response = self.client.get("/users")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": {"message": "Error getting users", "status": 500}},
        )
        mock_all.assert_called_once()

    @patch.object(UserDirectory, "all", side_effect=RuntimeError("boom"))
    def test_unexpected_error_is_logged_500_envelope(self, mock_all):
        with self.assertLogs("messagely", level="CRITICAL") as logs:
            response = self.client.get("/users")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": {"message": "Internal server error", "status": 500}},
        )
        self.assertIn("boom", logs.output[0])


if __name__ == "__main__":
    unittest.main()
