from passlib.context import CryptContext
from jose import jwt
from datetime import datetime, timedelta, timezone
from typing import Any
import asyncio
import logging


class PasswordHash:
    """
    One-way salted password hashing backed by passlib.
    Hashing and verification run in the default executor so they do not block the event loop.
    """
    def __init__(self, schemes: list[str] | None = None):
        schemes = list(schemes or ["argon2"])
        self._context = CryptContext(
            schemes=schemes,
            default=schemes[0],
            deprecated="auto",
        )

    async def hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._context.hash, password)

    async def compare(self, password: str, hashed: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._context.verify, password, hashed)


class TokenIssuer:
    """
    Signs claims into JWT bearer tokens.
    Attributes:
        SECRET_KEY (str): Secret key for JWT token signing
        ALGORITHM (str): JWT signing algorithm
        ACCESS_TOKEN_EXPIRE_MINUTES (int | None): Token lifetime, None for non-expiring tokens
    """
    def __init__(
            self,
            secret_key: str,
            algorithm: str = "HS256",
            expire_minutes: int | None = None,
            logger: logging.Logger | None = None
    ):
        self.SECRET_KEY = secret_key
        self.ALGORITHM = algorithm
        self.ACCESS_TOKEN_EXPIRE_MINUTES = expire_minutes
        self.logger = logger or logging.getLogger(__name__)

    def sign(self, claims: dict[str, Any]) -> str:
        return jwt.encode(claims, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def create_access_token(self, username: str) -> str:
        """
        Create JWT access token asserting the username claim.
        Args:
            username: Username to include in the token payload
        Returns:
            str: Encoded JWT access token
        Raises:
            Exception: If token creation fails
        """
        try:
            now = datetime.now(timezone.utc)
            payload = {"username": username, "iat": now}
            if self.ACCESS_TOKEN_EXPIRE_MINUTES:
                payload["exp"] = now + timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
            return self.sign(payload)
        except Exception as e:
            self.logger.error("Error creating access token: %s", str(e), exc_info=True)
            raise
