from fastapi import APIRouter
from dishka.integrations.fastapi import inject
from dishka import FromDishka
import logging

from ..models.users_api_models import (
    UsersResponse,
    UserResponse,
    MessagesFromResponse,
    MessagesToResponse,
    ErrorResponse,
)
from messagely.core.gateways import UserDirectory


class UsersAPI:
    """
    Read-only user and message listing endpoints.

    Every handler delegates to the UserDirectory and wraps the result
    in a JSON envelope keyed ``users``, ``user`` or ``msgs``.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger

        self._users_router = APIRouter(prefix="/users", tags=["Users"])
        self._register_endpoints()

    @property
    def users_router(self) -> APIRouter:
        return self._users_router

    def get_router(self) -> APIRouter:
        return self._users_router

    def _register_endpoints(self):
        @self.users_router.get("", response_model=UsersResponse)
        @inject
        async def list_users(directory: FromDishka[UserDirectory]):
            users = await directory.all()
            return UsersResponse(users=users)

        @self.users_router.get(
            "/{username}",
            response_model=UserResponse,
            responses={404: {"model": ErrorResponse}}
        )
        @inject
        async def get_user(username: str, directory: FromDishka[UserDirectory]):
            user = await directory.get(username)
            return UserResponse(user=user)

        @self.users_router.get("/{username}/to", response_model=MessagesToResponse)
        @inject
        async def get_messages_to(username: str, directory: FromDishka[UserDirectory]):
            msgs = await directory.messages_to(username)
            self.logger.debug("Fetched %s messages to %s", len(msgs), username)
            return MessagesToResponse(msgs=msgs)

        @self.users_router.get("/{username}/from", response_model=MessagesFromResponse)
        @inject
        async def get_messages_from(username: str, directory: FromDishka[UserDirectory]):
            msgs = await directory.messages_from(username)
            self.logger.debug("Fetched %s messages from %s", len(msgs), username)
            return MessagesFromResponse(msgs=msgs)
