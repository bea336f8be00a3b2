from fastapi import status, HTTPException, APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone

from dishka import FromDishka
from dishka.integrations.fastapi import inject

import logging

from messagely.core.db_manager import BaseDatabaseManager
from messagely.core.exceptions import InvalidCredentials
from messagely.core.gateways import UserDirectory
from messagely.core.security import TokenIssuer
from ..models.auth_api_models import LoginRequest, RegisterRequest, TokenResponse
from ..models.users_api_models import ErrorResponse, HealthResponse


class AuthAPI:
    """
    Authentication API service handling login and registration.
    Both flows end by issuing a JWT bearer token carrying the username claim
    and recording the login time.
    Attributes:
        logger (logging.Logger): Logger instance
        _auth_router (APIRouter): FastAPI router for authentication endpoints
    """
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._auth_router = APIRouter(tags=["Authentication"])
        self._register_endpoints()

    @property
    def auth_router(self) -> APIRouter:
        return self._auth_router

    def get_router(self) -> APIRouter:
        return self._auth_router

    def _register_endpoints(self):
        """
        Register all authentication endpoints with the FastAPI router.

        This method sets up the following endpoints:
        - GET /health: Health check
        - POST /login: Login with username and password
        - POST /register: User registration
        """
        @self.auth_router.get("/health", response_model=HealthResponse)
        @inject
        async def health_check(db_manager: FromDishka[BaseDatabaseManager]):
            """
            Health check endpoint to verify service status and database connectivity.
            Raises:
                HTTPException: If the database is unavailable
            """
            try:
                async with db_manager.session() as session:
                    await session.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                self.logger.error("Health check failed: %s", str(e))
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Service unavailable"
                ) from e

            return HealthResponse(
                status="healthy",
                timestamp=datetime.now(timezone.utc).isoformat()
            )

        @self.auth_router.post(
            "/login",
            response_model=TokenResponse,
            responses={400: {"model": ErrorResponse}}
        )
        @inject
        async def login(
                login_data: LoginRequest,
                directory: FromDishka[UserDirectory],
                token_issuer: FromDishka[TokenIssuer]
        ):
            """
            Authenticate user by username and password.
            Args:
                login_data: Username and plaintext password
                directory: User directory for database operations
                token_issuer: Signs the access token
            Returns:
                TokenResponse: JWT access token
            Raises:
                InvalidCredentials: If the user is unknown or the password is wrong
            """
            if not await directory.authenticate(login_data.username, login_data.password):
                self.logger.warning("Failed login for user: %s", login_data.username)
                raise InvalidCredentials("Invalid username/password")

            await directory.update_login_timestamp(login_data.username)
            token = token_issuer.create_access_token(login_data.username)

            self.logger.info("User logged in: %s", login_data.username)
            return TokenResponse(token=token)

        @self.auth_router.post(
            "/register",
            response_model=TokenResponse,
            responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}}
        )
        @inject
        async def register(
                user_data: RegisterRequest,
                directory: FromDishka[UserDirectory],
                token_issuer: FromDishka[TokenIssuer]
        ):
            """
            Register a new user, log them in and return a token.
            Raises:
                ConflictError: If the username already exists
            """
            user = await directory.register(
                username=user_data.username,
                password=user_data.password,
                first_name=user_data.first_name,
                last_name=user_data.last_name,
                phone=user_data.phone
            )
            token = token_issuer.create_access_token(user.username)
            await directory.update_login_timestamp(user.username)

            self.logger.info("New user registered: %s", user.username)
            return TokenResponse(token=token)
