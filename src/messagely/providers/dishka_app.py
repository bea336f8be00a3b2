from dishka import Provider, Scope, provide
from typing import AsyncIterable
import logging

from messagely.config import Config, load_config
from messagely.core.db_manager import BaseDatabaseManager, create_db_manager
from messagely.core.gateways import UserDirectory
from messagely.core.security import PasswordHash, TokenIssuer

class AdaptersProvider(Provider):
    def __init__(self, config: Config | None = None):
        super().__init__()
        self._config = config

    @provide(scope=Scope.APP)
    def get_config(self) -> Config:
        return self._config or load_config(".env")

    @provide(scope=Scope.APP)
    def get_logger(self) -> logging.Logger:
        return logging.getLogger("messagely")

    @provide(scope=Scope.APP)
    async def get_db_manager(
            self,
            config: Config,
            logger: logging.Logger
    ) -> AsyncIterable[BaseDatabaseManager]:
        db_manager = create_db_manager(config, logger)
        await db_manager.initialize()
        await db_manager.create_tables()
        yield db_manager
        await db_manager.close()

class ServicesProvider(Provider):
    @provide(scope=Scope.APP)
    def get_password_hash(self, config: Config) -> PasswordHash:
        return PasswordHash(schemes=config.password.schemes)

    @provide(scope=Scope.APP)
    def get_token_issuer(self, config: Config, logger: logging.Logger) -> TokenIssuer:
        return TokenIssuer(
            secret_key=config.jwt.secret_key,
            algorithm=config.jwt.algorithm,
            expire_minutes=config.jwt.expire_minutes,
            logger=logger
        )

class GatewaysProvider(Provider):
    @provide(scope=Scope.REQUEST)
    def get_user_directory(
            self,
            db_manager: BaseDatabaseManager,
            password_hash: PasswordHash,
            logger: logging.Logger
    ) -> UserDirectory:
        return UserDirectory(db_manager, password_hash, logger)
