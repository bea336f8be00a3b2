from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging
import os

from messagely.config import Config
from .database import Base


class BaseDatabaseManager:
    def __init__(self, config: Config, logger: logging.Logger | None = None):
        self.config = config
        self.engine = None
        self.session_factory = None
        self._logger = logger or logging.getLogger(__name__)

    async def initialize(self):
        raise NotImplementedError()

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        if not self.engine:
            await self.initialize()

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def create_tables(self):
        if not self.engine:
            await self.initialize()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self._logger.info("Database tables created/verified")

    async def close(self):
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self._logger.info("Database engine disposed")


class DatabaseManager(BaseDatabaseManager):
    """ PostgreSQL through asyncpg """

    def get_dsn(self) -> str:
        db = self.config.db
        return f"postgresql+asyncpg://{db.user}:{db.password}@{db.host}:{db.port}/{db.name}"

    async def initialize(self):
        self.engine = create_async_engine(
            url=self.get_dsn(),
            pool_size=30,
            max_overflow=20,
            pool_pre_ping=True,
            pool_timeout=60,
            pool_recycle=-1,
            echo=self.config.db.echo,
        )

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )


class SQLiteDatabaseManager(BaseDatabaseManager):
    """ SQLite through aiosqlite """

    async def initialize(self):
        path = self.config.db.path
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self.engine = create_async_engine(
            url=f"sqlite+aiosqlite:///{path}",
            echo=self.config.db.echo,
        )

        @event.listens_for(self.engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )


def create_db_manager(config: Config, logger: logging.Logger | None = None) -> BaseDatabaseManager:
    if config.db.is_postgres:
        return DatabaseManager(config, logger)
    return SQLiteDatabaseManager(config, logger)
