"""Shared helpers for building throwaway configs and seeding messages."""

import os
from datetime import datetime

from sqlalchemy import create_engine, insert

from messagely.config import Config, DBConfig, JWTConfig
from messagely.core.database import Message, utcnow

SECRET_KEY = "test-secret"


def make_config(directory: str) -> Config:
    return Config(
        jwt=JWTConfig(secret_key=SECRET_KEY),
        db=DBConfig(path=os.path.join(directory, "messagely.db")),
    )


async def seed_message(db_manager, from_username: str, to_username: str, body: str,
                       read_at: datetime | None = None) -> int:
    async with db_manager.session() as session:
        message = Message(
            from_username=from_username,
            to_username=to_username,
            body=body,
            sent_at=utcnow(),
            read_at=read_at,
        )
        session.add(message)
        await session.flush()
        return message.id


def seed_message_sync(db_path: str, from_username: str, to_username: str, body: str) -> None:
    """Insert a message through a separate sync engine while the app owns the async one."""
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        with engine.begin() as conn:
            conn.execute(
                insert(Message).values(
                    from_username=from_username,
                    to_username=to_username,
                    body=body,
                    sent_at=utcnow(),
                )
            )
    finally:
        engine.dispose()
