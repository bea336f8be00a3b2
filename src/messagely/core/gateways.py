from sqlalchemy import select, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from .database import User, Message, utcnow
from .interfaces import UserDirectoryInterface
from .dto import UserDTO, UserBasicDTO, UserDetailDTO, MessageFromDTO, MessageToDTO
from .exceptions import ConflictError, NotFoundError, StoreError
from .db_manager import BaseDatabaseManager
from .security import PasswordHash


class UserDirectory(UserDirectoryInterface):
    __slots__ = ("_db_manager", "_password_hash", "_logger")

    def __init__(
            self,
            db_manager: BaseDatabaseManager,
            password_hash: PasswordHash,
            logger: logging.Logger | None = None
    ):
        self._db_manager = db_manager
        self._password_hash = password_hash
        self._logger = logger or logging.getLogger(__name__)

    async def register(
            self,
            username: str,
            password: str,
            first_name: str,
            last_name: str,
            phone: str
    ) -> UserDTO:
        hashed_password = await self._password_hash.hash(password)
        try:
            async with self._db_manager.session() as session:
                stmt = insert(User).values(
                    username=username,
                    password=hashed_password,
                    first_name=first_name,
                    last_name=last_name,
                    phone=phone,
                    join_at=utcnow()
                ).returning(User)
                result = await session.execute(stmt)
                user = result.scalars().first()
                return UserDTO.model_validate(user)
        except IntegrityError as e:
            self._logger.warning("Username already taken: %s", username)
            raise ConflictError(f"Username already taken: {username}") from e
        except SQLAlchemyError as e:
            self._logger.error("Error creating user in database: %s", e, exc_info=True)
            raise StoreError("Error creating user") from e

    async def authenticate(self, username: str, password: str) -> bool:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User.password).where(User.username == username)
                result = await session.execute(stmt)
                hashed_password = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self._logger.error("Error authenticating user in database: %s", e, exc_info=True)
            raise StoreError("Error authenticating user") from e

        if hashed_password is None:
            return False
        return await self._password_hash.compare(password, hashed_password)

    async def update_login_timestamp(self, username: str) -> None:
        try:
            async with self._db_manager.session() as session:
                stmt = update(User).where(
                    User.username == username
                ).values(last_login_at=utcnow())
                await session.execute(stmt)
        except SQLAlchemyError as e:
            self._logger.error("Error updating last login for %s: %s", username, e, exc_info=True)
            raise StoreError("Error updating login timestamp") from e

    async def all(self) -> list[UserBasicDTO]:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User.username, User.first_name, User.last_name, User.phone)
                result = await session.execute(stmt)
                return [
                    UserBasicDTO(
                        username=row.username,
                        first_name=row.first_name,
                        last_name=row.last_name,
                        phone=row.phone
                    ) for row in result.all()
                ]
        except SQLAlchemyError as e:
            self._logger.error("Error getting users in database: %s", e, exc_info=True)
            raise StoreError("Error getting users") from e

    async def get(self, username: str) -> UserDetailDTO:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User).where(User.username == username)
                result = await session.execute(stmt)
                user = result.scalars().first()
        except SQLAlchemyError as e:
            self._logger.error("Error getting user by username in database: %s", e, exc_info=True)
            raise StoreError("Error getting user") from e

        if user is None:
            raise NotFoundError(f"No such user: {username}")
        return UserDetailDTO.model_validate(user)

    async def messages_from(self, username: str) -> list[MessageFromDTO]:
        try:
            async with self._db_manager.session() as session:
                stmt = select(
                    Message.id,
                    Message.body,
                    Message.sent_at,
                    Message.read_at,
                    User.username,
                    User.first_name,
                    User.last_name,
                    User.phone
                ).join(
                    User, Message.to_username == User.username
                ).where(
                    Message.from_username == username
                ).order_by(Message.id)
                result = await session.execute(stmt)

                return [
                    MessageFromDTO(
                        id=row.id,
                        body=row.body,
                        sent_at=row.sent_at,
                        read_at=row.read_at,
                        to_user=UserBasicDTO(
                            username=row.username,
                            first_name=row.first_name,
                            last_name=row.last_name,
                            phone=row.phone
                        )
                    ) for row in result.all()
                ]
        except SQLAlchemyError as e:
            self._logger.error("Error getting messages from %s in database: %s", username, e, exc_info=True)
            raise StoreError("Error getting messages") from e

    async def messages_to(self, username: str) -> list[MessageToDTO]:
        try:
            async with self._db_manager.session() as session:
                stmt = select(
                    Message.id,
                    Message.body,
                    Message.sent_at,
                    Message.read_at,
                    User.username,
                    User.first_name,
                    User.last_name,
                    User.phone
                ).join(
                    User, Message.from_username == User.username
                ).where(
                    Message.to_username == username
                ).order_by(Message.id)
                result = await session.execute(stmt)

                return [
                    MessageToDTO(
                        id=row.id,
                        body=row.body,
                        sent_at=row.sent_at,
                        read_at=row.read_at,
                        from_user=UserBasicDTO(
                            username=row.username,
                            first_name=row.first_name,
                            last_name=row.last_name,
                            phone=row.phone
                        )
                    ) for row in result.all()
                ]
        except SQLAlchemyError as e:
            self._logger.error("Error getting messages to %s in database: %s", username, e, exc_info=True)
            raise StoreError("Error getting messages") from e
