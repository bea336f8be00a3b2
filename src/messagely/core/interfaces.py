from abc import ABC, abstractmethod

from .dto import UserDTO, UserBasicDTO, UserDetailDTO, MessageFromDTO, MessageToDTO

class UserDirectoryInterface(ABC):
    @abstractmethod
    async def register(
            self,
            username: str,
            password: str,
            first_name: str,
            last_name: str,
            phone: str
    ) -> UserDTO:
        """
        Stores a new user with a hashed password and join_at set to now.
        :param username:
        :param password: plaintext password, hashed before storage
        :param first_name:
        :param last_name:
        :param phone:
        :return: stored record including the password hash
        :raises ConflictError: username already taken
        """
        raise NotImplementedError()

    @abstractmethod
    async def authenticate(
            self,
            username: str,
            password: str
    ) -> bool:
        """
        Checks a username/password pair.
        :param username:
        :param password:
        :return: False for unknown users and wrong passwords alike
        """
        raise NotImplementedError()

    @abstractmethod
    async def update_login_timestamp(
            self,
            username: str
    ) -> None:
        """
        Sets User.last_login_at to now. No-op for unknown usernames.
        :param username:
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def all(self) -> list[UserBasicDTO]:
        """
        Basic info on all users
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def get(
            self,
            username: str
    ) -> UserDetailDTO:
        """
        Get user by User.username
        :param username:
        :return:
        :raises NotFoundError: no such user
        """
        raise NotImplementedError()

    @abstractmethod
    async def messages_from(
            self,
            username: str
    ) -> list[MessageFromDTO]:
        """
        Gets messages sent by a user, each with the recipient embedded as to_user.
        :param username:
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def messages_to(
            self,
            username: str
    ) -> list[MessageToDTO]:
        """
        Gets messages received by a user, each with the sender embedded as from_user.
        :param username:
        :return:
        """
        raise NotImplementedError()
