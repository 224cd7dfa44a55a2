from abc import ABC, abstractmethod

from .dto import *

class UserInterface(ABC):
    @abstractmethod
    async def register(
            self,
            username: str,
            email: str
    ) -> RegisteredUserDTO:
        """
        Creates a user and its api key in one transaction.
        :param username:
        :param email:
        :return: id of the new user and its api key
        """
        raise NotImplementedError()

    @abstractmethod
    async def get_user_by_api_key(
            self,
            key: str
    ) -> ApiKeyOwnerDTO | None:
        """
        Get the owner of an api key, with the key's active flag
        :param key:
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def get_user_by_id(
            self,
            user_id: int
    ) -> UserDTO | None:
        """
        Get user by User.id
        :param user_id:
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def get_user_by_username(
            self,
            username: str
    ) -> UserDTO | None:
        """
        Get user by User.username
        :param username:
        :return:
        """
        raise NotImplementedError()


class MessageInterface(ABC):
    @abstractmethod
    async def send_message(
            self,
            src_id: int,
            dst_id: int,
            content: str
    ) -> MessageDTO:
        """
        Creates a new message in the database.
        :param src_id:
        :param dst_id:
        :param content:
        :return:
        """
        raise NotImplementedError()

    @abstractmethod
    async def read_messages(
            self,
            user1_id: int,
            user2_id: int
    ) -> list[MessageDTO]:
        """
        Gets every message exchanged between two users, oldest first.
        :param user1_id:
        :param user2_id:
        :return:
        """
        raise NotImplementedError()
