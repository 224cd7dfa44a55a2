from sqlalchemy import select, and_, or_
import logging
import uuid

from .database import User, ApiKey, Message
from .interfaces import UserInterface, MessageInterface
from .dto import UserDTO, RegisteredUserDTO, ApiKeyOwnerDTO, MessageDTO
from .db_manager import DatabaseManager
from .errors import classify_error

class UserGateway(UserInterface):
    __slots__ = ("_db_manager", "_logger")

    def __init__(self, db_manager: DatabaseManager, logger: logging.Logger | None = None):
        self._db_manager = db_manager
        self._logger = logger or logging.getLogger(__name__)

    async def register(self, username: str, email: str) -> RegisteredUserDTO:
        key = str(uuid.uuid4())
        try:
            async with self._db_manager.session() as session:
                user = User(
                    username=username,
                    email=email,
                    api_key=ApiKey(key=key)
                )
                session.add(user)
                await session.flush()

                return RegisteredUserDTO(id=user.id, key=user.api_key.key)
        except Exception as e:
            self._logger.error("Error registering user in database: %s", e)
            raise classify_error(e) from e

    async def get_user_by_api_key(self, key: str) -> ApiKeyOwnerDTO | None:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User.id, User.username, ApiKey.active).join(
                    ApiKey, ApiKey.user_id == User.id
                ).where(ApiKey.key == key)
                result = await session.execute(stmt)
                row = result.first()
                if row is None:
                    return None

                return ApiKeyOwnerDTO(
                    id=row.id,
                    username=row.username,
                    active=row.active
                )
        except Exception as e:
            self._logger.error("Error getting user by api key in database: %s", e)
            raise classify_error(e) from e

    async def get_user_by_id(self, user_id: int) -> UserDTO | None:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User).where(User.id == user_id)
                result = await session.execute(stmt)
                user = result.scalars().first()
                if user:
                    return UserDTO(
                        id=user.id,
                        username=user.username,
                        email=user.email
                    )
                else:
                    return None
        except Exception as e:
            self._logger.error("Error getting user by id in database: %s", e)
            raise classify_error(e) from e

    async def get_user_by_username(self, username: str) -> UserDTO | None:
        try:
            async with self._db_manager.session() as session:
                stmt = select(User).where(User.username == username)
                result = await session.execute(stmt)
                user = result.scalars().first()
                if user:
                    return UserDTO(
                        id=user.id,
                        username=user.username,
                        email=user.email
                    )
                else:
                    return None
        except Exception as e:
            self._logger.error("Error getting user by username in database: %s", e)
            raise classify_error(e) from e

class MessageGateway(MessageInterface):
    __slots__ = ("_db_manager", "_logger")

    def __init__(self, db_manager: DatabaseManager, logger: logging.Logger | None = None):
        self._db_manager = db_manager
        self._logger = logger or logging.getLogger(__name__)

    async def send_message(self, src_id: int, dst_id: int, content: str) -> MessageDTO:
        try:
            async with self._db_manager.session() as session:
                msg = Message(
                    src_id=src_id,
                    dst_id=dst_id,
                    content=content
                )
                session.add(msg)
                await session.flush()

                return MessageDTO(
                    id=msg.id,
                    src_id=msg.src_id,
                    dst_id=msg.dst_id,
                    content=msg.content,
                    created_at=msg.created_at
                )
        except Exception as e:
            self._logger.error("Error creating message in database: %s", e)
            raise classify_error(e) from e

    async def read_messages(self, user1_id: int, user2_id: int) -> list[MessageDTO]:
        try:
            async with self._db_manager.session() as session:
                stmt = select(Message).where(
                    or_(
                        and_(
                            Message.src_id == user1_id,
                            Message.dst_id == user2_id
                        ),
                        and_(
                            Message.src_id == user2_id,
                            Message.dst_id == user1_id
                        )
                    )
                ).order_by(Message.created_at.asc(), Message.id.asc())
                result = await session.execute(stmt)
                messages = result.scalars().all()

                return [
                    MessageDTO(
                        id=m.id,
                        src_id=m.src_id,
                        dst_id=m.dst_id,
                        content=m.content,
                        created_at=m.created_at
                    ) for m in messages
                ]
        except Exception as e:
            self._logger.error("Error reading messages in database: %s", e)
            raise classify_error(e) from e
