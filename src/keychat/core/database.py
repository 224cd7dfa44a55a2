from sqlalchemy import ForeignKey, String, Text, DateTime, Index
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from datetime import datetime, timezone
from typing import List


class UTCDateTime(TypeDecorator):
    """ Timezone-aware UTC timestamps, also on backends storing naive values (SQLite) """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Base(DeclarativeBase):
    pass

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)

    api_key: Mapped["ApiKey"] = relationship(
        "ApiKey",
        back_populates="user",
        uselist=False
    )

    sent_messages: Mapped[List["Message"]] = relationship(
        "Message",
        foreign_keys="Message.src_id",
        back_populates="src"
    )
    received_messages: Mapped[List["Message"]] = relationship(
        "Message",
        foreign_keys="Message.dst_id",
        back_populates="dst"
    )

class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(String(36), unique=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True)
    active: Mapped[bool] = mapped_column(default=True)

    user: Mapped["User"] = relationship(
        "User",
        back_populates="api_key"
    )

class Message(Base):
    __tablename__ = "messages"

    __table_args__ = (
        Index('ix_messages_src_dst_created', 'src_id', 'dst_id', 'created_at'),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    src_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    dst_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    src: Mapped["User"] = relationship(
        "User",
        foreign_keys=[src_id],
        back_populates="sent_messages"
    )
    dst: Mapped["User"] = relationship(
        "User",
        foreign_keys=[dst_id],
        back_populates="received_messages"
    )
