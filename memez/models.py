"""SQLAlchemy models for messages and the like ledger."""

from sqlalchemy import BigInteger, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from memez.config import get_settings
from memez.database import Base

settings = get_settings()


class Message(Base):
    """A message posted about a memecoin."""

    __tablename__ = settings.messages_table

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    author: Mapped[str] = mapped_column(String(42), nullable=False)
    memecoin: Mapped[str] = mapped_column(String(42), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    message: Mapped[str] = mapped_column(String(settings.message_max_length), nullable=False)

    # Denormalized count of Like rows, only changed by LikeService
    likes: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (
        Index("idx_messages_memecoin_timestamp", "memecoin", "timestamp"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author,
            "memecoin": self.memecoin,
            "timestamp": self.timestamp,
            "message": self.message,
            "likes": self.likes,
        }


class Like(Base):
    """Ledger row: its existence means `user` likes `message_id`."""

    __tablename__ = settings.likes_table

    # "<messageId>-<user>", so a pair can only be inserted once
    id: Mapped[str] = mapped_column(String(300), primary_key=True)
    user: Mapped[str] = mapped_column(String(42), nullable=False)
    message_id: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_likes_user", "user"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user,
            "messageId": self.message_id,
        }
