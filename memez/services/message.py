import logging
import time
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from memez.auth import verify_signature
from memez.config import get_settings
from memez.exceptions import UpstreamError, ValidationError
from memez.models import Message

logger = logging.getLogger(__name__)

settings = get_settings()


def text_length(text: str) -> int:
    """Length in UTF-16 code units, as the web client counts it."""
    return len(text.encode("utf-16-le")) // 2


class MessageService:
    """Service for posting and listing memecoin messages."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_message(
        self,
        memecoin: str,
        timestamp: int,
        signature: str,
        message: str,
    ) -> dict:
        """
        Store a message signed by its author.
        `memecoin` must already be in checksum form.
        """
        if text_length(message) > settings.message_max_length:
            raise ValidationError(
                f'"message" must be no more than {settings.message_max_length} characters length'
            )

        author = verify_signature(timestamp, signature)

        item = Message(
            id=str(uuid4()),
            author=author,
            memecoin=memecoin,
            timestamp=int(time.time()),
            message=message,
            likes=0,
        )

        try:
            self.db.add(item)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Could not add message for {memecoin}: {e}")
            raise UpstreamError("Could not add message") from e

        logger.info(f"Message {item.id} posted by {author} on {memecoin}")
        return item.to_dict()

    async def get_messages(self, memecoin: str, since: int = 0) -> list[dict]:
        """Messages of a memecoin with timestamp >= `since`, oldest first."""
        try:
            result = await self.db.execute(
                select(Message)
                .where(Message.memecoin == memecoin, Message.timestamp >= since)
                .order_by(Message.timestamp)
            )
            messages = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Could not retrieve messages for {memecoin}: {e}")
            raise UpstreamError("Could not retrieve messages") from e

        return [m.to_dict() for m in messages]
