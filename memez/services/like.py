import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from memez.auth import verify_signature
from memez.exceptions import AlreadyLiked, CounterUpdateFailed, NotLiked, UpstreamError
from memez.models import Like, Message

logger = logging.getLogger(__name__)


def like_id(message_id: str, user: str) -> str:
    """Ledger key of a (message, user) pair."""
    return f"{message_id}-{user}"


class LikeService:
    """
    Like ledger for messages.

    A Like row per (message, user) records the like itself; the `likes`
    column on the message is a denormalized count of those rows. The ledger
    write is guarded by the primary key and the counter is changed in place
    (likes = likes + 1), so concurrent requests need no locking here. Both
    writes share one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def like(self, message_id: str, timestamp: int, signature: str) -> int:
        """Like a message. Returns the new like count."""
        user = verify_signature(timestamp, signature)
        key = like_id(message_id, user)

        try:
            await self.db.execute(
                insert(Like).values(id=key, user=user, message_id=message_id)
            )
        except IntegrityError as e:
            # Primary key taken: this user already likes the message
            await self.db.rollback()
            logger.error(f"{user} already likes message {message_id}")
            raise AlreadyLiked() from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Could not like message {message_id}: {e}")
            raise UpstreamError("Could not like message") from e

        count = await self._add_to_likes(message_id, 1)
        await self._commit("Could not like message")

        logger.info(f"{user} liked message {message_id}, likes={count}")
        return count

    async def unlike(self, message_id: str, timestamp: int, signature: str) -> int:
        """Unlike a message. Returns the new like count."""
        user = verify_signature(timestamp, signature)
        key = like_id(message_id, user)

        try:
            result = await self.db.execute(delete(Like).where(Like.id == key))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Could not unlike message {message_id}: {e}")
            raise UpstreamError("Could not unlike message") from e

        if result.rowcount == 0:
            await self.db.rollback()
            logger.error(f"{user} does not like message {message_id}")
            raise NotLiked()

        count = await self._add_to_likes(message_id, -1)
        await self._commit("Could not unlike message")

        logger.info(f"{user} unliked message {message_id}, likes={count}")
        return count

    async def get_likes(self, user: str) -> list[dict]:
        """Ledger rows of a user. `user` must be in checksum form."""
        try:
            result = await self.db.execute(select(Like).where(Like.user == user))
            likes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Could not retrieve likes of {user}: {e}")
            raise UpstreamError("Could not retrieve likes") from e

        return [like.to_dict() for like in likes]

    async def _add_to_likes(self, message_id: str, delta: int) -> int:
        """Atomically add `delta` to the message counter and return the new value."""
        try:
            result = await self.db.execute(
                update(Message)
                .where(Message.id == message_id)
                .values(likes=Message.likes + delta)
                .returning(Message.likes)
                .execution_options(synchronize_session=False)
            )
            count = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Could not update likes count of message {message_id}: {e}")
            raise CounterUpdateFailed() from e

        if count is None:
            await self.db.rollback()
            logger.error(f"Could not update likes count of message {message_id}: no such message")
            raise CounterUpdateFailed()

        return count

    async def _commit(self, detail: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{detail}: {e}")
            raise UpstreamError(detail) from e
