"""
Message Service
Append-only household notices, read receipts and soft deletion
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from homeboard.core import permissions
from homeboard.core.config import settings
from homeboard.core.exceptions import NotFoundError, StoreError, ValidationError
from homeboard.core.permissions import MessageAction
from homeboard.core.timezone import utc_now
from homeboard.models.message import Message, MessageRead

logger = logging.getLogger(__name__)


class MessageService:
    """Service for posting, listing, acknowledging and deleting messages"""

    def __init__(self, db: AsyncSession, max_length: Optional[int] = None):
        self.db = db
        self.max_length = max_length or settings.message_max_length

    def _insert(self):
        """Dialect-specific INSERT that supports ON CONFLICT DO NOTHING."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise StoreError(f"Unsupported database dialect for upserts: {dialect}")

    @staticmethod
    def is_read_by(message: Message, user_id: Optional[int]) -> Optional[bool]:
        """Whether ``user_id`` has a receipt on a message loaded with its reads."""
        if user_id is None:
            return None
        return any(read.user_id == user_id for read in message.reads)

    async def post(self, sender_id: int, content: Optional[str]) -> Message:
        """
        Post a new message.

        Raises:
            ValidationError: content is empty or longer than the configured maximum
        """
        text = (content or "").strip()
        if not text:
            raise ValidationError("Message content cannot be empty")
        if len(text) > self.max_length:
            raise ValidationError(
                f"Message content is {len(text)} characters, the maximum is {self.max_length}"
            )

        message = Message(sender_id=sender_id, content=text, created_at=utc_now())
        self.db.add(message)
        await self.db.flush()

        logger.info(f"User {sender_id} posted message {message.id}")
        return message

    async def get_message(self, message_id: UUID, with_details: bool = False) -> Optional[Message]:
        """Fetch a message whether or not it has been deleted."""
        query = select(Message).where(Message.id == message_id)
        if with_details:
            query = query.options(
                selectinload(Message.sender),
                selectinload(Message.reads).selectinload(MessageRead.user),
            )
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def list_active(self, limit: Optional[int] = None) -> List[Message]:
        """Non-deleted messages, newest first, with sender and read receipts loaded."""
        if limit is None:
            limit = settings.message_list_limit
        limit = max(1, min(limit, settings.message_list_max_limit))

        result = await self.db.execute(
            select(Message)
            .where(Message.deleted_at.is_(None))
            .options(
                selectinload(Message.sender),
                selectinload(Message.reads).selectinload(MessageRead.user),
            )
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_reads(self, message_id: UUID) -> List[MessageRead]:
        """Receipts for a message. Still available after the message is deleted."""
        result = await self.db.execute(
            select(MessageRead)
            .where(MessageRead.message_id == message_id)
            .options(selectinload(MessageRead.user))
            .order_by(MessageRead.read_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def mark_read(self, message_id: UUID, user_id: int) -> bool:
        """
        Record that ``user_id`` has read the message.
        Repeating the call is a no-op and still returns True.

        Raises:
            NotFoundError: the message does not exist or was deleted
        """
        message = await self.get_message(message_id)
        if message is None or message.is_deleted:
            raise NotFoundError(f"Message {message_id} not found")
        permissions.require(MessageAction.MARK_READ, message, user_id)

        insert = self._insert()
        stmt = (
            insert(MessageRead)
            .values(message_id=message_id, user_id=user_id, read_at=utc_now())
            .on_conflict_do_nothing(index_elements=["message_id", "user_id"])
        )
        await self.db.execute(stmt)
        await self.db.flush()
        return True

    async def soft_delete(self, message_id: UUID, requester_id: int) -> bool:
        """
        Mark a message deleted. The row and its receipts are kept.

        Returns False if the message does not exist or is already deleted.

        Raises:
            AuthorizationError: the requester is not the sender
        """
        message = await self.get_message(message_id)
        if message is None or message.is_deleted:
            return False
        permissions.require(MessageAction.DELETE, message, requester_id)

        # Conditional so a concurrent delete of the same row reports False
        result = await self.db.execute(
            update(Message)
            .where(
                Message.id == message_id,
                Message.sender_id == requester_id,
                Message.deleted_at.is_(None),
            )
            .values(deleted_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

        deleted = result.rowcount == 1
        if deleted:
            logger.info(f"User {requester_id} deleted message {message_id}")
        return deleted
