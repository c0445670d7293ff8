"""
Unread Tracker
Derives badge counts from messages and receipts. Never writes.
"""
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from homeboard.models.message import Message, MessageRead


class UnreadTracker:
    """Read-only unread counts, cheap enough to poll"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count_unread(self, user_id: int) -> int:
        """
        Number of active messages without a receipt from ``user_id``.
        The user's own messages count too until they acknowledge them.
        """
        receipt = (
            select(MessageRead.id)
            .where(
                MessageRead.message_id == Message.id,
                MessageRead.user_id == user_id,
            )
            .exists()
        )
        result = await self.db.execute(
            select(func.count(Message.id)).where(
                Message.deleted_at.is_(None),
                ~receipt,
            )
        )
        return result.scalar() or 0
