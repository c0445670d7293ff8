"""
API Dependencies
"""
import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from homeboard.core.exceptions import UnknownUserError
from homeboard.db.database import get_db
from homeboard.models.user import User
from homeboard.services.message_service import MessageService
from homeboard.services.schedule_service import ScheduleService
from homeboard.services.unread_service import UnreadTracker
from homeboard.services.user_service import UserService

logger = logging.getLogger(__name__)


# Function scope: the commit runs before the response is sent, so a failed commit is a 500
async def get_schedule_service(db: AsyncSession = Depends(get_db, scope="function")) -> ScheduleService:
    return ScheduleService(db)


async def get_message_service(db: AsyncSession = Depends(get_db, scope="function")) -> MessageService:
    return MessageService(db)


async def get_unread_tracker(db: AsyncSession = Depends(get_db, scope="function")) -> UnreadTracker:
    return UnreadTracker(db)


async def require_household_member(db: AsyncSession, user_id: Optional[int]) -> User:
    """
    Resolve a caller-supplied user id.
    Ids are trusted as-is (there is no authentication), but they must be
    present and belong to the household.
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required",
        )
    try:
        return await UserService.require_user(db, user_id)
    except UnknownUserError as e:
        logger.warning(e.message)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        )


def parse_message_id(raw: str) -> Optional[UUID]:
    """Message ids are UUIDs; anything else cannot match a message."""
    try:
        return UUID(raw)
    except (TypeError, ValueError):
        return None
