"""
User Service - read access to the household directory, seed defaults.
"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from homeboard.core.exceptions import UnknownUserError
from homeboard.models.user import DEFAULT_USERS, User

logger = logging.getLogger(__name__)


class UserService:
    """Lookups against the externally curated user list."""

    @staticmethod
    async def list_users(db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def require_user(db: AsyncSession, user_id: int) -> User:
        """Return the user or raise UnknownUserError."""
        user = await UserService.get_user(db, user_id)
        if user is None:
            raise UnknownUserError(user_id)
        return user

    @staticmethod
    async def seed_default_users(db: AsyncSession) -> List[User]:
        """Create the default household if no users exist."""
        existing = await db.execute(select(User.id).limit(1))
        if existing.scalar_one_or_none() is not None:
            logger.info("Household users already exist, skipping seed.")
            return await UserService.list_users(db)

        users = []
        for cfg in DEFAULT_USERS:
            user = User(
                id=cfg["id"],
                name=cfg["name"],
                color=cfg["color"],
                initial=cfg["initial"],
            )
            db.add(user)
            users.append(user)
        await db.flush()
        logger.info("Seeded %d default household users.", len(users))
        return users
