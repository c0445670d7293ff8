"""
Schedule Service
Owns the weekly time blocks of every (user, week, day) slot.
"""
import logging
from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from homeboard.core.exceptions import ValidationError
from homeboard.models.schedule import ALL_DAY_END, ALL_DAY_START, Schedule
from homeboard.schemas.schedule import TimeBlockIn
from homeboard.services.user_service import UserService
from homeboard.utils.week import DAY_NAMES, date_for_day, normalize_day_name, parse_week_key

logger = logging.getLogger(__name__)

# Day name -> ordered blocks
UserSchedule = Dict[str, List[Schedule]]
# User id -> that user's week
SchedulesType = Dict[int, UserSchedule]


def block_sort_key(record: Schedule):
    """All-day blocks first, then by start time."""
    return (not record.all_day, record.start_time, record.end_time, record.label)


def empty_week() -> UserSchedule:
    return {day: [] for day in DAY_NAMES}


def _describe(index: int, block: TimeBlockIn) -> str:
    return f"block {index} ('{block.label}')" if block.label else f"block {index}"


def validate_blocks(blocks: Sequence[TimeBlockIn]) -> None:
    """
    Check the shape of each block and that no two timed blocks overlap.
    Intervals are half-open, so 09:00-10:00 and 10:00-11:00 may coexist.
    All-day blocks take no part in the overlap check.
    """
    timed = []
    for index, block in enumerate(blocks, start=1):
        if block.all_day:
            continue
        if block.start is None or block.end is None:
            raise ValidationError(
                f"{_describe(index, block)} needs a start and end time unless it is all-day"
            )
        # Stored and served as wall-clock HH:MM
        for value in (block.start, block.end):
            if value.tzinfo is not None:
                raise ValidationError(f"{_describe(index, block)} times must not carry a timezone")
            if value.second or value.microsecond:
                raise ValidationError(f"{_describe(index, block)} times must be whole minutes (HH:MM)")
        if block.start >= block.end:
            raise ValidationError(
                f"{_describe(index, block)} must start before it ends "
                f"({block.start:%H:%M} >= {block.end:%H:%M})"
            )
        timed.append((block.start, block.end, index, block))

    timed.sort(key=lambda item: (item[0], item[1], item[2]))
    for previous, current in zip(timed, timed[1:]):
        if current[0] < previous[1]:
            raise ValidationError(
                f"{_describe(previous[2], previous[3])} "
                f"({previous[0]:%H:%M}-{previous[1]:%H:%M}) overlaps "
                f"{_describe(current[2], current[3])} "
                f"({current[0]:%H:%M}-{current[1]:%H:%M})"
            )


class ScheduleService:
    """Read and replace weekly availability"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _lock_slot(self, user_id: int, week_key: str, day: str) -> None:
        """
        Serialize writers of one (user, week, day) slot until the transaction ends.
        Only PostgreSQL has advisory locks; SQLite serializes writes on its own.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return
        slot = f"schedules:{user_id}:{week_key}:{day}"
        await self.db.execute(select(func.pg_advisory_xact_lock(func.hashtext(slot))))

    async def get_day(self, user_id: int, week_key: str, day: str) -> List[Schedule]:
        parse_week_key(week_key)
        day = normalize_day_name(day)
        result = await self.db.execute(
            select(Schedule).where(
                Schedule.user_id == user_id,
                Schedule.week_key == week_key,
                Schedule.day == day,
            )
        )
        return sorted(result.scalars().all(), key=block_sort_key)

    async def get_week(self, user_id: int, week_key: str) -> UserSchedule:
        """Seven days for one user; days without blocks are empty lists."""
        parse_week_key(week_key)
        result = await self.db.execute(
            select(Schedule).where(
                Schedule.user_id == user_id,
                Schedule.week_key == week_key,
            )
        )
        week = empty_week()
        for record in result.scalars().all():
            week.setdefault(record.day, []).append(record)
        for blocks in week.values():
            blocks.sort(key=block_sort_key)
        return week

    async def get_household_week(self, week_key: str) -> SchedulesType:
        """Every household member's week, including members with nothing scheduled."""
        parse_week_key(week_key)
        users = await UserService.list_users(self.db)
        schedules: SchedulesType = {user.id: empty_week() for user in users}

        result = await self.db.execute(select(Schedule).where(Schedule.week_key == week_key))
        for record in result.scalars().all():
            week = schedules.setdefault(record.user_id, empty_week())
            week.setdefault(record.day, []).append(record)

        for week in schedules.values():
            for blocks in week.values():
                blocks.sort(key=block_sort_key)
        return schedules

    async def replace_day(
        self,
        user_id: int,
        week_key: str,
        day: str,
        blocks: Sequence[TimeBlockIn],
    ) -> UserSchedule:
        """
        Replace every block of one (user, week, day) slot with ``blocks``.

        Everything is validated before the first write, so a ValidationError
        leaves the stored slot untouched. Incoming block ids are ignored; the
        replaced rows are gone and the new ones get fresh ids.
        """
        day = normalize_day_name(day)
        slot_date = date_for_day(week_key, day)
        validate_blocks(blocks)

        await self._lock_slot(user_id, week_key, day)
        await self.db.execute(
            delete(Schedule).where(
                Schedule.user_id == user_id,
                Schedule.week_key == week_key,
                Schedule.day == day,
            )
        )
        for block in blocks:
            self.db.add(Schedule(
                user_id=user_id,
                week_key=week_key,
                day=day,
                schedule_date=slot_date,
                start_time=ALL_DAY_START if block.all_day else block.start,
                end_time=ALL_DAY_END if block.all_day else block.end,
                label=block.label,
                all_day=block.all_day,
            ))
        await self.db.flush()

        logger.info(
            "Replaced %s %s for user %s with %d block(s)",
            week_key, day, user_id, len(blocks)
        )
        return await self.get_week(user_id, week_key)

    async def delete_block(self, user_id: int, week_key: str, day: str, block_id: UUID) -> bool:
        """Remove one block. Returns False when nothing matched."""
        day = normalize_day_name(day)
        parse_week_key(week_key)

        await self._lock_slot(user_id, week_key, day)
        result = await self.db.execute(
            delete(Schedule)
            .where(
                Schedule.id == block_id,
                Schedule.user_id == user_id,
                Schedule.week_key == week_key,
                Schedule.day == day,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()

        removed = result.rowcount > 0
        if removed:
            logger.info("Deleted block %s from %s %s for user %s", block_id, week_key, day, user_id)
        return removed
