"""
Seed the household – idempotent.

Creates the default household members if the users table is empty and,
with --sample-week, fills the current week with the sample availability
the board was first demoed with.

Usage (from the project root, with .env pointing to target DB):
    python -m scripts.seed_household
    python -m scripts.seed_household --sample-week
    python -m scripts.seed_household --create-tables --sample-week
"""

import argparse
import asyncio
from datetime import time

import homeboard.models  # noqa: F401  registers every table for --create-tables
from homeboard.core.timezone import household_today
from homeboard.db.database import async_session_maker, create_tables
from homeboard.schemas.schedule import TimeBlockIn
from homeboard.services.schedule_service import ScheduleService
from homeboard.services.user_service import UserService
from homeboard.utils.week import resolve


def _work(start: str, end: str) -> dict:
    return {"start": time.fromisoformat(start), "end": time.fromisoformat(end), "label": "Work"}


def _off(label: str = "Day off") -> dict:
    return {"label": label, "all_day": True}


SAMPLE_WEEK = {
    1: {
        "Monday": [_work("16:00", "23:00")],
        "Tuesday": [_work("17:00", "22:00")],
        "Wednesday": [_work("12:00", "22:00")],
        "Thursday": [_work("12:00", "23:00")],
        "Friday": [_work("17:00", "23:30")],
        "Saturday": [_work("17:00", "23:30")],
        "Sunday": [_work("16:00", "22:00")],
    },
    2: {
        "Monday": [_work("10:00", "19:45")],
        "Tuesday": [_off()],
        "Wednesday": [_off()],
        "Thursday": [_work("10:00", "19:45")],
        "Friday": [_off()],
        "Saturday": [_work("06:00", "18:45")],
        "Sunday": [_work("11:00", "19:45")],
    },
    3: {
        "Monday": [_work("09:00", "17:00")],
        "Tuesday": [_work("09:00", "21:00")],
        "Wednesday": [_work("09:00", "17:00")],
        "Thursday": [_work("09:00", "17:00")],
        "Friday": [_off()],
        "Saturday": [_off("Out of town")],
        "Sunday": [_off("Out of town")],
    },
}


async def seed_household(sample_week: bool = False, create: bool = False):
    if create:
        await create_tables()

    async with async_session_maker() as session:
        users = await UserService.seed_default_users(session)
        print(f"Household has {len(users)} member(s):")
        for user in users:
            print(f"  {user.id}: {user.name} ({user.color})")

        if sample_week:
            week_key = resolve(household_today()).week_key
            service = ScheduleService(session)
            known_ids = {user.id for user in users}
            for user_id, days in SAMPLE_WEEK.items():
                if user_id not in known_ids:
                    continue
                for day, blocks in days.items():
                    await service.replace_day(
                        user_id, week_key, day, [TimeBlockIn(**block) for block in blocks]
                    )
            print(f"Sample availability written for week {week_key}")

        await session.commit()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the household")
    parser.add_argument("--sample-week", action="store_true", help="Also fill the current week with sample availability")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first (local SQLite, no alembic)")
    args = parser.parse_args()
    asyncio.run(seed_household(sample_week=args.sample_week, create=args.create_tables))
