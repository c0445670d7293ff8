"""
Timezone utilities for the backend.
All timestamps should be stored as timezone-aware UTC.
"""
from datetime import date, datetime, timezone
from typing import Optional

import pytz

from homeboard.core.config import settings


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    This should be used instead of datetime.utcnow() which returns
    a naive datetime that can be misinterpreted by PostgreSQL.
    """
    return datetime.now(timezone.utc)


def household_now(timezone_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the household's timezone."""
    tz = pytz.timezone(timezone_name or settings.household_timezone)
    return utc_now().astimezone(tz)


def household_today(timezone_name: Optional[str] = None) -> date:
    return household_now(timezone_name).date()
