"""
Week calculations shared by the schedule store and the API.

Weeks follow ISO-8601: they start on Monday and are keyed as ``YYYY-Www``
(e.g. ``2024-W05``). Keys are zero padded, so sorting them as strings sorts
them chronologically. The key depends only on the calendar date; the wall
clock is consulted only for ``is_current_week`` and the description.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from homeboard.core.exceptions import ValidationError
from homeboard.core.timezone import household_today

DAY_NAMES: Tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

WEEK_KEY_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")


@dataclass(frozen=True)
class WeekContext:
    """A resolved calendar week"""
    week_key: str
    week_start: date
    week_end: date
    is_current_week: bool
    description: str
    previous_week_key: str
    next_week_key: str
    days: List[Tuple[str, date]] = field(default_factory=list)


def week_key_for(d: date) -> str:
    iso_year, iso_week, _ = d.isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"


def week_start_for(d: date) -> date:
    return d - timedelta(days=d.weekday())


def parse_week_key(week_key: str) -> date:
    """Return the Monday of the week identified by ``week_key``."""
    match = WEEK_KEY_PATTERN.match(week_key or "")
    if not match:
        raise ValidationError(f"Invalid week key '{week_key}', expected YYYY-Www")
    year, week = int(match.group(1)), int(match.group(2))
    try:
        return date.fromisocalendar(year, week, 1)
    except ValueError:
        raise ValidationError(f"Week {week} does not exist in {year}")


def normalize_day_name(day: str) -> str:
    """Accept any capitalisation of a weekday name."""
    normalized = (day or "").strip().capitalize()
    if normalized not in DAY_NAMES:
        raise ValidationError(f"Invalid day name: {day}")
    return normalized


def date_for_day(week_key: str, day: str) -> date:
    start = parse_week_key(week_key)
    return start + timedelta(days=DAY_NAMES.index(normalize_day_name(day)))


def week_offset(d: date, today: date) -> int:
    """0 for the current week, -1 for last week, 1 for next week..."""
    diff = week_start_for(d) - week_start_for(today)
    return diff.days // 7


def describe_week(offset: int) -> str:
    if offset == 0:
        return "This Week"
    if offset == -1:
        return "Last Week"
    if offset == 1:
        return "Next Week"
    if offset < 0:
        return f"{abs(offset)} weeks ago"
    return f"In {offset} weeks"


def resolve(d: date, today: Optional[date] = None) -> WeekContext:
    """Resolve any calendar date to the week containing it."""
    if isinstance(d, datetime):
        d = d.date()
    if today is None:
        today = household_today()

    start = week_start_for(d)
    offset = week_offset(d, today)
    return WeekContext(
        week_key=week_key_for(start),
        week_start=start,
        week_end=start + timedelta(days=6),
        is_current_week=offset == 0,
        description=describe_week(offset),
        previous_week_key=week_key_for(start - timedelta(days=7)),
        next_week_key=week_key_for(start + timedelta(days=7)),
        days=[(name, start + timedelta(days=i)) for i, name in enumerate(DAY_NAMES)],
    )


def resolve_key(week_key: str, today: Optional[date] = None) -> WeekContext:
    return resolve(parse_week_key(week_key), today=today)


def current_day_name(now: datetime, rollover_hour: int = 6) -> str:
    """
    Name of the household's current day.
    Times before ``rollover_hour`` are still considered part of the previous day.
    """
    if now.hour < rollover_hour:
        now = now - timedelta(days=1)
    return DAY_NAMES[now.weekday()]
