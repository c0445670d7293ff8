"""
Week Endpoints
Resolve dates and week keys for navigation between weeks
"""
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, status

from homeboard.core.config import settings
from homeboard.core.exceptions import ValidationError
from homeboard.core.timezone import household_now
from homeboard.schemas.schedule import WeekContextResponse
from homeboard.utils import week

router = APIRouter()


def _today_name() -> str:
    return week.current_day_name(household_now(), settings.day_rollover_hour)


@router.get("/current", response_model=WeekContextResponse)
async def get_current_week(
    on: Optional[date] = Query(None, alias="date", description="Any date in the wanted week, defaults to today"),
) -> Any:
    """
    Resolve the week containing ``date`` (or today).
    ``currentDay`` highlights today on the board, honouring the night rollover.
    """
    now = household_now()
    context = week.resolve(on or now.date(), today=now.date())
    return WeekContextResponse.from_context(context, current_day=_today_name())


@router.get("/{week_key}", response_model=WeekContextResponse)
async def get_week(week_key: str) -> Any:
    try:
        context = week.resolve_key(week_key)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return WeekContextResponse.from_context(context, current_day=_today_name())