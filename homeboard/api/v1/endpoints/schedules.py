"""
Schedule Endpoints
"""
import logging
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from homeboard.api import deps
from homeboard.core.exceptions import ValidationError
from homeboard.schemas.schedule import (
    BlockDeleteResponse,
    DayReplaceRequest,
    HouseholdWeekResponse,
    TimeBlockResponse,
    UserScheduleResponse,
)
from homeboard.services.schedule_service import ScheduleService, UserSchedule
from homeboard.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize_week(week: UserSchedule) -> Dict[str, List[TimeBlockResponse]]:
    return {
        day: [TimeBlockResponse.from_record(record) for record in records]
        for day, records in week.items()
    }


async def _require_user(service: ScheduleService, user_id: int) -> None:
    if not await UserService.get_user(service.db, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("/week/{week_key}", response_model=HouseholdWeekResponse)
async def get_household_week(
    week_key: str,
    service: ScheduleService = Depends(deps.get_schedule_service),
) -> Any:
    """
    Get every household member's schedule for one week.
    """
    try:
        schedules = await service.get_household_week(week_key)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return HouseholdWeekResponse(
        week_key=week_key,
        schedules={user_id: _serialize_week(week) for user_id, week in schedules.items()},
    )


@router.get("/{user_id}/{week_key}", response_model=UserScheduleResponse)
async def get_user_week(
    user_id: int,
    week_key: str,
    service: ScheduleService = Depends(deps.get_schedule_service),
) -> Any:
    """
    Get one user's schedule for a week. All seven days are always present.
    """
    await _require_user(service, user_id)
    try:
        week = await service.get_week(user_id, week_key)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return UserScheduleResponse(user_id=user_id, week_key=week_key, schedule=_serialize_week(week))


@router.put("/{user_id}/{week_key}/{day}", response_model=UserScheduleResponse)
async def replace_day(
    user_id: int,
    week_key: str,
    day: str,
    request: DayReplaceRequest,
    service: ScheduleService = Depends(deps.get_schedule_service),
) -> Any:
    """
    Replace all blocks of one day. The whole request is rejected if any
    block is malformed or two blocks overlap.
    """
    await _require_user(service, user_id)
    try:
        week = await service.replace_day(user_id, week_key, day, request.blocks)
    except ValidationError as e:
        logger.warning(f"Rejected schedule for user {user_id} {week_key} {day}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return UserScheduleResponse(user_id=user_id, week_key=week_key, schedule=_serialize_week(week))


@router.delete("/{user_id}/{week_key}/{day}/{block_id}", response_model=BlockDeleteResponse)
async def delete_block(
    user_id: int,
    week_key: str,
    day: str,
    block_id: UUID,
    service: ScheduleService = Depends(deps.get_schedule_service),
) -> Any:
    """
    Delete one block. ``success`` is false when no such block existed.
    """
    try:
        removed = await service.delete_block(user_id, week_key, day, block_id)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return BlockDeleteResponse(success=removed)
