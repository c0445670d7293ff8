"""
Pydantic Schemas for Schedules and Weeks
"""
from datetime import date, time
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from homeboard.models.schedule import Schedule
from homeboard.utils.week import WeekContext


class TimeBlockIn(BaseModel):
    """
    A block as submitted by the client.
    Shape rules (start < end, no overlaps) are checked by the schedule
    service so they are reported as a 400 with the failing rule.
    """
    id: Optional[UUID] = None
    start: Optional[time] = None
    end: Optional[time] = None
    label: str = Field("", max_length=100)
    all_day: bool = Field(False, alias="allDay")

    class Config:
        populate_by_name = True


class TimeBlockResponse(BaseModel):
    id: UUID
    start: time
    end: time
    label: str
    all_day: bool = Field(alias="allDay")
    block_date: Optional[date] = Field(None, alias="date")

    class Config:
        populate_by_name = True

    @field_serializer("start", "end")
    def _format_time(self, value: time) -> str:
        return value.strftime("%H:%M")

    @classmethod
    def from_record(cls, record: Schedule) -> "TimeBlockResponse":
        return cls(
            id=record.id,
            start=record.start_time,
            end=record.end_time,
            label=record.label,
            all_day=record.all_day,
            block_date=record.schedule_date,
        )


class DayReplaceRequest(BaseModel):
    """Body of PUT /schedules/{user_id}/{week_key}/{day}"""
    blocks: List[TimeBlockIn] = Field(default_factory=list)


class UserScheduleResponse(BaseModel):
    """One user's seven days for one week"""
    user_id: int = Field(alias="userId")
    week_key: str = Field(alias="weekKey")
    schedule: Dict[str, List[TimeBlockResponse]]

    class Config:
        populate_by_name = True


class HouseholdWeekResponse(BaseModel):
    """Every household member's schedule for one week, keyed by user id"""
    week_key: str = Field(alias="weekKey")
    schedules: Dict[int, Dict[str, List[TimeBlockResponse]]]

    class Config:
        populate_by_name = True


class BlockDeleteResponse(BaseModel):
    success: bool


class WeekDay(BaseModel):
    day: str
    day_date: date = Field(alias="date")

    class Config:
        populate_by_name = True


class WeekContextResponse(BaseModel):
    week_key: str = Field(alias="weekKey")
    week_start: date = Field(alias="weekStart")
    week_end: date = Field(alias="weekEnd")
    is_current_week: bool = Field(alias="isCurrentWeek")
    description: str
    previous_week_key: str = Field(alias="previousWeekKey")
    next_week_key: str = Field(alias="nextWeekKey")
    days: List[WeekDay]
    # Only set for the current week
    current_day: Optional[str] = Field(None, alias="currentDay")

    class Config:
        populate_by_name = True

    @classmethod
    def from_context(cls, context: WeekContext, current_day: Optional[str] = None) -> "WeekContextResponse":
        return cls(
            current_day=current_day if context.is_current_week else None,
            week_key=context.week_key,
            week_start=context.week_start,
            week_end=context.week_end,
            is_current_week=context.is_current_week,
            description=context.description,
            previous_week_key=context.previous_week_key,
            next_week_key=context.next_week_key,
            days=[WeekDay(day=name, day_date=d) for name, d in context.days],
        )
