"""
Schemas module initialization
"""
from homeboard.schemas.user import UserBrief, UserResponse
from homeboard.schemas.schedule import (
    TimeBlockIn,
    TimeBlockResponse,
    DayReplaceRequest,
    UserScheduleResponse,
    HouseholdWeekResponse,
    BlockDeleteResponse,
    WeekContextResponse,
)
from homeboard.schemas.message import (
    MessageCreate,
    MessageMarkReadRequest,
    MessageReadResponse,
    MessageResponse,
    MessageListResponse,
    MessageCreatedResponse,
    SuccessResponse,
    UnreadCountResponse,
)

__all__ = [
    "UserBrief",
    "UserResponse",
    "TimeBlockIn",
    "TimeBlockResponse",
    "DayReplaceRequest",
    "UserScheduleResponse",
    "HouseholdWeekResponse",
    "BlockDeleteResponse",
    "WeekContextResponse",
    "MessageCreate",
    "MessageMarkReadRequest",
    "MessageReadResponse",
    "MessageResponse",
    "MessageListResponse",
    "MessageCreatedResponse",
    "SuccessResponse",
    "UnreadCountResponse",
]
