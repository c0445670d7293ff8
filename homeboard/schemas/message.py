"""
Pydantic schemas for Messages
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from homeboard.schemas.user import UserBrief


class MessageCreate(BaseModel):
    """
    Schema for posting a message.
    Both fields are optional here so a missing value is answered with a 400
    by the endpoint rather than a validation 422.
    """
    user_id: Optional[int] = Field(None, alias="userId")
    content: Optional[str] = None

    class Config:
        populate_by_name = True


class MessageMarkReadRequest(BaseModel):
    user_id: Optional[int] = Field(None, alias="userId")

    class Config:
        populate_by_name = True


class MessageReadResponse(BaseModel):
    """Read receipt with the reader's display info"""
    id: UUID
    message_id: UUID = Field(alias="messageId")
    user_id: int = Field(alias="userId")
    read_at: datetime = Field(alias="readAt")
    user: Optional[UserBrief] = None

    class Config:
        from_attributes = True
        populate_by_name = True


class MessageResponse(BaseModel):
    """Schema for message response, camelCase on the wire like the requests"""
    id: UUID
    sender_id: int = Field(alias="senderId")
    content: str
    created_at: datetime = Field(alias="createdAt")
    deleted_at: Optional[datetime] = Field(None, alias="deletedAt")
    # Enriched fields
    sender: Optional[UserBrief] = None
    read_by: List[MessageReadResponse] = Field(default_factory=list, alias="readBy")
    is_read: Optional[bool] = Field(None, alias="isRead")  # For the requesting user

    class Config:
        populate_by_name = True


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]


class MessageCreatedResponse(BaseModel):
    message: MessageResponse


class SuccessResponse(BaseModel):
    success: bool


class UnreadCountResponse(BaseModel):
    unread_count: int = Field(alias="unreadCount")

    class Config:
        populate_by_name = True
