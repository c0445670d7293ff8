"""
Pydantic Schemas for User
"""
from datetime import datetime

from pydantic import BaseModel


class UserBrief(BaseModel):
    """Display info joined onto messages and read receipts"""
    id: int
    name: str
    color: str
    initial: str

    class Config:
        from_attributes = True


class UserResponse(UserBrief):
    """Schema for user response"""
    created_at: datetime
