"""
Models module initialization
"""
from homeboard.models.user import User, DEFAULT_USERS
from homeboard.models.schedule import Schedule
from homeboard.models.message import Message, MessageRead

__all__ = [
    "User",
    "DEFAULT_USERS",
    "Schedule",
    "Message",
    "MessageRead",
]
