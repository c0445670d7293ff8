"""
Authorization rules for message mutations.

There are no roles in the household: identifiers are trusted as supplied,
and the only restricted action is deleting someone else's message.
"""
from enum import Enum
from typing import Optional

from homeboard.core.exceptions import AuthorizationError
from homeboard.models.message import Message


class MessageAction(str, Enum):
    """Mutations a user can attempt on a message"""
    DELETE = "delete"
    MARK_READ = "mark_read"


def can_delete(message: Message, requester_id: Optional[int]) -> bool:
    """Only the sender may delete a message."""
    return requester_id is not None and requester_id == message.sender_id


def can_mark_read(message: Message, user_id: Optional[int]) -> bool:
    """Any household member may acknowledge any message."""
    return user_id is not None


def is_allowed(action: MessageAction, message: Message, user_id: Optional[int]) -> bool:
    if action == MessageAction.DELETE:
        return can_delete(message, user_id)
    if action == MessageAction.MARK_READ:
        return can_mark_read(message, user_id)
    return False


def require(action: MessageAction, message: Message, user_id: Optional[int]) -> None:
    """Raise AuthorizationError unless ``user_id`` may perform ``action``."""
    if not is_allowed(action, message, user_id):
        raise AuthorizationError(f"User {user_id} may not {action.value} message {message.id}")
