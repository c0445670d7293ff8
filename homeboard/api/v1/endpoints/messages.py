"""
API endpoints for Messages
"""
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from homeboard.api import deps
from homeboard.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from homeboard.models.message import Message
from homeboard.schemas.message import (
    MessageCreate,
    MessageCreatedResponse,
    MessageListResponse,
    MessageMarkReadRequest,
    MessageReadResponse,
    MessageResponse,
    SuccessResponse,
    UnreadCountResponse,
)
from homeboard.schemas.user import UserBrief
from homeboard.services.message_service import MessageService
from homeboard.services.unread_service import UnreadTracker

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(message: Message, viewer_id: Optional[int] = None) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        sender_id=message.sender_id,
        content=message.content,
        created_at=message.created_at,
        deleted_at=message.deleted_at,
        sender=UserBrief.model_validate(message.sender) if message.sender else None,
        read_by=[MessageReadResponse.model_validate(read) for read in message.reads],
        is_read=MessageService.is_read_by(message, viewer_id),
    )


@router.get("/unread", response_model=UnreadCountResponse)
async def get_unread_count(
    user_id: Optional[int] = Query(None, alias="userId"),
    tracker: UnreadTracker = Depends(deps.get_unread_tracker),
) -> Any:
    """
    Badge count for the user. Polled by the client, never writes.
    """
    await deps.require_household_member(tracker.db, user_id)
    count = await tracker.count_unread(user_id)
    return UnreadCountResponse(unread_count=count)


@router.get("/", response_model=MessageListResponse)
async def list_messages(
    user_id: Optional[int] = Query(None, alias="userId"),
    limit: Optional[int] = Query(None, ge=1),
    service: MessageService = Depends(deps.get_message_service),
) -> Any:
    """
    Active messages, newest first, with read receipts.
    ``is_read`` on each message is relative to ``userId``.
    """
    await deps.require_household_member(service.db, user_id)
    messages = await service.list_active(limit=limit)
    return MessageListResponse(messages=[_to_response(m, user_id) for m in messages])


@router.post("/", response_model=MessageCreatedResponse, status_code=status.HTTP_201_CREATED)
async def post_message(
    request: MessageCreate,
    service: MessageService = Depends(deps.get_message_service),
) -> Any:
    """
    Post a new message as ``userId``.
    """
    if request.user_id is None or not request.content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID and content are required",
        )
    await deps.require_household_member(service.db, request.user_id)

    try:
        message = await service.post(request.user_id, request.content)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    message = await service.get_message(message.id, with_details=True)
    return MessageCreatedResponse(message=_to_response(message, request.user_id))


@router.post("/{message_id}/read", response_model=SuccessResponse)
async def mark_message_read(
    message_id: str,
    request: MessageMarkReadRequest,
    service: MessageService = Depends(deps.get_message_service),
) -> Any:
    """
    Acknowledge a message. Safe to repeat.
    """
    await deps.require_household_member(service.db, request.user_id)

    parsed_id = deps.parse_message_id(message_id)
    try:
        if parsed_id is None:
            raise NotFoundError(f"Message {message_id} not found")
        await service.mark_read(parsed_id, request.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return SuccessResponse(success=True)


@router.delete("/{message_id}", response_model=SuccessResponse)
async def delete_message(
    message_id: str,
    user_id: Optional[int] = Query(None, alias="userId"),
    service: MessageService = Depends(deps.get_message_service),
) -> Any:
    """
    Soft-delete a message. Only its sender may do this.
    Missing and not-yours answer the same 403 so ids cannot be probed.
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID is required",
        )

    parsed_id = deps.parse_message_id(message_id)
    deleted = False
    if parsed_id is not None:
        try:
            deleted = await service.soft_delete(parsed_id, user_id)
        except AuthorizationError as e:
            logger.warning(e.message)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Failed to delete message or unauthorized",
        )
    return SuccessResponse(success=True)
