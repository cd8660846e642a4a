"""Message API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from huddle.api.dependencies import get_current_user, get_message_service
from huddle.models.user import User
from huddle.schemas.message import MessageBody, MessageIdResponse, MessageShare, ReactRequest
from huddle.services.messages import MessageService

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


@router.put("/{message_id}")
def edit_message(
    message_id: int,
    message_data: MessageBody,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Edit a message; an empty body deletes it."""
    messages.edit(current_user, message_id, message_data.message)
    return {}


@router.delete("/{message_id}")
def remove_message(
    message_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Delete a message."""
    messages.remove(current_user, message_id)
    return {}


@router.post("/{message_id}/react")
def react_to_message(
    message_id: int,
    react_data: ReactRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """React to a message."""
    messages.react(current_user, message_id, react_data.react_id)
    return {}


@router.post("/{message_id}/unreact")
def unreact_to_message(
    message_id: int,
    react_data: ReactRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Remove the caller's react from a message."""
    messages.unreact(current_user, message_id, react_data.react_id)
    return {}


@router.post("/{message_id}/pin")
def pin_message(
    message_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Pin a message (owner permission required)."""
    messages.pin(current_user, message_id)
    return {}


@router.post("/{message_id}/unpin")
def unpin_message(
    message_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Unpin a message (owner permission required)."""
    messages.unpin(current_user, message_id)
    return {}


@router.post("/share", response_model=MessageIdResponse, status_code=status.HTTP_201_CREATED)
def share_message(
    share_data: MessageShare,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Share a message into a channel or DM."""
    shared = messages.share(
        current_user,
        share_data.og_message_id,
        share_data.message,
        share_data.channel_id,
        share_data.dm_id,
    )
    return MessageIdResponse(message_id=shared.id)
