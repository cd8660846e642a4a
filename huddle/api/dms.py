"""Direct message API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from huddle.api.dependencies import (
    get_conversation_service,
    get_current_user,
    get_membership_service,
    get_message_service,
)
from huddle.models.user import User
from huddle.schemas.conversation import ConversationSummary, DmCreate, DmDetailsResponse
from huddle.schemas.message import (
    MessageBody,
    MessageIdResponse,
    MessagePageResponse,
    MessageResponse,
)
from huddle.schemas.user import UserResponse
from huddle.services.conversations import ConversationService
from huddle.services.membership import MembershipService
from huddle.services.messages import MessageService

router = APIRouter(prefix="/api/v1/dms", tags=["dms"])


@router.post("", response_model=ConversationSummary, status_code=status.HTTP_201_CREATED)
def create_dm(
    dm_data: DmCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Create a DM between the caller and the listed users."""
    return conversations.create_dm(current_user, dm_data.user_ids)


@router.get("", response_model=list[ConversationSummary])
def list_dms(
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Get the DMs the caller is a member of."""
    return conversations.list_dms(current_user)


@router.get("/{dm_id}", response_model=DmDetailsResponse)
def get_dm_details(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Get a DM's name and members."""
    details = membership.details(current_user, membership.get_dm(dm_id))
    return DmDetailsResponse(
        name=details["name"],
        members=[UserResponse.model_validate(u) for u in details["all_members"]],
    )


@router.delete("/{dm_id}")
def remove_dm(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Delete a DM and all of its messages (creator only)."""
    conversations.remove_dm(current_user, dm_id)
    return {}


@router.post("/{dm_id}/leave")
def leave_dm(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Leave a DM."""
    membership.leave_dm(current_user, dm_id)
    return {}


@router.get("/{dm_id}/messages", response_model=MessagePageResponse)
def get_dm_messages(
    dm_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
    start: int = Query(default=0),
):
    """Get up to 50 DM messages starting at ``start``, newest first."""
    page = messages.page(current_user, messages.membership.get_dm(dm_id), start)
    return MessagePageResponse(
        messages=[MessageResponse.from_message(m, current_user.id) for m in page["messages"]],
        start=page["start"],
        end=page["end"],
    )


@router.post(
    "/{dm_id}/messages", response_model=MessageIdResponse, status_code=status.HTTP_201_CREATED
)
def send_dm_message(
    dm_id: int,
    message_data: MessageBody,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Send a message to a DM."""
    message = messages.send_to_dm(current_user, dm_id, message_data.message)
    return MessageIdResponse(message_id=message.id)
