"""Channel API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from huddle.api.dependencies import (
    get_conversation_service,
    get_current_user,
    get_membership_service,
    get_message_service,
    get_standup_service,
)
from huddle.models.user import User
from huddle.schemas.conversation import (
    ChannelCreate,
    ChannelDetailsResponse,
    ConversationSummary,
    MemberTarget,
)
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
from huddle.services.standup import StandupService

router = APIRouter(prefix="/api/v1/channels", tags=["channels"])


@router.post("", response_model=ConversationSummary, status_code=status.HTTP_201_CREATED)
def create_channel(
    channel_data: ChannelCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Create a channel owned by the caller."""
    return conversations.create_channel(current_user, channel_data.name, channel_data.is_public)


@router.get("", response_model=list[ConversationSummary])
def list_channels(
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Get the channels the caller is a member of."""
    return conversations.list_channels(current_user)


@router.get("/all", response_model=list[ConversationSummary])
def list_all_channels(
    current_user: Annotated[User, Depends(get_current_user)],
    conversations: Annotated[ConversationService, Depends(get_conversation_service)],
):
    """Get every channel, private ones included."""
    return conversations.list_all_channels()


@router.get("/{channel_id}", response_model=ChannelDetailsResponse)
def get_channel_details(
    channel_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Get a channel's name, visibility, owners and members."""
    details = membership.details(current_user, membership.get_channel(channel_id))
    return ChannelDetailsResponse(
        name=details["name"],
        is_public=details["is_public"],
        owner_members=[UserResponse.model_validate(u) for u in details["owner_members"]],
        all_members=[UserResponse.model_validate(u) for u in details["all_members"]],
    )


@router.post("/{channel_id}/join")
def join_channel(
    channel_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Join a channel."""
    membership.join(current_user, channel_id)
    return {}


@router.post("/{channel_id}/invite")
def invite_to_channel(
    channel_id: int,
    target: MemberTarget,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Add another user to a channel the caller belongs to."""
    membership.invite(current_user, channel_id, target.user_id)
    return {}


@router.post("/{channel_id}/leave")
def leave_channel(
    channel_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Leave a channel."""
    membership.leave_channel(current_user, channel_id)
    return {}


@router.post("/{channel_id}/owners")
def add_owner(
    channel_id: int,
    target: MemberTarget,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Make a member an owner of the channel."""
    membership.add_owner(current_user, channel_id, target.user_id)
    return {}


@router.delete("/{channel_id}/owners/{user_id}")
def remove_owner(
    channel_id: int,
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    membership: Annotated[MembershipService, Depends(get_membership_service)],
):
    """Revoke a member's channel ownership."""
    membership.remove_owner(current_user, channel_id, user_id)
    return {}


@router.get("/{channel_id}/messages", response_model=MessagePageResponse)
def get_channel_messages(
    channel_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
    standups: Annotated[StandupService, Depends(get_standup_service)],
    start: int = Query(default=0),
):
    """Get up to 50 channel messages starting at ``start``, newest first."""
    channel = messages.membership.get_channel(channel_id)
    standups.flush_due([channel.id])
    page = messages.page(current_user, channel, start)
    return MessagePageResponse(
        messages=[MessageResponse.from_message(m, current_user.id) for m in page["messages"]],
        start=page["start"],
        end=page["end"],
    )


@router.post(
    "/{channel_id}/messages",
    response_model=MessageIdResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_channel_message(
    channel_id: int,
    message_data: MessageBody,
    current_user: Annotated[User, Depends(get_current_user)],
    messages: Annotated[MessageService, Depends(get_message_service)],
):
    """Send a message to a channel."""
    message = messages.send_to_channel(current_user, channel_id, message_data.message)
    return MessageIdResponse(message_id=message.id)
