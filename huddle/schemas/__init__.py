"""Pydantic schemas for API requests and responses."""

from huddle.schemas.auth import AuthResponse, UserLogin, UserRegister
from huddle.schemas.conversation import (
    ChannelCreate,
    ChannelDetailsResponse,
    ConversationSummary,
    DmCreate,
    DmDetailsResponse,
    MemberTarget,
)
from huddle.schemas.message import (
    MessageBody,
    MessageIdResponse,
    MessagePageResponse,
    MessageResponse,
    MessageShare,
    ReactRequest,
    SearchResponse,
)
from huddle.schemas.notification import NotificationResponse
from huddle.schemas.standup import StandupActiveResponse, StandupStart, StandupStartResponse
from huddle.schemas.user import (
    EmailUpdate,
    HandleUpdate,
    NameUpdate,
    PermissionChange,
    UserResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "NameUpdate",
    "EmailUpdate",
    "HandleUpdate",
    "PermissionChange",
    "ChannelCreate",
    "ChannelDetailsResponse",
    "ConversationSummary",
    "DmCreate",
    "DmDetailsResponse",
    "MemberTarget",
    "MessageBody",
    "MessageIdResponse",
    "MessagePageResponse",
    "MessageResponse",
    "MessageShare",
    "ReactRequest",
    "SearchResponse",
    "StandupStart",
    "StandupStartResponse",
    "StandupActiveResponse",
    "NotificationResponse",
]
