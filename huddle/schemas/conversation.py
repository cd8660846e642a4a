"""Channel and DM schemas."""

from pydantic import BaseModel, ConfigDict

from huddle.schemas.user import UserResponse


class ChannelCreate(BaseModel):
    """Create a new channel."""

    name: str
    is_public: bool = True


class DmCreate(BaseModel):
    """Create a DM with the listed users (the creator is added implicitly)."""

    user_ids: list[int]


class MemberTarget(BaseModel):
    """A user acted on by a membership operation."""

    user_id: int


class ConversationSummary(BaseModel):
    """Channel or DM id and name."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ChannelDetailsResponse(BaseModel):
    """Channel details with its owners and members."""

    name: str
    is_public: bool
    owner_members: list[UserResponse]
    all_members: list[UserResponse]


class DmDetailsResponse(BaseModel):
    """DM details with its members."""

    name: str
    members: list[UserResponse]
