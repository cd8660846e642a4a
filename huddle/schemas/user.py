"""User profile schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserResponse(BaseModel):
    """Public profile of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str | None
    name_first: str
    name_last: str
    handle: str | None


class NameUpdate(BaseModel):
    """Change the caller's name."""

    name_first: str
    name_last: str


class EmailUpdate(BaseModel):
    """Change the caller's email."""

    email: EmailStr = Field(..., max_length=255)


class HandleUpdate(BaseModel):
    """Change the caller's handle."""

    handle: str


class PermissionChange(BaseModel):
    """Set a user's global permission (1 = owner, 2 = member)."""

    permission_id: int
