"""User directory API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from huddle.api.dependencies import get_current_user, get_identity_service
from huddle.models.user import User
from huddle.schemas.user import EmailUpdate, HandleUpdate, NameUpdate, UserResponse
from huddle.services.identity import IdentityService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(
    current_user: Annotated[User, Depends(get_current_user)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Get every user that has not been removed."""
    return identity.list_users()


@router.put("/me/name", response_model=UserResponse)
def set_name(
    name_data: NameUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Change the caller's name (the handle is kept)."""
    return identity.set_name(current_user, name_data.name_first, name_data.name_last)


@router.put("/me/email", response_model=UserResponse)
def set_email(
    email_data: EmailUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Change the caller's email."""
    return identity.set_email(current_user, email_data.email)


@router.put("/me/handle", response_model=UserResponse)
def set_handle(
    handle_data: HandleUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Change the caller's handle."""
    return identity.set_handle(current_user, handle_data.handle)


@router.get("/{user_id}", response_model=UserResponse)
def get_profile(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Get a user's profile, including removed users."""
    return identity.get_user(user_id)
