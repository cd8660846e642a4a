"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from huddle.api.dependencies import get_current_user, get_identity_service, get_token
from huddle.models.user import User
from huddle.schemas.auth import AuthResponse, UserLogin, UserRegister
from huddle.schemas.user import UserResponse
from huddle.services.identity import IdentityService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Register a new user and log them in."""
    user, access_token = identity.register(
        user_data.email, user_data.password, user_data.name_first, user_data.name_last
    )
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """Login with email and password. Every login opens a new session."""
    user, access_token = identity.login(credentials.email, credentials.password)
    return AuthResponse(access_token=access_token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout")
def logout(
    token: Annotated[str, Depends(get_token)],
    identity: Annotated[IdentityService, Depends(get_identity_service)],
):
    """End this session only; the user's other sessions stay valid."""
    identity.logout(token)
    return {"message": "Logged out successfully"}
