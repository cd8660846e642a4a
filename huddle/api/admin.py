"""Administration API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from huddle.api.dependencies import get_admin_service, get_current_user
from huddle.config import get_settings
from huddle.models.user import User
from huddle.schemas.user import PermissionChange
from huddle.services.admin import AdminService
from huddle.services.standup import StandupScheduler, get_standup_scheduler

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.delete("/users/{user_id}")
def remove_user(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    admin: Annotated[AdminService, Depends(get_admin_service)],
):
    """Remove a user from the platform (global owners only)."""
    admin.remove_user(current_user, user_id)
    return {}


@router.post("/users/{user_id}/permission")
def change_permission(
    user_id: int,
    permission_data: PermissionChange,
    current_user: Annotated[User, Depends(get_current_user)],
    admin: Annotated[AdminService, Depends(get_admin_service)],
):
    """Grant or revoke global ownership (global owners only)."""
    admin.change_permission(current_user, user_id, permission_data.permission_id)
    return {}


@router.delete("/clear")
def clear(
    admin: Annotated[AdminService, Depends(get_admin_service)],
    scheduler: Annotated[StandupScheduler, Depends(get_standup_scheduler)],
):
    """Wipe all data. Used to isolate end-to-end test runs."""
    if not get_settings().allow_clear:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    admin.clear(scheduler)
    return {}
