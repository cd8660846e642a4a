"""Notification API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from huddle.api.dependencies import get_current_user, get_notification_service
from huddle.models.user import User
from huddle.schemas.notification import NotificationResponse
from huddle.services.notifications import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
def get_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
):
    """Get the caller's 20 most recent notifications, newest first."""
    latest = notifications.latest_for(current_user)
    return [NotificationResponse.from_notification(n) for n in latest]
