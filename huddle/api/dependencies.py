"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from huddle.database import get_db
from huddle.models.user import User
from huddle.services.admin import AdminService
from huddle.services.auth import resolve_user
from huddle.services.conversations import ConversationService
from huddle.services.errors import AccessError
from huddle.services.identity import IdentityService
from huddle.services.membership import MembershipService
from huddle.services.messages import MessageService
from huddle.services.notifications import NotificationService
from huddle.services.search import SearchService
from huddle.services.standup import StandupScheduler, StandupService, get_standup_scheduler

# Missing credentials are reported as AccessError rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def get_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Get the raw bearer token from the request."""
    if credentials is None:
        raise AccessError("Missing authentication token")
    return credentials.credentials


def get_current_user(
    token: Annotated[str, Depends(get_token)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from a live session token."""
    user = resolve_user(db, token)
    if user is None:
        raise AccessError("Invalid token")
    return user


def get_identity_service(db: Annotated[Session, Depends(get_db)]) -> IdentityService:
    return IdentityService(db)


def get_membership_service(db: Annotated[Session, Depends(get_db)]) -> MembershipService:
    return MembershipService(db)


def get_conversation_service(db: Annotated[Session, Depends(get_db)]) -> ConversationService:
    return ConversationService(db)


def get_message_service(db: Annotated[Session, Depends(get_db)]) -> MessageService:
    return MessageService(db)


def get_standup_service(
    db: Annotated[Session, Depends(get_db)],
    scheduler: Annotated[StandupScheduler, Depends(get_standup_scheduler)],
) -> StandupService:
    """Get standup service wired to the process-wide flush scheduler."""
    return StandupService(db, scheduler)


def get_search_service(db: Annotated[Session, Depends(get_db)]) -> SearchService:
    return SearchService(db)


def get_notification_service(db: Annotated[Session, Depends(get_db)]) -> NotificationService:
    return NotificationService(db)


def get_admin_service(db: Annotated[Session, Depends(get_db)]) -> AdminService:
    return AdminService(db)
