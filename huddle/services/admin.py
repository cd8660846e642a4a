"""Administration service for global owners."""

import logging

from sqlalchemy.orm import Session

from huddle.database import Base
from huddle.models.conversation import ConversationMember
from huddle.models.enums import GlobalPermission
from huddle.models.message import Message
from huddle.models.user import User
from huddle.services.errors import AccessError, InputError
from huddle.services.identity import IdentityService
from huddle.services.standup import StandupScheduler

logger = logging.getLogger(__name__)

REMOVED_MESSAGE = "Removed user"


class AdminService:
    """Service for platform-wide user management."""

    def __init__(self, db: Session):
        self.db = db
        self.identity = IdentityService(db)

    def _global_owner_count(self) -> int:
        return (
            self.db.query(User)
            .filter(User.is_global_owner.is_(True), User.is_removed.is_(False))
            .count()
        )

    def _require_global_owner(self, user: User) -> None:
        if not user.is_global_owner:
            raise AccessError("User is not a global owner")

    def remove_user(self, actor: User, user_id: int) -> None:
        """Remove a user from the platform.

        They leave every conversation, their messages are replaced, their email
        and handle become free for reuse and all their sessions end.
        """
        target = self.identity.get_active_user(user_id)
        self._require_global_owner(actor)
        if target.is_global_owner and self._global_owner_count() == 1:
            raise InputError("Cannot remove the only global owner")

        self.db.query(ConversationMember).filter(ConversationMember.user_id == target.id).delete(
            synchronize_session=False
        )
        self.db.query(Message).filter(Message.sender_id == target.id).update(
            {Message.body: REMOVED_MESSAGE}, synchronize_session=False
        )
        self.identity.end_all_sessions(target)

        target.name_first = "Removed"
        target.name_last = "user"
        target.email = None
        target.handle = None
        target.is_global_owner = False
        target.is_removed = True
        self.db.commit()

        logger.info(f"Global owner {actor.id} removed user {target.id}")

    def change_permission(self, actor: User, user_id: int, permission_id: int) -> None:
        target = self.identity.get_active_user(user_id)
        try:
            permission = GlobalPermission(permission_id)
        except ValueError as e:
            raise InputError(f"Invalid permission id {permission_id}") from e

        make_owner = permission == GlobalPermission.OWNER
        if target.is_global_owner == make_owner:
            raise InputError("User already has that permission")
        if target.is_global_owner and self._global_owner_count() == 1:
            raise InputError("Cannot demote the only global owner")
        self._require_global_owner(actor)

        target.is_global_owner = make_owner
        self.db.commit()

        logger.info(f"Global owner {actor.id} set user {target.id} permission to {permission.name}")

    def clear(self, scheduler: StandupScheduler | None = None) -> None:
        """Wipe all persisted state and cancel pending standup flushes."""
        from huddle import models  # noqa: F401

        if scheduler is not None:
            scheduler.cancel_all()
        for table in reversed(Base.metadata.sorted_tables):
            self.db.execute(table.delete())
        self.db.commit()
        logger.warning("All data cleared")
