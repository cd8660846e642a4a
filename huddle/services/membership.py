"""Membership ledger: who belongs to a conversation and who owns it.

Per member the state machine is ``non-member -> member -> owner``; owners are
always members, so removing a membership row also drops ownership. Channel
owner permission is held by channel owners and by global owners who are
members. For a DM the creator holds the only owner row, and DMs have no
invite/join/owner transitions; members may only leave.

Mutating operations lock the conversation row first so the permission check
and its effect happen atomically when several workers share the database.
"""

import logging

from sqlalchemy.orm import Session

from huddle.models.conversation import Conversation, ConversationMember
from huddle.models.enums import ConversationKind
from huddle.models.user import User
from huddle.services.errors import AccessError, InputError
from huddle.services.identity import IdentityService
from huddle.services.notifications import NotificationService

logger = logging.getLogger(__name__)


class MembershipService:
    """Service for conversation lookup, membership and ownership rules."""

    def __init__(self, db: Session):
        self.db = db
        self.identity = IdentityService(db)
        self.notifications = NotificationService(db)

    # Lookup

    def get_conversation(
        self, conversation_id: int, kind: ConversationKind, lock: bool = False
    ) -> Conversation:
        """Get a conversation of the given kind or raise InputError."""
        query = self.db.query(Conversation).filter(
            Conversation.id == conversation_id, Conversation.kind == kind
        )
        if lock:
            query = query.with_for_update()
        conversation = query.first()
        if conversation is None:
            raise InputError(f"Invalid {kind.value} id {conversation_id}")
        return conversation

    def get_channel(self, channel_id: int, lock: bool = False) -> Conversation:
        return self.get_conversation(channel_id, ConversationKind.CHANNEL, lock=lock)

    def get_dm(self, dm_id: int, lock: bool = False) -> Conversation:
        return self.get_conversation(dm_id, ConversationKind.DM, lock=lock)

    def get_member(self, conversation: Conversation, user_id: int) -> ConversationMember | None:
        return (
            self.db.query(ConversationMember)
            .filter(
                ConversationMember.conversation_id == conversation.id,
                ConversationMember.user_id == user_id,
            )
            .first()
        )

    def is_member(self, conversation: Conversation, user_id: int) -> bool:
        return self.get_member(conversation, user_id) is not None

    def require_member(self, conversation: Conversation, user: User) -> ConversationMember:
        """Return the caller's membership or raise AccessError."""
        member = self.get_member(conversation, user.id)
        if member is None:
            raise AccessError(f"User is not a member of {conversation.kind} {conversation.id}")
        return member

    def has_owner_permission(self, conversation: Conversation, user: User) -> bool:
        """Owner rows always count; global ownership only counts in channels the user is in."""
        member = self.get_member(conversation, user.id)
        if member is None:
            return False
        if member.is_owner:
            return True
        return conversation.is_channel and user.is_global_owner

    def members(self, conversation: Conversation) -> list[ConversationMember]:
        return (
            self.db.query(ConversationMember)
            .filter(ConversationMember.conversation_id == conversation.id)
            .order_by(ConversationMember.id)
            .all()
        )

    def owner_count(self, conversation: Conversation) -> int:
        return (
            self.db.query(ConversationMember)
            .filter(
                ConversationMember.conversation_id == conversation.id,
                ConversationMember.is_owner.is_(True),
            )
            .count()
        )

    def conversations_for(self, user: User, kind: ConversationKind) -> list[Conversation]:
        """Conversations of a kind the user currently belongs to."""
        return (
            self.db.query(Conversation)
            .join(ConversationMember, ConversationMember.conversation_id == Conversation.id)
            .filter(ConversationMember.user_id == user.id, Conversation.kind == kind)
            .order_by(Conversation.id)
            .all()
        )

    def conversation_ids_for(self, user: User) -> list[int]:
        rows = (
            self.db.query(ConversationMember.conversation_id)
            .filter(ConversationMember.user_id == user.id)
            .all()
        )
        return [conversation_id for (conversation_id,) in rows]

    def add_member(
        self, conversation: Conversation, user_id: int, is_owner: bool = False
    ) -> ConversationMember:
        """Insert a membership row. Callers check for duplicates first."""
        member = ConversationMember(
            conversation_id=conversation.id, user_id=user_id, is_owner=is_owner
        )
        self.db.add(member)
        return member

    # Transitions

    def join(self, user: User, channel_id: int) -> None:
        """Join a channel. Private channels admit global owners only."""
        channel = self.get_channel(channel_id, lock=True)
        if self.is_member(channel, user.id):
            raise InputError("User is already a member of the channel")
        if not channel.is_public and not user.is_global_owner:
            raise AccessError("Cannot join a private channel")

        self.add_member(channel, user.id)
        self.db.commit()
        logger.info(f"User {user.id} joined channel {channel.id}")

    def invite(self, user: User, channel_id: int, target_id: int) -> None:
        """Add another user to a channel the inviter belongs to.

        Global ownership gives no bypass here: a non-member inviting anyone,
        themself included, is rejected.
        """
        channel = self.get_channel(channel_id, lock=True)
        target = self.identity.get_active_user(target_id)
        if self.is_member(channel, target.id):
            raise InputError("User is already a member of the channel")
        self.require_member(channel, user)

        self.add_member(channel, target.id)
        self.db.flush()
        self.notifications.notify_added(channel, user, [target.id])
        self.db.commit()
        logger.info(f"User {user.id} invited user {target.id} to channel {channel.id}")

    def leave(self, user: User, conversation: Conversation) -> None:
        """Leave a channel or DM. Ownership is not transferred to anyone."""
        member = self.require_member(conversation, user)

        self.db.delete(member)
        self.db.commit()
        logger.info(f"User {user.id} left {conversation.kind} {conversation.id}")

    def leave_channel(self, user: User, channel_id: int) -> None:
        self.leave(user, self.get_channel(channel_id, lock=True))

    def leave_dm(self, user: User, dm_id: int) -> None:
        self.leave(user, self.get_dm(dm_id, lock=True))

    def add_owner(self, user: User, channel_id: int, target_id: int) -> None:
        channel = self.get_channel(channel_id, lock=True)
        target = self.identity.get_active_user(target_id)
        target_member = self.get_member(channel, target.id)
        if target_member is None:
            raise InputError("User is not a member of the channel")
        if not self.has_owner_permission(channel, user):
            raise AccessError("User does not have owner permission in the channel")
        if target_member.is_owner:
            raise InputError("User is already an owner of the channel")

        target_member.is_owner = True
        self.db.commit()
        logger.info(f"User {user.id} made user {target.id} an owner of channel {channel.id}")

    def remove_owner(self, user: User, channel_id: int, target_id: int) -> None:
        channel = self.get_channel(channel_id, lock=True)
        target = self.identity.get_active_user(target_id)
        target_member = self.get_member(channel, target.id)
        if target_member is None or not target_member.is_owner:
            raise InputError("User is not an owner of the channel")
        if self.owner_count(channel) == 1:
            raise InputError("Cannot remove the only owner of the channel")
        if not self.has_owner_permission(channel, user):
            raise AccessError("User does not have owner permission in the channel")

        target_member.is_owner = False
        self.db.commit()
        logger.info(f"User {user.id} removed owner {target.id} from channel {channel.id}")

    def details(self, user: User, conversation: Conversation) -> dict:
        """Name, visibility and member profiles; members only."""
        self.require_member(conversation, user)
        members = self.members(conversation)
        return {
            "name": conversation.name,
            "is_public": conversation.is_public,
            "owner_members": [m.user for m in members if m.is_owner],
            "all_members": [m.user for m in members],
        }
