"""Conversation service: creating, listing and removing channels and DMs."""

import logging

from sqlalchemy.orm import Session

from huddle.models.conversation import Conversation, ConversationMember
from huddle.models.enums import ConversationKind
from huddle.models.user import User
from huddle.services.errors import AccessError, InputError
from huddle.services.membership import MembershipService
from huddle.services.messages import MessageService

logger = logging.getLogger(__name__)

CHANNEL_NAME_MIN_LENGTH = 1
CHANNEL_NAME_MAX_LENGTH = 20


class ConversationService:
    """Service for channel and DM lifecycle."""

    def __init__(self, db: Session):
        self.db = db
        self.membership = MembershipService(db)

    def create_channel(self, user: User, name: str, is_public: bool) -> Conversation:
        """Create a channel whose creator is its sole member and owner."""
        if not CHANNEL_NAME_MIN_LENGTH <= len(name) <= CHANNEL_NAME_MAX_LENGTH:
            raise InputError("Channel name must be between 1 and 20 characters")

        channel = Conversation(
            kind=ConversationKind.CHANNEL,
            name=name,
            is_public=is_public,
            creator_id=user.id,
        )
        self.db.add(channel)
        self.db.flush()
        self.membership.add_member(channel, user.id, is_owner=True)
        self.db.commit()
        self.db.refresh(channel)

        logger.info(f"User {user.id} created channel {channel.id} '{name}'")
        return channel

    def create_dm(self, user: User, user_ids: list[int]) -> Conversation:
        """Create a DM between the creator and the listed users.

        The list must name distinct existing users and must not include the
        creator. The name is every member's handle, sorted, comma-joined.
        """
        all_ids = [*user_ids, user.id]
        if len(all_ids) != len(set(all_ids)):
            raise InputError("User ids must be unique and must not include the creator")
        invitees = [self.membership.identity.get_active_user(uid) for uid in user_ids]

        handles = sorted([user.handle, *(u.handle for u in invitees)])
        dm = Conversation(
            kind=ConversationKind.DM,
            name=", ".join(handles),
            is_public=None,
            creator_id=user.id,
        )
        self.db.add(dm)
        self.db.flush()

        # The creator's owner row is what lets them remove the DM or pin in it
        self.membership.add_member(dm, user.id, is_owner=True)
        for invitee in invitees:
            self.membership.add_member(dm, invitee.id)
        self.db.flush()
        self.membership.notifications.notify_added(dm, user, [u.id for u in invitees])
        self.db.commit()
        self.db.refresh(dm)

        logger.info(f"User {user.id} created DM {dm.id} with {len(invitees)} other member(s)")
        return dm

    def list_channels(self, user: User) -> list[Conversation]:
        return self.membership.conversations_for(user, ConversationKind.CHANNEL)

    def list_all_channels(self) -> list[Conversation]:
        """Every channel, private ones included."""
        return (
            self.db.query(Conversation)
            .filter(Conversation.kind == ConversationKind.CHANNEL)
            .order_by(Conversation.id)
            .all()
        )

    def list_dms(self, user: User) -> list[Conversation]:
        return self.membership.conversations_for(user, ConversationKind.DM)

    def remove_dm(self, user: User, dm_id: int) -> None:
        """Delete a DM and everything in it. Only its creator, while still a member, may."""
        dm = self.membership.get_dm(dm_id, lock=True)
        member = self.membership.require_member(dm, user)
        if dm.creator_id != user.id or not member.is_owner:
            raise AccessError("Only the DM creator can remove it")

        purged = MessageService(self.db).purge_conversation(dm)
        self.db.query(ConversationMember).filter(
            ConversationMember.conversation_id == dm.id
        ).delete(synchronize_session=False)
        self.db.query(Conversation).filter(Conversation.id == dm.id).delete(
            synchronize_session=False
        )
        self.db.commit()

        logger.info(f"User {user.id} removed DM {dm_id} and {purged} message(s)")
