"""Notification service for tags, reacts and membership adds."""

import logging
import re
from collections.abc import Iterable

from sqlalchemy.orm import Session

from huddle.models.conversation import Conversation, ConversationMember
from huddle.models.enums import NotificationKind
from huddle.models.notification import Notification
from huddle.models.user import User

logger = logging.getLogger(__name__)

NOTIFICATION_PAGE_SIZE = 20
TAG_PREVIEW_LENGTH = 20
TAG_PATTERN = re.compile(r"@([A-Za-z0-9]+)")


def tagged_handles(body: str) -> set[str]:
    """Handles mentioned as @handle in a message body."""
    return set(TAG_PATTERN.findall(body))


class NotificationService:
    """Service for creating and reading user notifications."""

    def __init__(self, db: Session):
        self.db = db

    def _add(
        self,
        user_ids: Iterable[int],
        conversation: Conversation,
        kind: NotificationKind,
        text: str,
    ) -> None:
        for user_id in user_ids:
            self.db.add(
                Notification(
                    user_id=user_id,
                    conversation_id=conversation.id,
                    conversation_kind=conversation.kind,
                    kind=kind,
                    text=text,
                )
            )

    def _member_ids(self, conversation: Conversation) -> set[int]:
        rows = (
            self.db.query(ConversationMember.user_id)
            .filter(ConversationMember.conversation_id == conversation.id)
            .all()
        )
        return {user_id for (user_id,) in rows}

    def notify_tags(self, conversation: Conversation, actor: User, body: str) -> None:
        """Notify current members whose handle is tagged in the body."""
        handles = tagged_handles(body)
        if not handles:
            return

        member_ids = self._member_ids(conversation)
        tagged = (
            self.db.query(User.id)
            .filter(User.handle.in_(handles), User.id.in_(member_ids))
            .all()
        )
        text = f"{actor.handle} tagged you in {conversation.name}: {body[:TAG_PREVIEW_LENGTH]}"
        self._add((uid for (uid,) in tagged), conversation, NotificationKind.TAG, text)

    def notify_react(self, conversation: Conversation, actor: User, recipient_id: int) -> None:
        """Tell a message's sender about a react, unless they reacted themselves or left."""
        if recipient_id == actor.id:
            return
        if recipient_id not in self._member_ids(conversation):
            return
        text = f"{actor.handle} reacted to your message in {conversation.name}"
        self._add([recipient_id], conversation, NotificationKind.REACT, text)

    def notify_added(
        self, conversation: Conversation, actor: User, user_ids: Iterable[int]
    ) -> None:
        text = f"{actor.handle} added you to {conversation.name}"
        self._add(user_ids, conversation, NotificationKind.ADD, text)

    def latest_for(self, user: User) -> list[Notification]:
        """The user's most recent notifications, newest first."""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id)
            .order_by(Notification.id.desc())
            .limit(NOTIFICATION_PAGE_SIZE)
            .all()
        )
