"""Message log service: send, page, edit, remove, react, pin and share."""

import logging

from sqlalchemy.orm import Session

from huddle.models.conversation import Conversation
from huddle.models.enums import ReactKind
from huddle.models.message import Message, MessageReact
from huddle.models.user import User
from huddle.services.errors import AccessError, InputError
from huddle.services.membership import MembershipService
from huddle.services.notifications import NotificationService
from huddle.utils import unix_now

logger = logging.getLogger(__name__)

MESSAGE_MAX_LENGTH = 1000
PAGE_SIZE = 50
NO_TARGET = -1


def quote(body: str) -> str:
    return "\n".join(f"> {line}" for line in body.split("\n"))


class MessageService:
    """Service for the per-conversation message log."""

    def __init__(self, db: Session):
        self.db = db
        self.membership = MembershipService(db)
        self.notifications = NotificationService(db)

    # Lookup

    def get_message(self, message_id: int) -> Message:
        message = self.db.query(Message).filter(Message.id == message_id).first()
        if message is None:
            raise InputError(f"Invalid message id {message_id}")
        return message

    def get_visible_message(self, user: User, message_id: int) -> Message:
        """A message in a conversation the user currently belongs to.

        Messages elsewhere are reported as unknown rather than forbidden.
        """
        message = self.get_message(message_id)
        if not self.membership.is_member(message.conversation, user.id):
            raise InputError(f"Invalid message id {message_id}")
        return message

    def _require_author_or_owner(self, user: User, message: Message) -> Conversation:
        conversation = message.conversation
        self.membership.require_member(conversation, user)
        if message.sender_id != user.id and not self.membership.has_owner_permission(
            conversation, user
        ):
            raise AccessError("Only the sender or an owner can change this message")
        return conversation

    # Log operations

    def post(
        self,
        conversation: Conversation,
        sender_id: int,
        body: str,
        time_sent: int | None = None,
    ) -> Message:
        """Append a message to the log. Does not commit."""
        message = Message(
            conversation_id=conversation.id,
            sender_id=sender_id,
            body=body,
            time_sent=time_sent if time_sent is not None else unix_now(),
            is_pinned=False,
        )
        self.db.add(message)
        self.db.flush()
        return message

    def send(self, user: User, conversation: Conversation, body: str) -> Message:
        self.membership.require_member(conversation, user)

        message = self.post(conversation, user.id, body)
        self.notifications.notify_tags(conversation, user, body)
        self.db.commit()
        return message

    def send_to_channel(self, user: User, channel_id: int, body: str) -> Message:
        self._check_body(body)
        return self.send(user, self.membership.get_channel(channel_id), body)

    def send_to_dm(self, user: User, dm_id: int, body: str) -> Message:
        self._check_body(body)
        return self.send(user, self.membership.get_dm(dm_id), body)

    def page(self, user: User, conversation: Conversation, start: int) -> dict:
        """Up to 50 messages from ``start``, newest first.

        ``end`` is ``start + 50`` while older messages remain, else -1.
        ``start`` may equal the message count (an empty page) but not exceed it.
        """
        self.membership.require_member(conversation, user)

        base = self.db.query(Message).filter(Message.conversation_id == conversation.id)
        total = base.count()
        if start < 0 or start > total:
            raise InputError(f"Start {start} is outside 0..{total}")

        messages = base.order_by(Message.id.desc()).offset(start).limit(PAGE_SIZE).all()
        end = start + PAGE_SIZE if start + PAGE_SIZE < total else -1
        return {"messages": messages, "start": start, "end": end}

    def edit(self, user: User, message_id: int, body: str) -> None:
        """Replace a message body; an empty body removes the message."""
        if len(body) > MESSAGE_MAX_LENGTH:
            raise InputError("Message must be at most 1000 characters")

        message = self.get_message(message_id)
        conversation = self._require_author_or_owner(user, message)

        if body == "":
            self.db.delete(message)
        else:
            message.body = body
            self.notifications.notify_tags(conversation, user, body)
        self.db.commit()

    def remove(self, user: User, message_id: int) -> None:
        message = self.get_message(message_id)
        self._require_author_or_owner(user, message)

        self.db.delete(message)
        self.db.commit()

    def react(self, user: User, message_id: int, react_id: int) -> None:
        self._check_react(react_id)
        message = self.get_visible_message(user, message_id)
        if self._find_react(message, react_id, user.id) is not None:
            raise InputError("User has already reacted to this message")

        message.reacts.append(MessageReact(react_id=react_id, user_id=user.id))
        self.notifications.notify_react(message.conversation, user, message.sender_id)
        self.db.commit()

    def unreact(self, user: User, message_id: int, react_id: int) -> None:
        self._check_react(react_id)
        message = self.get_visible_message(user, message_id)
        react = self._find_react(message, react_id, user.id)
        if react is None:
            raise InputError("User has not reacted to this message")

        message.reacts.remove(react)
        self.db.commit()

    def pin(self, user: User, message_id: int) -> None:
        self._set_pinned(user, message_id, True)

    def unpin(self, user: User, message_id: int) -> None:
        self._set_pinned(user, message_id, False)

    def share(
        self,
        user: User,
        og_message_id: int,
        message: str,
        channel_id: int,
        dm_id: int,
    ) -> Message:
        """Post a quoted copy of a visible message, with an optional comment, to one target."""
        if (channel_id == NO_TARGET) == (dm_id == NO_TARGET):
            raise InputError("Exactly one of channel_id and dm_id must be given")

        og_message = self.get_visible_message(user, og_message_id)
        if len(message) > MESSAGE_MAX_LENGTH:
            raise InputError("Message must be at most 1000 characters")

        if channel_id != NO_TARGET:
            target = self.membership.get_channel(channel_id)
        else:
            target = self.membership.get_dm(dm_id)
        self.membership.require_member(target, user)

        body = quote(og_message.body)
        if message:
            body = f"{message}\n{body}"

        shared = self.post(target, user.id, body)
        self.notifications.notify_tags(target, user, message)
        self.db.commit()
        return shared

    def purge_conversation(self, conversation: Conversation) -> int:
        """Delete every message (and its reacts) in a conversation. Does not commit."""
        message_ids = self.db.query(Message.id).filter(
            Message.conversation_id == conversation.id
        )
        self.db.query(MessageReact).filter(MessageReact.message_id.in_(message_ids)).delete(
            synchronize_session=False
        )
        return (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation.id)
            .delete(synchronize_session=False)
        )

    # Helpers

    def _check_body(self, body: str) -> None:
        if not 1 <= len(body) <= MESSAGE_MAX_LENGTH:
            raise InputError("Message must be between 1 and 1000 characters")

    def _check_react(self, react_id: int) -> None:
        if react_id not in {kind.value for kind in ReactKind}:
            raise InputError(f"Invalid react id {react_id}")

    def _find_react(self, message: Message, react_id: int, user_id: int) -> MessageReact | None:
        for react in message.reacts:
            if react.react_id == react_id and react.user_id == user_id:
                return react
        return None

    def _set_pinned(self, user: User, message_id: int, pinned: bool) -> None:
        message = self.get_visible_message(user, message_id)
        if message.is_pinned == pinned:
            raise InputError("Message is already pinned" if pinned else "Message is not pinned")
        if not self.membership.has_owner_permission(message.conversation, user):
            raise AccessError("User does not have owner permission")

        message.is_pinned = pinned
        self.db.commit()
