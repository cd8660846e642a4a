"""Notification schemas."""

from pydantic import BaseModel

from huddle.models.enums import ConversationKind
from huddle.models.notification import Notification


class NotificationResponse(BaseModel):
    """A notification; the id of the other conversation kind is -1."""

    channel_id: int
    dm_id: int
    notification_message: str

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        is_channel = notification.conversation_kind == ConversationKind.CHANNEL
        return cls(
            channel_id=notification.conversation_id if is_channel else -1,
            dm_id=-1 if is_channel else notification.conversation_id,
            notification_message=notification.text,
        )
