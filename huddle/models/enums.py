"""Enums for model fields."""

from enum import Enum, IntEnum


class ConversationKind(str, Enum):
    """Kinds of conversation sharing the same membership model."""

    CHANNEL = "channel"
    DM = "dm"


class GlobalPermission(IntEnum):
    """Platform-wide permission ids exposed by the admin API."""

    OWNER = 1
    MEMBER = 2


class ReactKind(IntEnum):
    """Supported message reactions."""

    THUMBS_UP = 1


class NotificationKind(str, Enum):
    """Reasons a user gets notified."""

    TAG = "tag"
    REACT = "react"
    ADD = "add"
