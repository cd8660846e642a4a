"""SQLAlchemy models."""

from huddle.models.conversation import Conversation, ConversationMember
from huddle.models.message import Message, MessageReact
from huddle.models.notification import Notification
from huddle.models.session import LoginSession
from huddle.models.standup import Standup, StandupLine
from huddle.models.user import User

__all__ = [
    "User",
    "LoginSession",
    "Conversation",
    "ConversationMember",
    "Message",
    "MessageReact",
    "Standup",
    "StandupLine",
    "Notification",
]
