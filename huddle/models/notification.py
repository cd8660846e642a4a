"""Notification model."""

from sqlalchemy import Column, ForeignKey, Integer, String

from huddle.database import Base
from huddle.models.mixins import TimestampMixin


class Notification(Base, TimestampMixin):
    """A notification delivered to a user about a channel or DM."""

    __tablename__ = "notifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Not a foreign key: notifications outlive a removed DM
    conversation_id = Column(Integer, nullable=False)
    conversation_kind = Column(String(20), nullable=False)
    kind = Column(String(20), nullable=False)
    text = Column(String(255), nullable=False)
