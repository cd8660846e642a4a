"""Message model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from huddle.database import Base


class Message(Base):
    """A message in a conversation's log. Ids are globally monotonic."""

    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    time_sent = Column(Integer, nullable=False)  # unix seconds
    is_pinned = Column(Boolean, default=False, nullable=False)

    # Relationships
    conversation = relationship("Conversation")
    sender = relationship("User")
    reacts = relationship(
        "MessageReact",
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="MessageReact.id",
    )


class MessageReact(Base):
    """A single (reaction, user) pair on a message."""

    __tablename__ = "message_reacts"
    __table_args__ = (
        UniqueConstraint("message_id", "react_id", "user_id", name="uq_message_react"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False, index=True)
    react_id = Column(Integer, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    message = relationship("Message", back_populates="reacts")
