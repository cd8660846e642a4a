"""Conversation model (channels and DMs)."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from huddle.database import Base
from huddle.models.enums import ConversationKind
from huddle.models.mixins import TimestampMixin


class Conversation(Base, TimestampMixin):
    """A channel or a DM, with its member ledger."""

    __tablename__ = "conversations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(20), nullable=False, index=True)
    name = Column(String(1024), nullable=False)
    is_public = Column(Boolean, nullable=True)  # channels only
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    # Relationships
    creator = relationship("User")
    members = relationship(
        "ConversationMember",
        back_populates="conversation",
        order_by="ConversationMember.id",
    )

    @property
    def is_channel(self) -> bool:
        return self.kind == ConversationKind.CHANNEL

    @property
    def is_dm(self) -> bool:
        return self.kind == ConversationKind.DM


class ConversationMember(Base, TimestampMixin):
    """Membership row; is_owner marks channel owners (owners are always members)."""

    __tablename__ = "conversation_members"
    __table_args__ = (
        UniqueConstraint("conversation_id", "user_id", name="uq_conversation_member"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_owner = Column(Boolean, default=False, nullable=False)

    # Relationships
    conversation = relationship("Conversation", back_populates="members")
    user = relationship("User")
