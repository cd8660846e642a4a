"""Standup window model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from huddle.database import Base
from huddle.models.mixins import TimestampMixin


class Standup(Base, TimestampMixin):
    """An open standup window. The row only exists while the window is active."""

    __tablename__ = "standups"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(
        Integer, ForeignKey("conversations.id"), nullable=False, unique=True, index=True
    )
    started_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    time_finish = Column(Integer, nullable=False)  # unix seconds

    # Relationships
    lines = relationship(
        "StandupLine",
        back_populates="standup",
        cascade="all, delete-orphan",
        order_by="StandupLine.id",
    )


class StandupLine(Base):
    """A line submitted during a standup, kept in submission order."""

    __tablename__ = "standup_lines"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    standup_id = Column(Integer, ForeignKey("standups.id"), nullable=False, index=True)
    handle = Column(String(64), nullable=False)
    body = Column(Text, nullable=False)

    standup = relationship("Standup", back_populates="lines")

    @property
    def formatted(self) -> str:
        return f"{self.handle}: {self.body}"
