"""Login session model."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from huddle.database import Base
from huddle.models.mixins import TimestampMixin


class LoginSession(Base, TimestampMixin):
    """One row per issued token; deleting the row invalidates that token only."""

    __tablename__ = "login_sessions"

    id = Column(String(36), primary_key=True)  # uuid4, embedded in the JWT as "sid"
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", backref="login_sessions")
