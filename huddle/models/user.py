"""User model."""

from sqlalchemy import Boolean, Column, Integer, String

from huddle.database import Base
from huddle.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and the member directory."""

    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    # email and handle are released (NULL) when an admin removes the user
    email = Column(String(255), unique=True, nullable=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name_first = Column(String(50), nullable=False)
    name_last = Column(String(50), nullable=False)
    handle = Column(String(64), unique=True, nullable=True, index=True)
    is_global_owner = Column(Boolean, default=False, nullable=False)
    is_removed = Column(Boolean, default=False, nullable=False)
