"""Identity and directory service: registration, sessions and profiles."""

import logging
import re

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from huddle.models.session import LoginSession
from huddle.models.user import User
from huddle.services.auth import (
    get_password_hash,
    get_session_for_token,
    open_session,
    verify_password,
)
from huddle.services.errors import AccessError, InputError

logger = logging.getLogger(__name__)

HANDLE_MAX_LENGTH = 20
NAME_MIN_LENGTH = 1
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
CUSTOM_HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9]{3,20}$")


def derive_base_handle(name_first: str, name_last: str) -> str:
    """Lowercase first+last, drop non-alphanumerics, cap at 20 characters."""
    handle = re.sub(r"[^a-z0-9]", "", (name_first + name_last).lower())
    return handle[:HANDLE_MAX_LENGTH]


def check_name(name_first: str, name_last: str) -> None:
    for label, value in (("name_first", name_first), ("name_last", name_last)):
        if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
            raise InputError(f"{label} must be between 1 and 50 characters")


def check_email(email: str) -> None:
    if email.count("@") != 1:
        raise InputError("Invalid email address")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise InputError("Invalid email address") from e


class IdentityService:
    """Service for user accounts, login sessions and the member directory."""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def get_user(self, user_id: int) -> User:
        """Get any user, including removed ones."""
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise InputError(f"User {user_id} does not exist")
        return user

    def get_active_user(self, user_id: int) -> User:
        """Get a user that has not been removed by an admin."""
        user = self.db.query(User).filter(User.id == user_id, User.is_removed.is_(False)).first()
        if user is None:
            raise InputError(f"User {user_id} does not exist")
        return user

    def list_users(self) -> list[User]:
        return self.db.query(User).filter(User.is_removed.is_(False)).order_by(User.id).all()

    def generate_handle(self, name_first: str, name_last: str) -> str:
        """Derive a unique handle, appending the smallest free integer on collision."""
        base = derive_base_handle(name_first, name_last)
        taken = {
            handle
            for (handle,) in self.db.query(User.handle).filter(User.handle.like(f"{base}%")).all()
        }

        # An empty base is treated as colliding so the handle is never blank
        if base and base not in taken:
            return base

        suffix = 0
        while f"{base}{suffix}" in taken:
            suffix += 1
        return f"{base}{suffix}"

    def _is_first_registrant(self) -> bool:
        """The very first account bootstraps the platform's global owner."""
        return self.db.query(User.id).first() is None

    def register(
        self, email: str, password: str, name_first: str, name_last: str
    ) -> tuple[User, str]:
        """Create an account and log it in. Returns the user and a fresh token."""
        check_email(email)
        if self.get_user_by_email(email) is not None:
            raise InputError("Email already registered")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise InputError("Password must be at least 6 characters")
        check_name(name_first, name_last)

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            name_first=name_first,
            name_last=name_last,
            handle=self.generate_handle(name_first, name_last),
            is_global_owner=self._is_first_registrant(),
        )
        self.db.add(user)
        self.db.flush()

        token = open_session(self.db, user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Registered user {user.id} with handle '{user.handle}'")
        return user, token

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Authenticate and start a new session; every login gets a distinct token."""
        user = self.get_user_by_email(email)
        if user is None or user.is_removed:
            raise InputError("Email is not registered")
        if not verify_password(password, user.password_hash):
            raise InputError("Incorrect password")

        token = open_session(self.db, user)
        self.db.commit()
        return user, token

    def logout(self, token: str) -> None:
        """Invalidate exactly this token; other sessions of the user stay live."""
        login_session = get_session_for_token(self.db, token)
        if login_session is None:
            raise AccessError("Invalid token")

        self.db.delete(login_session)
        self.db.commit()

    def end_all_sessions(self, user: User) -> None:
        self.db.query(LoginSession).filter(LoginSession.user_id == user.id).delete()

    def set_name(self, user: User, name_first: str, name_last: str) -> User:
        """Rename a user. The handle is deliberately left unchanged."""
        check_name(name_first, name_last)
        user.name_first = name_first
        user.name_last = name_last
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_email(self, user: User, email: str) -> User:
        check_email(email)
        existing = self.get_user_by_email(email)
        if existing is not None and existing.id != user.id:
            raise InputError("Email is already in use")

        user.email = email
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_handle(self, user: User, handle: str) -> User:
        if not CUSTOM_HANDLE_PATTERN.match(handle):
            raise InputError("Handle must be 3 to 20 alphanumeric characters")
        if self.db.query(User).filter(User.handle == handle).first() is not None:
            raise InputError("Handle is already in use")

        user.handle = handle
        self.db.commit()
        self.db.refresh(user)
        return user
