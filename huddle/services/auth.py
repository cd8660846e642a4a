"""Authentication service for JWT and password handling."""

import uuid
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from huddle.config import get_settings
from huddle.models.session import LoginSession
from huddle.models.user import User

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, session_id: str) -> str:
    """Create a JWT access token bound to a login session."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "sid": session_id,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def open_session(db: Session, user: User) -> str:
    """Start a new login session for the user and return its token.

    Does not commit; the caller owns the transaction.
    """
    session_id = str(uuid.uuid4())
    db.add(LoginSession(id=session_id, user_id=user.id))
    return create_access_token(user.id, session_id)


def get_session_for_token(db: Session, token: str) -> LoginSession | None:
    """Look up the live login session a token belongs to."""
    payload = decode_access_token(token)
    if payload is None:
        return None

    session_id = payload.get("sid")
    user_id = payload.get("sub")
    if session_id is None or user_id is None:
        return None

    return (
        db.query(LoginSession)
        .filter(LoginSession.id == session_id, LoginSession.user_id == int(user_id))
        .first()
    )


def resolve_user(db: Session, token: str | None) -> User | None:
    """Resolve a token to its user, or None if the token is not live."""
    if not token:
        return None
    login_session = get_session_for_token(db, token)
    if login_session is None:
        return None
    return login_session.user
