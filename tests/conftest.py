"""Pytest configuration and fixtures."""

import os

# Settings are cached on first import, so the environment must be ready first
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ALLOW_CLEAR", "true")
os.environ.setdefault("ENVIRONMENT", "test")

from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/huddle", "/huddle_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
    os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL

from huddle import models  # noqa: E402, F401
from huddle.database import Base, get_db  # noqa: E402
from huddle.main import app  # noqa: E402
from huddle.services.standup import StandupScheduler, get_standup_scheduler  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id, email and the raw token."""

    def __init__(
        self,
        *args,
        user_id: int | None = None,
        email: str | None = None,
        token: str | None = None,
        **kwargs,
    ):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


class RecordingScheduler(StandupScheduler):
    """Scheduler that records flush requests instead of queueing Celery tasks."""

    def __init__(self) -> None:
        super().__init__()
        self.scheduled: list[tuple[int, int]] = []
        self.cancelled_all = False

    def schedule(self, channel_id: int, delay_seconds: int) -> None:
        self.scheduled.append((channel_id, delay_seconds))
        self._pending[channel_id] = MagicMock(**{"ready.return_value": False})

    def cancel_all(self) -> None:
        self.cancelled_all = True
        super().cancel_all()


connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def scheduler():
    """A standup scheduler that never talks to Celery."""
    return RecordingScheduler()


@pytest.fixture(scope="function")
def client(db, scheduler):
    """Create a test client with database and scheduler overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_standup_scheduler] = lambda: scheduler
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register_user(client):
    """Factory that registers a user and returns their auth headers."""
    counter = {"n": 0}

    def _register(
        name_first: str = "Test",
        name_last: str = "User",
        email: str | None = None,
        password: str = "testpass123",
    ) -> AuthHeaders:
        counter["n"] += 1
        email = email or f"user{counter['n']}@example.com"
        response = client.post(
            "/api/v1/auth/register",
            json={
                "email": email,
                "password": password,
                "name_first": name_first,
                "name_last": name_last,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()
        token = data["access_token"]
        return AuthHeaders(
            {"Authorization": f"Bearer {token}"},
            user_id=data["user"]["id"],
            email=email,
            token=token,
        )

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Create the first user (a global owner) and return auth headers with user info."""
    return register_user("Test", "User", email="test@example.com")


@pytest.fixture
def other_headers(register_user, auth_headers):
    """A second, ordinary user."""
    return register_user("Other", "Person", email="other@example.com")


@pytest.fixture
def third_headers(register_user, other_headers):
    """A third, ordinary user."""
    return register_user("Third", "Person", email="third@example.com")


@pytest.fixture
def channel_id(client, auth_headers):
    """A public channel owned by the first user."""
    response = client.post(
        "/api/v1/channels", headers=auth_headers, json={"name": "general", "is_public": True}
    )
    assert response.status_code == 201
    return response.json()["id"]
