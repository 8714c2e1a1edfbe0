"""
Test fixtures for the study tracker.

Everything runs on the in-process memory store with a fixed clock and UTC,
so no MongoDB is needed. Durable-store behaviour is exercised with
MagicMock collections and stores.
"""

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest
import pytz

sys.path.insert(0, str(Path(__file__).parent.parent))

from core.models import StudySession, User  # noqa: E402
from data_access.memory_store import MemoryStore  # noqa: E402
from data_access.session_repository import SessionRepository  # noqa: E402
from data_access.sessions_repo import MemorySessionStore  # noqa: E402
from data_access.users_repo import UserDirectory  # noqa: E402
from services.analytics_service import AnalyticsService  # noqa: E402
from services.sessions_service import SessionsService  # noqa: E402

@pytest.fixture
def today():
    # Wednesday
    return date(2024, 5, 15)


@pytest.fixture
def durable_user():
    return "507f1f77bcf86cd799439011"


@pytest.fixture
def durable_session():
    return "65a1b2c3d4e5f60718293a4b"


@pytest.fixture
def tz():
    return pytz.utc


@pytest.fixture
def clock():
    return lambda: datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def memory():
    return MemoryStore()


@pytest.fixture
def repository(memory):
    return SessionRepository(MemorySessionStore(memory))


@pytest.fixture
def users(memory):
    return UserDirectory(memory)


@pytest.fixture
def analytics(repository, users, tz, clock):
    return AnalyticsService(repository, users, tz=tz, clock=clock)


@pytest.fixture
def sessions_service(repository, tz):
    return SessionsService(repository, tz=tz)


@pytest.fixture
def student(memory):
    return memory.add_user("Asha", "asha@example.com")


@pytest.fixture
def admin(memory):
    return memory.add_user("Root", "root@example.com", role="admin")


@pytest.fixture
def make_session():
    """Factory for StudySession values; ``day`` is a day of May 2024 (UTC, 10:00)."""
    counter = {"n": 0}

    def _make(subject="Math", minutes=30, status="Completed", day=15, owner="u1",
              title=None, occurred_at=None, created_at=None):
        counter["n"] += 1
        when = occurred_at
        if when is None and day is not None:
            when = datetime(2024, 5, day, 10, 0)
        return StudySession(
            id=str(counter["n"]), owner_id=owner, title=title or f"{subject} block",
            subject=subject, duration_minutes=minutes, status=status,
            occurred_at=when, created_at=created_at,
        )

    return _make


@pytest.fixture
def outsider():
    return User(id="999", name="Eve", email="eve@example.com")
