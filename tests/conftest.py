"""Shared pytest fixtures for the Instructor Hub test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.interfaces.notification_sender import INotificationSender
from src.providers.code_store.memory_code_store import MemoryCodeStore
from src.providers.directory.memory_directory import InMemoryAccountDirectory
from src.services.session_codec import SessionCodec

# PyJWT warns on HMAC keys shorter than 32 bytes.
TEST_SECRET = "test-secret-that-is-at-least-32-bytes-long"

START = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec(clock: FakeClock) -> SessionCodec:
    return SessionCodec(secret=TEST_SECRET, ttl=timedelta(hours=24), clock=clock)


@pytest.fixture
def code_store(clock: FakeClock) -> MemoryCodeStore:
    return MemoryCodeStore(max_size=100, clock=clock)


@pytest.fixture
def directory() -> InMemoryAccountDirectory:
    """Directory with two instructors; Jo's PIN has a leading zero."""
    accounts = InMemoryAccountDirectory()
    accounts.add("Alex Rivera", "alex@example.com", "1234", mobile="0400 111 222", fee="85")
    accounts.add("Jo Park", "jo@example.com", "0420", mobile="0400 333 444", fee="90")
    return accounts


@pytest.fixture
def notifier() -> MagicMock:
    """A notification sender that records every send."""
    sender = MagicMock(spec=INotificationSender)
    sender.send = AsyncMock(return_value=None)
    sender.get_provider_name.return_value = "mock_sender"
    return sender
