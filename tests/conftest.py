# tests/conftest.py
# Shared fixtures: an in-memory store, a controllable clock, item factories

from datetime import datetime, timedelta, timezone

import pytest

from texttide.repositories.clipboard_storage import InMemoryStorage
from texttide.schemas.clipboard import ClipboardItem
from texttide.services.clipboard_service import ClipboardService

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_item(**overrides) -> ClipboardItem:
    data = {
        "id": "abc123",
        "text": "hello",
        "created_at": NOW - timedelta(hours=1),
        "creator_id": "creator",
        "editable": False,
    }
    data.update(overrides)
    return ClipboardItem(**data)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def service(storage, clock) -> ClipboardService:
    return ClipboardService(storage, clock=clock)
