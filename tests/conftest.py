"""
Shared fixtures for the query session tests.

FakeClock advances its own time on sleep() so latency never costs real
seconds; GatedClock parks inside sleep() until the test releases it.
"""
import asyncio
import random
from datetime import datetime, timedelta, timezone

import pytest

from querybench.errors import PersistenceError
from querybench.session.executor.clock import Clock
from querybench.session.history.persistence import HistoryStore
from querybench.session.saved.persistence import SavedQueryStore
from querybench.storage.kv import MemoryStorage

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeClock(Clock):
    def __init__(self, start: datetime = FIXED_NOW):
        self._start = start
        self._ms = 0
        self.sleeps = []

    def now_ms(self) -> int:
        return self._ms

    def utcnow(self) -> datetime:
        return self._start + timedelta(milliseconds=self._ms)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self._ms += round(seconds * 1000)


class GatedClock(FakeClock):
    """Must be created inside the running event loop."""

    def __init__(self):
        super().__init__()
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def sleep(self, seconds: float) -> None:
        self.entered.set()
        await self.release.wait()
        await super().sleep(seconds)


class FailingStorage(MemoryStorage):
    """MemoryStorage whose writes raise once fail_writes is set."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Failed to write {key}: disk full")
        super().set(key, value)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def history(storage):
    return HistoryStore(storage)


@pytest.fixture
def saved(storage):
    return SavedQueryStore(storage)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def gated_clock_cls():
    return GatedClock


@pytest.fixture
def failing_storage():
    return FailingStorage()
