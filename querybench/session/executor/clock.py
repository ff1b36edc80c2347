"""
Clock abstraction for the execution controller.

The controller never touches time or asyncio directly, so tests can drive
the simulated latency without waiting.
"""
import asyncio
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    @abstractmethod
    def now_ms(self) -> int:
        """Monotonic milliseconds, used for durations."""

    @abstractmethod
    def utcnow(self) -> datetime:
        """Wall-clock instant, used for timestamps."""

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """Non-blocking wait."""


class SystemClock(Clock):
    def now_ms(self) -> int:
        return int(time.monotonic() * 1000)

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
