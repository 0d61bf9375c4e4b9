"""Kernel time – Clock protocol + implementations."""
from __future__ import annotations

import time
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Port: abstract clock for deterministic testing.

    ``monotonic()`` is for measuring durations, ``now()`` for timestamps.
    """

    def now(self) -> datetime: ...
    def monotonic(self) -> float: ...


class SystemClock:
    """Production clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def monotonic(self) -> float:
        return time.monotonic()


class FrozenClock:
    """Test clock pinned to a fixed point in time.

    Both readings move only when :meth:`advance` is called.
    """

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed
        self._elapsed = 0.0

    def now(self) -> datetime:
        return self._fixed

    def monotonic(self) -> float:
        return self._elapsed

    def advance(self, **kwargs: int | float) -> None:
        """Advance the frozen time by the given ``timedelta`` kwargs."""
        delta = timedelta(**kwargs)
        self._fixed += delta
        self._elapsed += delta.total_seconds()


def elapsed_ms(start: float, end: float) -> int:
    """Whole milliseconds between two ``monotonic()`` readings."""
    return max(0, round((end - start) * 1000))


__all__ = ["Clock", "FrozenClock", "SystemClock", "elapsed_ms"]
