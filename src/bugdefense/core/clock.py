"""Time sources for the game loop.

The engine never reads the wall clock directly; it asks a Clock. The
simulator uses MonotonicClock, tests drive a ManualClock.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in seconds."""

    def now(self) -> float:
        ...


class MonotonicClock:
    """Real time from time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        """Move time forward and return the new time."""
        self._now += seconds
        return self._now

    def set(self, value: float) -> None:
        self._now = value
