"""Clock capability for tick and feed timestamps."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock time in milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Real wall clock."""

    def now_ms(self) -> int:
        """Get current time in milliseconds."""
        return int(time.time() * 1000)


class ManualClock:
    """
    Virtual clock for tests and replays.

    Returns a fixed time that only moves on ``advance``, or by ``step_ms``
    after every read when ``step_ms`` is non-zero.
    """

    def __init__(self, start_ms: int = 0, step_ms: int = 0) -> None:
        if start_ms < 0:
            raise ValueError(f"start_ms must be >= 0, got {start_ms}")
        self._now_ms = start_ms
        self._step_ms = step_ms

    def now_ms(self) -> int:
        now = self._now_ms
        self._now_ms += self._step_ms
        return now

    def advance(self, ms: int) -> None:
        """Move the clock forward by ``ms`` milliseconds."""
        if ms < 0:
            raise ValueError(f"cannot move clock backwards by {ms}ms")
        self._now_ms += ms
