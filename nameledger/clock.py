"""
nameledger.clock — where "now" comes from.

Services never read the wall clock directly; they are handed a `Clock`. The
system clock serves real deployments, `ManualClock` serves tests and the CLI's
`--now` option so expiry behavior is reproducible.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol, runtime_checkable

SECONDS_PER_DAY = 86_400
SECONDS_PER_YEAR = 365 * SECONDS_PER_DAY


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int:
        """Current time as integer Unix seconds."""


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """A clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self._now = int(start)
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._now

    def set(self, ts: int) -> None:
        with self._lock:
            self._now = int(ts)

    def advance(self, seconds: int = 0, *, days: int = 0, years: int = 0) -> int:
        with self._lock:
            self._now += int(seconds) + days * SECONDS_PER_DAY + years * SECONDS_PER_YEAR
            return self._now


__all__ = ["Clock", "ManualClock", "SECONDS_PER_DAY", "SECONDS_PER_YEAR", "SystemClock"]
