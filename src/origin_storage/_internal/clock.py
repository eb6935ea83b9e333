"""Clock abstraction for testable expiry and bookkeeping timestamps."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for getting the current time.  Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Default clock backed by the real system time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def epoch_millis(clock: Clock) -> int:
    """Return the clock's current time as integer milliseconds since the epoch."""
    return int(clock.now().timestamp() * 1000)
