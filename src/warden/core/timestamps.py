"""
UTC timestamp helpers (stdlib-only).

Iteration and watcher results record wall-clock start/end times in UTC and
durations from the monotonic clock, so these live in one place.
"""

import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def monotonic_ms() -> float:
    """Monotonic clock reading in milliseconds, for measuring durations."""
    return time.monotonic() * 1000


def elapsed_ms(start_ms: float) -> float:
    """Milliseconds elapsed since ``start_ms`` (from ``monotonic_ms()``), rounded."""
    return round(monotonic_ms() - start_ms, 2)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()
