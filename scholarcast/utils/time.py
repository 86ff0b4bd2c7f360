"""
Clock helpers: wall-clock timestamps for stored rows, monotonic durations
for attempt timing.
"""

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def elapsed_ms(started: float) -> int:
    """Milliseconds since `started`, a `time.monotonic()` reading."""
    return int((time.monotonic() - started) * 1000)
