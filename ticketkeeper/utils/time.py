"""Time and date utilities.

Internally every timestamp is whole seconds since the epoch. Stored records
keep milliseconds, and Discord hands out datetimes; both are converted here.
"""
import time
from datetime import datetime, timezone
from typing import Optional


def now_seconds() -> int:
    """Current time in whole seconds since the epoch."""
    return int(time.time())


def now_ms() -> int:
    """Current time in milliseconds since the epoch, the stored unit."""
    return int(time.time() * 1000)


def ms_to_seconds(value: Optional[float]) -> Optional[int]:
    """Convert a stored millisecond timestamp to whole seconds."""
    if value is None:
        return None
    return int(value // 1000)


def seconds_to_ms(value: float) -> int:
    return int(value * 1000)


def datetime_to_seconds(dt: datetime) -> int:
    """Convert a datetime (naive values are taken as UTC) to whole seconds."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())
