"""
Day arithmetic utilities for stream window allocation.

All window bounds are normalized to UTC so that day boundaries and day
differences never depend on the host timezone or daylight-saving changes.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

ONE_DAY = timedelta(days=1)

# Last representable instant of a day at millisecond resolution
END_OF_DAY_MICROSECOND = 999000


def to_utc(ts: datetime) -> datetime:
    """
    Normalize a datetime to the UTC reference zone.

    Args:
        ts: Aware datetime, or naive datetime interpreted as UTC

    Returns:
        Timezone-aware UTC datetime
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def start_of_day(ts: datetime) -> datetime:
    """Return 00:00:00.000 UTC of the day containing ts."""
    return to_utc(ts).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(ts: datetime) -> datetime:
    """Return 23:59:59.999 UTC of the day containing ts."""
    return to_utc(ts).replace(hour=23, minute=59, second=59, microsecond=END_OF_DAY_MICROSECOND)


def add_days(ts: datetime, days: int) -> datetime:
    """Shift a timestamp by a whole number of days."""
    return to_utc(ts) + timedelta(days=days)


def days_between(first: datetime, second: datetime) -> int:
    """
    Count the days separating two instants, rounding partial days up.

    Args:
        first: One bound
        second: Other bound (order does not matter)

    Returns:
        ceil(|second - first| / 1 day)
    """
    delta = abs(to_utc(second) - to_utc(first))
    return math.ceil(delta / ONE_DAY)


def whole_days(first: datetime, second: datetime) -> int:
    """Count the complete days from first to second, rounding down."""
    return (to_utc(second) - to_utc(first)) // ONE_DAY


def get_reference_now(now: Optional[datetime] = None) -> datetime:
    """
    Get the current reference instant.

    Args:
        now: Optional explicit instant, used by callers that need determinism

    Returns:
        UTC datetime, falling back to wall-clock time
    """
    if now is not None:
        return to_utc(now)

    return datetime.now(timezone.utc)


def reference_today(now: Optional[datetime] = None) -> datetime:
    """Return the end of the current reference day."""
    return end_of_day(get_reference_now(now))


def format_day(ts: datetime, fmt: str = "%d/%m/%Y") -> str:
    """
    Format a window bound for user-facing messages.

    Args:
        ts: Timestamp to format
        fmt: strftime pattern, French short date by default

    Returns:
        Formatted calendar date
    """
    return to_utc(ts).strftime(fmt)


def format_instant(ts: datetime) -> str:
    """Format a timestamp as ISO8601 for logs and conflict reasons."""
    return to_utc(ts).isoformat(timespec="milliseconds")
