"""Timezone utilities. All cache timestamps are UTC."""

from datetime import datetime

import pytz

UTC = pytz.utc


def now_utc() -> datetime:
    """Return current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # SQLite drops tzinfo; stored values are already UTC
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def to_naive_utc(dt: datetime) -> datetime:
    """Return the naive UTC form used for storage."""
    return to_utc(dt).replace(tzinfo=None)


def seconds_between(start: datetime, end: datetime) -> float:
    """Elapsed seconds from start to end."""
    return (to_utc(end) - to_utc(start)).total_seconds()
