"""Calendar-day helpers shared by the journal services."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, Tuple


def utc_now() -> datetime:
    """Naive UTC timestamp, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()


def to_day(value: date | datetime | None) -> date:
    """Truncate a date or datetime to its calendar day; None means today."""
    if value is None:
        return utc_today()
    if isinstance(value, datetime):
        return value.date()
    return value


def day_range(start: date | datetime, end: date | datetime) -> Tuple[date, date]:
    """Half-open ``[start, end + 1 day)`` bounds covering whole calendar days."""
    return to_day(start), to_day(end) + timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield each calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
