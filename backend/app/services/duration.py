"""Duration helpers for night- and day-priced items.

Both functions look only at the calendar date of each instant, so the time of
day never changes the result.
"""

from datetime import date, datetime


def _as_date(value: date | datetime | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def nights_between(start: date | datetime | None, end: date | datetime | None) -> int | None:
    """Count nights between check-in and check-out; ``None`` unless at least one night passed."""
    start_day = _as_date(start)
    end_day = _as_date(end)
    if start_day is None or end_day is None:
        return None
    nights = (end_day - start_day).days
    return nights if nights > 0 else None


def days_inclusive(start: date | datetime | None, end: date | datetime | None) -> int | None:
    """Count calendar days from start to end, both included; ``None`` if end precedes start."""
    start_day = _as_date(start)
    end_day = _as_date(end)
    if start_day is None or end_day is None:
        return None
    if end_day < start_day:
        return None
    return (end_day - start_day).days + 1
