"""
Time and date utilities for revenue bucketing.

Key concepts:
  - Local wall time: buckets are calendar days / weeks / months in the
    shop's local time, so every timestamp is first normalised to a naive
    local datetime with ``to_local_naive()``.
  - Sunday-start weeks: weekly buckets begin on Sunday at 00:00.
  - Calendar-month arithmetic: the yearly lookback is 12 calendar months,
    not 365 days.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

_MONTH_ABBR = (
    "", "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_local_naive(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Return ``dt`` as a naive datetime in local wall time.

    Aware datetimes are converted to ``tz`` (the system local zone when
    ``tz`` is ``None``). Naive datetimes are assumed to already be local.

    Args:
        dt: Timestamp to normalise.
        tz: Target zone; ``None`` means the system local zone.

    Returns:
        Naive datetime.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(tz).replace(tzinfo=None)


def start_of_day(dt: datetime) -> datetime:
    """Midnight of ``dt``'s calendar day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week_sunday(dt: datetime) -> datetime:
    """Midnight of the Sunday on or before ``dt``.

    ``datetime.weekday()`` is Monday=0 … Sunday=6, so the offset back to
    Sunday is ``(weekday + 1) % 7``.
    """
    days_since_sunday = (dt.weekday() + 1) % 7
    return start_of_day(dt) - timedelta(days=days_since_sunday)


def start_of_month(dt: datetime) -> datetime:
    """Midnight of the first day of ``dt``'s calendar month."""
    return start_of_day(dt).replace(day=1)


def subtract_months(dt: datetime, months: int) -> datetime:
    """Return ``dt`` shifted back by ``months`` calendar months.

    The day is clamped to the last day of the target month
    (e.g. 31 March minus one month → 28/29 February).

    Raises:
        ValueError: If ``months`` is negative.
    """
    if months < 0:
        raise ValueError(f"months must be >= 0, got {months}.")
    total = dt.year * 12 + (dt.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    last_day = calendar.monthrange(year, month)[1]
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))


def short_month_day(dt: datetime) -> str:
    """Format as ``"Oct 19"`` (locale-independent)."""
    return f"{_MONTH_ABBR[dt.month]} {dt.day}"


def short_month_year(dt: datetime) -> str:
    """Format as ``"Oct 2026"`` (locale-independent)."""
    return f"{_MONTH_ABBR[dt.month]} {dt.year}"


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
