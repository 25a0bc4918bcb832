"""Datetime utilities for booking windows and timezone display."""

from datetime import datetime, time, timedelta, timezone

import pytz

from core.exceptions import InvalidInputError


def now() -> datetime:
    """Get current datetime in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC datetime.

    Naive values are treated as UTC, which is how timestamps come back from
    drivers that do not keep offsets (SQLite).
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def end_of_day(dt: datetime) -> datetime:
    """Last representable instant of the UTC day containing ``dt``."""
    dt = ensure_utc(dt)
    return datetime.combine(dt.date(), time.max, tzinfo=timezone.utc)


def booking_window(start: datetime, days_ahead: int) -> tuple[datetime, datetime]:
    """
    Get the availability window for a query made at ``start``.

    Args:
        start: Query time
        days_ahead: Number of days the window extends

    Returns:
        Tuple of (window_start, window_end), window_end being the end of day
        ``days_ahead`` days after ``start``
    """
    start = ensure_utc(start)
    return start, end_of_day(start + timedelta(days=days_ahead))


def get_timezone(tz_name: str) -> pytz.BaseTzInfo:
    """
    Resolve an IANA timezone name.

    Raises:
        InvalidInputError: If the name is unknown
    """
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise InvalidInputError(f"Unknown timezone: {tz_name}")


def to_timezone(dt: datetime, tz_name: str | None = None) -> datetime:
    """Convert a datetime to ``tz_name`` (UTC when not given)."""
    dt = ensure_utc(dt)
    if not tz_name:
        return dt
    return dt.astimezone(get_timezone(tz_name))


def isoformat_utc(dt: datetime) -> str:
    """Format a datetime as ISO 8601 in UTC with a ``Z`` suffix."""
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
