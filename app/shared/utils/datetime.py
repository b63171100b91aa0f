"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def format_human_timestamp(dt: datetime | None = None) -> str:
    """
    Format a datetime for people reading an email, e.g. "March 5, 2026 at 02:07 PM UTC".

    Args:
        dt: Datetime to format; defaults to now. Naive values are treated as UTC.

    Returns:
        Month name, day without padding, year, 12-hour clock and the UTC label.
    """
    value = ensure_utc(dt) or utc_now()
    return f"{value:%B} {value.day}, {value:%Y} at {value:%I:%M %p} UTC"
