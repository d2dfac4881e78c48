"""Timestamp utilities for UTC handling and receipt stamps."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Example:
        >>> naive = datetime(2025, 11, 4, 12, 0, 0)
        >>> ensure_utc(naive).tzinfo == timezone.utc
        True
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_receipt_date(dt: datetime) -> str:
    """Format the date part of a receipt stamp, e.g. '2025-11-04'."""
    return ensure_utc(dt).strftime("%Y-%m-%d")


def format_receipt_time(dt: datetime) -> str:
    """Format the time part of a receipt stamp, e.g. '14:05:09 UTC'."""
    return ensure_utc(dt).strftime("%H:%M:%S UTC")


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO 8601 in UTC with a 'Z' suffix.

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00Z'
    """
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
