"""Datetime utility functions for timezone handling."""
from datetime import datetime, UTC
from typing import Optional


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware in UTC.

    SQLite hands back naive datetimes even for timezone-aware columns; those
    are treated as UTC.

    Example:
        >>> ensure_utc(datetime(2025, 1, 1, 12, 0, 0)).tzinfo == UTC
        True

        >>> ensure_utc(None) is None
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def serialize_datetime_utc(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a datetime to ISO 8601 with a ``Z`` suffix."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(UTC).isoformat().replace('+00:00', 'Z')
