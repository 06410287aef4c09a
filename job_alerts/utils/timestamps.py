"""Timestamp utilities for UTC handling.

All datetimes that cross a module boundary are timezone-aware UTC. The
database stores them as ISO 8601 strings with an explicit ``Z`` suffix.
"""

from datetime import datetime, timezone
from typing import Optional

_STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

SECONDS_PER_DAY = 60 * 60 * 24


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Example:
        >>> utc_now().tzinfo == timezone.utc
        True
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware datetime in UTC, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def age_in_days(created_at: datetime, now: Optional[datetime] = None) -> float:
    """Return the fractional number of days between created_at and now.

    Args:
        created_at: Creation timestamp
        now: Reference time (defaults to utc_now())

    Returns:
        Age in days. Negative when created_at lies in the future.

    Example:
        >>> from datetime import timedelta
        >>> ref = datetime(2025, 11, 10, tzinfo=timezone.utc)
        >>> age_in_days(ref - timedelta(hours=36), now=ref)
        1.5
    """
    reference = ensure_utc(now) if now is not None else utc_now()
    delta = reference - ensure_utc(created_at)
    return delta.total_seconds() / SECONDS_PER_DAY


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string for database storage.

    Example:
        >>> format_timestamp(datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc))
        '2025-11-04T12:00:00.000000Z'
    """
    if dt is None:
        return None
    return ensure_utc(dt).strftime(_STORAGE_FORMAT)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string into a UTC datetime.

    Accepts the storage format plus the common variants
    ``2025-11-04T12:00:00Z``, ``2025-11-04T12:00:00+02:00`` and ``2025-11-04``.

    Returns:
        Timezone-aware datetime in UTC, or None for empty or unparseable input
    """
    if not value or not value.strip():
        return None

    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        pass

    for fmt in ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
        try:
            return ensure_utc(datetime.strptime(cleaned.split("+")[0], fmt))
        except ValueError:
            continue
    return None
