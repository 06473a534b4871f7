from __future__ import annotations

from datetime import datetime, timezone

SECONDS_PER_HOUR = 3600


def ensure_aware(dt: datetime) -> datetime:
    """Coerce naive datetimes (SQLite hands them back) to UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_unix(dt: datetime) -> int:
    return int(ensure_aware(dt).timestamp())


def from_unix(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def truncate_hour(seconds: int) -> int:
    """Zero out minutes and seconds of a Unix timestamp."""
    return seconds - seconds % SECONDS_PER_HOUR
