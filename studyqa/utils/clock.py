"""Timestamp helpers."""
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def utcnow_ms() -> datetime:
    """Current UTC time rounded up to whole milliseconds, the precision BSON dates keep."""
    now = utcnow()
    remainder = now.microsecond % 1000
    if remainder:
        now += timedelta(microseconds=1000 - remainder)
    return now


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (as SQLite and BSON return them) and normalise aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
