"""Datetime normalization.

Every timestamp is timezone-aware UTC; naive values are taken to already be UTC.
"""

from datetime import datetime, timezone


def to_utc(dt: datetime | None) -> datetime | None:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
