"""Datetime helpers for timer arithmetic"""
import math
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise a datetime to aware UTC.

    Databases without timezone support (SQLite) hand back naive values;
    those are stored as UTC, so the tzinfo is attached rather than converted.

    Args:
        dt: datetime to normalise, or None

    Returns:
        Aware UTC datetime, or None if dt is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def elapsed_seconds(start: datetime, now: datetime) -> int:
    """Whole seconds between start and now, floored"""
    delta = ensure_utc(now) - ensure_utc(start)
    return math.floor(delta.total_seconds())
