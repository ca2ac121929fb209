"""General utility functions."""
import math
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string in UTC, or None."""
    if dt is None:
        return None
    return to_utc(dt).isoformat()


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show `total` rows at `limit` per page."""
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def percentage(part: int, whole: int) -> float:
    """Percentage rounded to two decimals; 0 when the whole is empty."""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)
