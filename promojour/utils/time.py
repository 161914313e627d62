"""Time utilities (UTC now/today, day windows)."""
from __future__ import annotations
from datetime import date, datetime, time, timezone, timedelta

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def utc_today() -> date:
    return utc_now().date()

def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open UTC window ``[day 00:00, next day 00:00)``."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)

def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (sqlite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

__all__ = ["utc_now", "utc_today", "day_bounds", "as_utc"]
