from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def truncate_to_day(value) -> date:
    """Calendar day of a date or datetime, ignoring time of day."""
    if isinstance(value, datetime):
        return to_naive_utc(value).date()
    return value


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
