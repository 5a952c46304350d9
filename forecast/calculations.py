"""Date and clamping helpers shared by the predictors and the ranker."""

from datetime import date, datetime
from typing import Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]


def start_of_day(value: DateLike) -> date:
    """Calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole calendar days from start to end (negative if end is earlier)."""
    return (start_of_day(end) - start_of_day(start)).days


def add_days(value: datetime, days: int) -> datetime:
    """Add calendar days, keeping the time of day."""
    return value + relativedelta(days=days)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def clamp01(value: float) -> float:
    """Clamp to the 0..1 range."""
    return clamp(value, 0.0, 1.0)
