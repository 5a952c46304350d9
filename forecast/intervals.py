"""Default service intervals per category, used when history is too thin."""

from typing import Dict, NamedTuple

from .category import Category


class Interval(NamedTuple):
    """Default distance/time interval. km == 0 means time-only tracking."""

    km: int
    days: int


DEFAULT_INTERVAL = Interval(km=10000, days=180)

INTERVALS: Dict[Category, Interval] = {
    Category.OIL: Interval(km=8000, days=180),
    Category.BRAKES: Interval(km=30000, days=365),
    Category.BATTERY: Interval(km=0, days=730),
    Category.TIRES: Interval(km=10000, days=180),
    Category.FLUIDS: Interval(km=20000, days=365),
    Category.INSPECTION: Interval(km=0, days=365),
}


def default_interval(category: Category) -> Interval:
    """Look up the default interval, falling back to DEFAULT_INTERVAL."""
    return INTERVALS.get(category, DEFAULT_INTERVAL)
