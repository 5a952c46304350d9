"""
Next-service forecasting from a car's service history.

Two strategies:
- Fallback: last known service (or now) plus the category's default interval.
- History: extrapolate a km/day rate from the two most recent records and
  take whichever of the km-derived or day-derived due date comes first.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from .calculations import add_days, clamp, days_between
from .car import Car
from .category import PREDICTED_CATEGORIES, Category
from .intervals import default_interval
from .prediction import Basis, MaintenancePrediction
from .service_record import ServiceRecord

logger = logging.getLogger(__name__)

NO_HISTORY_CONFIDENCE = 0.35
ONE_RECORD_CONFIDENCE = 0.45
MIN_HISTORY_CONFIDENCE = 0.55
MAX_HISTORY_CONFIDENCE = 0.95
# Records needed for the confidence to grow past the minimum
CONFIDENCE_HISTORY_SCALE = 6
# Below this rate the car is treated as not accumulating distance
MIN_KM_PER_DAY = 1.0


def fallback_prediction(
    category: Category,
    car: Car,
    now: datetime,
    last_date: Optional[datetime] = None,
    last_mileage: Optional[int] = None,
) -> MaintenancePrediction:
    """
    Forecast from the default interval alone.

    - Without a last known service: due default_days from now,
      default_km past the current odometer.
    - With one: due default_days / default_km after that service.
    Next mileage never falls behind the current odometer.
    """
    interval = default_interval(category)

    base_date = last_date if last_date is not None else now
    base_mileage = last_mileage if last_mileage is not None else car.mileage

    next_date = add_days(base_date, interval.days)
    next_mileage = max(base_mileage + interval.km, car.mileage)

    return MaintenancePrediction(
        type=category,
        next_date=next_date,
        next_mileage=next_mileage,
        confidence=NO_HISTORY_CONFIDENCE if last_date is None else ONE_RECORD_CONFIDENCE,
        basis=Basis.FALLBACK,
        last_date=base_date,
        last_mileage=base_mileage,
    )


def history_prediction(
    category: Category,
    car: Car,
    history: Sequence[ServiceRecord],
    now: datetime,
) -> MaintenancePrediction:
    """
    Forecast from the usage rate between the two most recent records.

    history must hold at least two same-category records, most recent first.
    """
    if len(history) < 2:
        raise ValueError(
            f"History prediction needs at least 2 records, got {len(history)}"
        )

    latest, previous = history[0], history[1]

    delta_days = max(1, days_between(previous.date, latest.date))
    delta_km = max(1, latest.mileage - previous.mileage)
    km_per_day = delta_km / delta_days

    if km_per_day < MIN_KM_PER_DAY:
        logger.debug(
            "%s: %.2f km/day below floor, using default interval",
            category.value,
            km_per_day,
        )
        return fallback_prediction(
            category, car, now, last_date=latest.date, last_mileage=latest.mileage
        )

    interval = default_interval(category)
    if interval.km > 0:
        days_to_km = math.ceil(interval.km / km_per_day)
    else:
        days_to_km = interval.days

    due_by_km = add_days(latest.date, days_to_km)
    due_by_days = add_days(latest.date, interval.days)
    next_date = due_by_km if due_by_km <= due_by_days else due_by_days

    days_remaining = max(0, days_between(now, next_date))
    estimated = round(car.mileage + days_remaining * km_per_day)
    next_mileage = max(estimated, car.mileage, latest.mileage)

    confidence = clamp(
        len(history) / CONFIDENCE_HISTORY_SCALE,
        MIN_HISTORY_CONFIDENCE,
        MAX_HISTORY_CONFIDENCE,
    )

    return MaintenancePrediction(
        type=category,
        next_date=next_date,
        next_mileage=next_mileage,
        confidence=confidence,
        basis=Basis.HISTORY,
        last_date=latest.date,
        last_mileage=latest.mileage,
    )


def predict_category(
    category: Category,
    car: Car,
    history: Sequence[ServiceRecord],
    now: datetime,
) -> MaintenancePrediction:
    """Pick the strategy for one category. history is most recent first."""
    if len(history) >= 2:
        return history_prediction(category, car, history, now)
    if history:
        latest = history[0]
        return fallback_prediction(
            category, car, now, last_date=latest.date, last_mileage=latest.mileage
        )
    return fallback_prediction(category, car, now)


def group_by_category(
    records: Iterable[ServiceRecord],
) -> Dict[Category, List[ServiceRecord]]:
    """Group dated records by category, each group most recent first."""
    grouped: Dict[Category, List[ServiceRecord]] = defaultdict(list)
    for record in records:
        if record.date is None:
            continue
        grouped[record.category].append(record)
    for entries in grouped.values():
        entries.sort(key=lambda r: r.date, reverse=True)
    return grouped


def predict_next_maintenance(
    car: Car, records: Iterable[ServiceRecord], now: datetime
) -> List[MaintenancePrediction]:
    """
    Forecast every predicted category for a car, soonest first.

    Records without a date are ignored. Free-text types are normalized,
    so 'Oil Change' and 'oil top-up' share one history.
    """
    grouped = group_by_category(records)

    predictions = []
    for category in PREDICTED_CATEGORIES:
        history = grouped.get(category, [])
        prediction = predict_category(category, car, history, now)
        logger.debug(
            "%s: %s prediction from %d record(s), due %s",
            category.value,
            prediction.basis.value,
            len(history),
            prediction.next_date.date().isoformat(),
        )
        predictions.append(prediction)

    predictions.sort(key=lambda p: p.next_date)
    return predictions
