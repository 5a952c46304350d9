"""How far a car is through the interval between last and next service."""

from dataclasses import dataclass
from datetime import datetime

from .calculations import clamp01
from .prediction import MaintenancePrediction
from .status import Status

DUE_SOON_THRESHOLD = 0.85


@dataclass(frozen=True)
class ProgressReport:
    """Progress and status of one prediction at a point in time."""

    prediction: MaintenancePrediction
    progress: float
    status: Status
    is_overdue: bool

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.DUE_SOON)


def by_mileage(current: int, last: int, next_mileage: int) -> float:
    total = max(next_mileage - last, 1)
    return clamp01((current - last) / total)


def by_date(now: datetime, last: datetime, next_date: datetime) -> float:
    total = max((next_date - last).total_seconds(), 1.0)
    return clamp01((now - last).total_seconds() / total)


def has_mileage_axis(prediction: MaintenancePrediction) -> bool:
    """Time-only categories have next_mileage == last_mileage."""
    return prediction.next_mileage > prediction.last_mileage


def combined(
    current_mileage: int, now: datetime, prediction: MaintenancePrediction
) -> float:
    """0..1, higher = closer to due. Averages mileage and date when both apply."""
    date_progress = by_date(now, prediction.last_date, prediction.next_date)
    if not has_mileage_axis(prediction):
        return date_progress
    mileage_progress = by_mileage(
        current_mileage, prediction.last_mileage, prediction.next_mileage
    )
    return clamp01((mileage_progress + date_progress) / 2.0)


def is_overdue(
    current_mileage: int, now: datetime, prediction: MaintenancePrediction
) -> bool:
    """Past due by date or mileage. Fallback estimates are never overdue."""
    if prediction.is_fallback:
        return False
    if now > prediction.next_date:
        return True
    return prediction.next_mileage > 0 and current_mileage >= prediction.next_mileage


def status(
    current_mileage: int, now: datetime, prediction: MaintenancePrediction
) -> Status:
    if prediction.is_fallback:
        return Status.ESTIMATE
    if is_overdue(current_mileage, now, prediction):
        return Status.OVERDUE
    if combined(current_mileage, now, prediction) >= DUE_SOON_THRESHOLD:
        return Status.DUE_SOON
    return Status.NORMAL


def evaluate(
    prediction: MaintenancePrediction, current_mileage: int, now: datetime
) -> ProgressReport:
    """Bundle progress, status and overdue flag for display."""
    return ProgressReport(
        prediction=prediction,
        progress=combined(current_mileage, now, prediction),
        status=status(current_mileage, now, prediction),
        is_overdue=is_overdue(current_mileage, now, prediction),
    )
