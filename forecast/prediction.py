"""MaintenancePrediction dataclass for engine forecasts."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .category import Category


class Basis(Enum):
    """Where a forecast came from."""

    HISTORY = "history"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class MaintenancePrediction:
    """Forecast of the next service for one category. Never persisted."""

    type: Category
    next_date: datetime
    next_mileage: int
    confidence: float
    basis: Basis
    last_date: datetime
    last_mileage: int

    @property
    def is_fallback(self) -> bool:
        return self.basis == Basis.FALLBACK
