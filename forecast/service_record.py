"""ServiceRecord class for performed maintenance."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .category import Category, normalize_type


@dataclass(frozen=True)
class ServiceRecord:
    """A record of maintenance performed on a car."""

    type: str
    date: Optional[datetime]
    mileage: int = 0
    cost_parts: float = 0.0
    cost_labor: float = 0.0
    note: Optional[str] = None

    def __post_init__(self):
        if self.mileage < 0:
            raise ValueError(f"Service mileage cannot be negative: {self.mileage}")

    @property
    def category(self) -> Category:
        return normalize_type(self.type)

    @property
    def total_cost(self) -> float:
        return (self.cost_parts or 0.0) + (self.cost_labor or 0.0)
