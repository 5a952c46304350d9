"""Vehicle class - a snapshot of one car with its records and schedule."""

from datetime import datetime
from typing import List, Optional

from .alerts import rank_alerts
from .car import Car
from .category import Category
from .fuel_rules import filter_tasks_by_fuel
from .maintenance_item import MaintenanceItem
from .prediction import MaintenancePrediction
from .predictor import predict_next_maintenance
from .progress import ProgressReport, evaluate
from .schedule import refresh_items_for_service
from .service_record import ServiceRecord


class Vehicle:
    """Car info, service records and schedule items as of one point in time."""

    def __init__(
        self,
        car: Car,
        records: Optional[List[ServiceRecord]] = None,
        items: Optional[List[MaintenanceItem]] = None,
    ):
        self.car = car
        self.records = records or []
        self.items = items or []

    @property
    def current_mileage(self) -> int:
        """Odometer from the car, or the highest recorded service mileage."""
        if self.car.mileage:
            return self.car.mileage
        if self.records:
            return max(r.mileage for r in self.records)
        return 0

    @property
    def last_record(self) -> Optional[ServiceRecord]:
        """Most recent dated service record."""
        dated = [r for r in self.records if r.date is not None]
        if not dated:
            return None
        return max(dated, key=lambda r: (r.date, r.mileage))

    def get_record(self, index: int) -> ServiceRecord:
        """Record at a file position. Negative indexes are not allowed."""
        if index < 0 or index >= len(self.records):
            raise IndexError(
                f"Record index {index} out of range (0..{len(self.records) - 1})"
            )
        return self.records[index]

    def get_records_for_category(self, category: Category) -> List[ServiceRecord]:
        return [r for r in self.records if r.category == category]

    def get_item(self, title: str) -> Optional[MaintenanceItem]:
        """Find a schedule item by title (case-insensitive)."""
        wanted = title.strip().lower()
        for item in self.items:
            if (item.title or "").strip().lower() == wanted:
                return item
        return None

    def get_records_sorted(
        self, sort_by: str = "date", reverse: bool = True
    ) -> List[ServiceRecord]:
        """
        Get records sorted by specified field.

        Args:
            sort_by: "date", "mileage", or "type"
            reverse: If True, newest/highest first (default)
        """
        if sort_by == "date":
            return sorted(
                self.records, key=lambda r: r.date or datetime.min, reverse=reverse
            )
        elif sort_by == "mileage":
            return sorted(self.records, key=lambda r: r.mileage, reverse=reverse)
        elif sort_by == "type":
            return sorted(
                self.records,
                key=lambda r: (r.category.value, r.date or datetime.min),
                reverse=reverse,
            )
        return list(self.records)

    def predictions(self, now: datetime) -> List[MaintenancePrediction]:
        """Forecasts for every category, soonest first."""
        return predict_next_maintenance(self._car_snapshot(), self.records, now)

    def prediction_reports(self, now: datetime) -> List[ProgressReport]:
        """Predictions with their progress and status."""
        mileage = self.current_mileage
        return [evaluate(p, mileage, now) for p in self.predictions(now)]

    def alerts(self, today: datetime, fuel_filter: bool = True) -> List[MaintenanceItem]:
        """Schedule items relevant to this car, deduplicated and by urgency."""
        items = self.items
        if fuel_filter:
            items = filter_tasks_by_fuel(items, self.car.fuel_type)
        return rank_alerts(items, today)

    def with_record(self, record: ServiceRecord, today: datetime) -> "Vehicle":
        """New snapshot with record added and its schedule item refreshed."""
        records = self.records + [record]
        items = refresh_items_for_service(self.items, records, record.type, today)
        return Vehicle(self.car, records, items)

    def with_record_replaced(
        self, index: int, record: ServiceRecord, today: datetime
    ) -> "Vehicle":
        """
        New snapshot with records[index] replaced.

        Both the item the old record belonged to and the one the new record
        belongs to are refreshed, so a retyped record moves between items.
        """
        old = self.get_record(index)
        records = list(self.records)
        records[index] = record
        items = refresh_items_for_service(self.items, records, old.type, today)
        if record.type != old.type:
            items = refresh_items_for_service(items, records, record.type, today)
        return Vehicle(self.car, records, items)

    def with_record_removed(self, index: int, today: datetime) -> "Vehicle":
        """New snapshot without records[index], its item refreshed from the rest."""
        removed = self.get_record(index)
        records = self.records[:index] + self.records[index + 1 :]
        items = refresh_items_for_service(self.items, records, removed.type, today)
        return Vehicle(self.car, records, items)

    def _car_snapshot(self) -> Car:
        if self.car.mileage == self.current_mileage:
            return self.car
        return Car(
            self.car.make,
            self.car.model,
            self.car.year,
            self.current_mileage,
            self.car.fuel_type,
        )
