"""
Vehicle maintenance forecasting.

This package estimates when a car's next service is due:
- Category: canonical service categories and free-text normalization
- Interval table: default km/day intervals per category
- Predictor: fallback and history-rate forecasts
- Fuel rules: which schedule tasks apply to which fuel type
- Alerts: deduplication and urgency ranking of schedule items
- Progress: how close a forecast is to due, and its status
- Schedule: recomputing schedule items from service records
- Reminders: 7/3/0-day reminder planning, delivered through a
  NotificationCenter the caller supplies
- Vehicle: snapshot aggregate tying it together
"""

from .status import Status, Urgency
from .category import Category, normalize_type
from .intervals import Interval, default_interval
from .car import Car
from .service_record import ServiceRecord
from .maintenance_item import MaintenanceItem
from .prediction import Basis, MaintenancePrediction
from .predictor import fallback_prediction, history_prediction, predict_next_maintenance
from .fuel_rules import allowed_tasks, filter_tasks_by_fuel
from .alerts import days_until, rank_alerts, remove_duplicates, urgency_level
from .progress import ProgressReport, evaluate
from .schedule import (
    find_item_for_service,
    generate_default_items,
    refresh_item,
    update_next_service,
)
from .reminders import (
    InMemoryNotificationCenter,
    NotificationCenter,
    Reminder,
    plan_item_reminders,
    plan_prediction_reminders,
    schedule_item_reminders,
    schedule_prediction_reminders,
)
from .vehicle import Vehicle
from .loader import load_vehicle, save_service_record

__all__ = [
    "Status",
    "Urgency",
    "Category",
    "normalize_type",
    "Interval",
    "default_interval",
    "Car",
    "ServiceRecord",
    "MaintenanceItem",
    "Basis",
    "MaintenancePrediction",
    "fallback_prediction",
    "history_prediction",
    "predict_next_maintenance",
    "allowed_tasks",
    "filter_tasks_by_fuel",
    "days_until",
    "rank_alerts",
    "remove_duplicates",
    "urgency_level",
    "ProgressReport",
    "evaluate",
    "find_item_for_service",
    "generate_default_items",
    "refresh_item",
    "update_next_service",
    "Reminder",
    "NotificationCenter",
    "InMemoryNotificationCenter",
    "plan_item_reminders",
    "plan_prediction_reminders",
    "schedule_item_reminders",
    "schedule_prediction_reminders",
    "Vehicle",
    "load_vehicle",
    "save_service_record",
]
