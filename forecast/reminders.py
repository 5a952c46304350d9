"""
Reminder planning for scheduled items and predictions.

Delivery belongs to whatever implements NotificationCenter; this module only
works out which reminders should exist, when they fire and what they say.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import Dict, Iterable, List, Protocol, Sequence

from .calculations import add_days
from .maintenance_item import MaintenanceItem
from .prediction import MaintenancePrediction

logger = logging.getLogger(__name__)

REMINDER_OFFSETS = (7, 3, 0)
REMINDER_HOUR = 9


@dataclass(frozen=True)
class Reminder:
    """A single notification request."""

    identifier: str
    title: str
    body: str
    fire_at: datetime


class NotificationCenter(Protocol):
    """What a notification backend has to offer."""

    def add(self, reminder: Reminder) -> None:
        ...

    def remove(self, identifiers: Iterable[str]) -> None:
        ...

    def pending_identifiers(self) -> List[str]:
        ...


class InMemoryNotificationCenter:
    """NotificationCenter that just keeps reminders in a dict."""

    def __init__(self):
        self.pending: Dict[str, Reminder] = {}

    def add(self, reminder: Reminder) -> None:
        self.pending[reminder.identifier] = reminder

    def remove(self, identifiers: Iterable[str]) -> None:
        for identifier in identifiers:
            self.pending.pop(identifier, None)

    def pending_identifiers(self) -> List[str]:
        return list(self.pending)


def fire_time(due: datetime, days_before: int) -> datetime:
    """REMINDER_HOUR o'clock on the day days_before the due date."""
    day = add_days(due, -days_before).date()
    return datetime.combine(day, time(hour=REMINDER_HOUR))


def item_reminder_id(item: MaintenanceItem, days_before: int) -> str:
    return f"{item.id}_{days_before}"


def prediction_reminder_prefix(car_id: str) -> str:
    return f"pred:{car_id}:"


def prediction_reminder_id(car_id: str, type_name: str, days_before: int) -> str:
    return f"{prediction_reminder_prefix(car_id)}{type_name.lower()}:{days_before}"


def plan_item_reminders(
    item: MaintenanceItem,
    now: datetime,
    offsets: Sequence[int] = REMINDER_OFFSETS,
) -> List[Reminder]:
    """Reminders for a schedule item. Past fire times are skipped."""
    if not item.title or item.next_change_date is None:
        return []

    reminders = []
    for days_before in offsets:
        fire_at = fire_time(item.next_change_date, days_before)
        if fire_at <= now:
            continue
        if days_before == 0:
            body = f"It's time to service your car: {item.title}."
        else:
            body = f"Upcoming maintenance for {item.title} is due in {days_before} days."
        reminders.append(
            Reminder(
                identifier=item_reminder_id(item, days_before),
                title=f"Service Reminder: {item.title}",
                body=body,
                fire_at=fire_at,
            )
        )
    return reminders


def plan_prediction_reminders(
    car_name: str,
    car_id: str,
    predictions: Iterable[MaintenancePrediction],
    now: datetime,
    offsets: Sequence[int] = REMINDER_OFFSETS,
) -> List[Reminder]:
    """Reminders for each prediction of one car. Past fire times are skipped."""
    reminders = []
    for prediction in predictions:
        type_name = prediction.type.value
        for days_before in offsets:
            fire_at = fire_time(prediction.next_date, days_before)
            if fire_at <= now:
                continue
            when = "Today" if days_before == 0 else f"In {days_before} day(s)"
            body = (
                f"{when}. Predicted next: {prediction.next_date.date().isoformat()}"
                f" - approx. {prediction.next_mileage:,} km"
            )
            reminders.append(
                Reminder(
                    identifier=prediction_reminder_id(car_id, type_name, days_before),
                    title=f"{car_name}: {type_name} reminder",
                    body=body,
                    fire_at=fire_at,
                )
            )
    return reminders


def schedule_item_reminders(
    center: NotificationCenter, item: MaintenanceItem, now: datetime
) -> List[Reminder]:
    reminders = plan_item_reminders(item, now)
    for reminder in reminders:
        center.add(reminder)
    return reminders


def cancel_item_reminders(center: NotificationCenter, item: MaintenanceItem) -> None:
    center.remove([item_reminder_id(item, days) for days in REMINDER_OFFSETS])


def reschedule_item_reminders(
    center: NotificationCenter, item: MaintenanceItem, now: datetime
) -> List[Reminder]:
    """Drop an item's reminders and plan them again, e.g. after its date moved."""
    cancel_item_reminders(center, item)
    reminders = schedule_item_reminders(center, item, now)
    logger.debug("Rescheduled %d reminder(s) for '%s'", len(reminders), item.title)
    return reminders


def schedule_prediction_reminders(
    center: NotificationCenter,
    car_name: str,
    car_id: str,
    predictions: Iterable[MaintenancePrediction],
    now: datetime,
) -> List[Reminder]:
    reminders = plan_prediction_reminders(car_name, car_id, predictions, now)
    for reminder in reminders:
        center.add(reminder)
    return reminders


def cancel_prediction_reminders(center: NotificationCenter, car_id: str) -> None:
    """Remove every prediction reminder belonging to one car."""
    prefix = prediction_reminder_prefix(car_id)
    center.remove(
        [i for i in center.pending_identifiers() if i.startswith(prefix)]
    )
