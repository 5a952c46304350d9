"""
Keeping a car's recurring schedule in step with its service records.

Unlike the predictor, the schedule only looks at the single most recent
matching record and adds the item's own interval to it.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from .calculations import add_days
from .car import Car
from .category import Category, matches_category, normalize_type
from .intervals import default_interval
from .maintenance_item import MaintenanceItem
from .service_record import ServiceRecord

logger = logging.getLogger(__name__)

# (title, category, interval days) seeded for every new car
DEFAULT_ITEMS = (
    ("Engine Oil", "Fluids", 180),
    ("Brake Fluid", "Fluids", 365),
    ("Coolant", "Fluids", 365),
    ("Air Filter", "Filters", 180),
    ("Cabin Filter", "Filters", 180),
    ("Transmission Fluid", "Fluids", 730),
    ("Tire Rotation", "Tires", 180),
    ("Battery Check", "Electrical", 365),
)


def item_category(item: MaintenanceItem) -> Category:
    """Canonical category of a schedule item, judged by its title."""
    return normalize_type(item.title)


def item_matches(item: MaintenanceItem, category: Category) -> bool:
    """Check if the item's title or category text belongs to category."""
    return matches_category(item.title, category) or matches_category(
        item.category, category
    )


def record_matches(item: MaintenanceItem, record: ServiceRecord) -> bool:
    """
    Check if a record counts as a service of the item.

    A record naming the item ("Wipers replaced" for "Wipers") always counts.
    Otherwise items whose title names a category only take records of that
    category, and free-form titles ("Pads & rotors") fall back to the
    item's category text.
    """
    title = (item.title or "").strip().lower()
    if title and title in (record.type or "").lower():
        return True
    category = item_category(item)
    if category != Category.OTHER:
        return record.category == category
    return item_matches(item, record.category)


def find_item_for_service(
    items: Iterable[MaintenanceItem], service_type: str
) -> Optional[MaintenanceItem]:
    """
    Schedule item a free-text service type belongs to, if any.

    In order of preference:
    1. an item whose title appears in the service type ("Cabin filter swap")
    2. an item whose title normalizes to the same category
    3. an item whose title or category text matches the category
    """
    items = list(items)
    text = (service_type or "").strip().lower()
    category = normalize_type(service_type)

    for item in items:
        title = (item.title or "").strip().lower()
        if title and title in text:
            return item
    if category != Category.OTHER:
        for item in items:
            if item_category(item) == category:
                return item
    for item in items:
        if item_matches(item, category):
            return item
    return None


def update_next_service(item: MaintenanceItem, today: datetime) -> MaintenanceItem:
    """
    Recompute next due date/mileage from the item's last change.

    - Date: last change (or today) + interval_days, or the category's
      default days when the item has no day interval.
    - Mileage: last change + interval_km, or the category's default km
      when the item has no km interval. Time-only categories get 0 (not
      tracked by mileage).
    """
    base_date = item.last_change_date or today
    days = item.interval_days
    if days <= 0:
        days = default_interval(item_category(item)).days
    next_date = add_days(base_date, days)

    km = item.interval_km
    if km <= 0:
        km = default_interval(item_category(item)).km
    next_mileage = item.last_change_mileage + km if km > 0 else 0

    return replace(item, next_change_date=next_date, next_change_mileage=next_mileage)


def latest_matching_record(
    item: MaintenanceItem, records: Iterable[ServiceRecord]
) -> Optional[ServiceRecord]:
    """Most recent dated record that counts as a service of the item."""
    matching = [r for r in records if r.date is not None and record_matches(item, r)]
    if not matching:
        return None
    return max(matching, key=lambda r: (r.date, r.mileage))


def refresh_item(
    item: MaintenanceItem, records: Iterable[ServiceRecord], today: datetime
) -> MaintenanceItem:
    """
    Re-derive an item's last/next values after a record was added,
    edited or deleted. Without a matching record the last change is kept.
    """
    latest = latest_matching_record(item, records)
    if latest is not None:
        item = replace(
            item, last_change_date=latest.date, last_change_mileage=latest.mileage
        )
    return update_next_service(item, today)


def refresh_items_for_service(
    items: Iterable[MaintenanceItem],
    records: Iterable[ServiceRecord],
    service_type: str,
    today: datetime,
) -> List[MaintenanceItem]:
    """
    Refresh the item matching service_type, leaving the others untouched.

    Returns the full item list in its original order.
    """
    items = list(items)
    records = list(records)
    target = find_item_for_service(items, service_type)
    if target is None:
        logger.debug("No schedule item matches service type '%s'", service_type)
        return items

    logger.debug("Refreshing '%s' after '%s' service", target.title, service_type)
    return [
        refresh_item(item, records, today) if item is target else item
        for item in items
    ]


def generate_default_items(
    car: Car, existing: Iterable[MaintenanceItem], today: datetime
) -> List[MaintenanceItem]:
    """Create the standard schedule for a car, skipping titles it already has."""
    titles = {(item.title or "").strip() for item in existing}

    created = []
    for title, category, days in DEFAULT_ITEMS:
        if title in titles:
            continue
        item = MaintenanceItem(
            title=title,
            category=category,
            interval_days=days,
            last_change_date=today,
            last_change_mileage=car.mileage,
        )
        created.append(update_next_service(item, today))
    return created
