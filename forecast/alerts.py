"""Deduplication and urgency ranking of scheduled items for alerting."""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Union

from .calculations import days_between
from .maintenance_item import MaintenanceItem
from .status import Urgency

logger = logging.getLogger(__name__)

# days_until() for items without a due date: never due soon
NO_DATE_DAYS = 9999


def days_until(due: Optional[datetime], today: Union[date, datetime]) -> int:
    """Calendar days from today to due, NO_DATE_DAYS if there is no date."""
    if due is None:
        return NO_DATE_DAYS
    return days_between(today, due)


def urgency_level(days: int) -> Urgency:
    """Map days until due to an urgency tier."""
    if days < 0:
        return Urgency.OVERDUE
    if days <= 2:
        return Urgency.URGENT
    if days <= 7:
        return Urgency.SOON
    return Urgency.OK


def item_urgency(item: MaintenanceItem, today: Union[date, datetime]) -> Urgency:
    return urgency_level(days_until(item.next_change_date, today))


def urgency_label(item: MaintenanceItem, today: Union[date, datetime]) -> str:
    """Short label such as 'overdue', 'today' or 'in 5d'."""
    if item.next_change_date is None:
        return "-"
    days = days_until(item.next_change_date, today)
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    return f"in {days}d"


def _is_earlier(candidate: MaintenanceItem, existing: MaintenanceItem) -> bool:
    """True if candidate should replace existing. A date beats no date."""
    if candidate.next_change_date is None:
        return False
    if existing.next_change_date is None:
        return True
    return candidate.next_change_date < existing.next_change_date


def remove_duplicates(items: Iterable[MaintenanceItem]) -> List[MaintenanceItem]:
    """
    Collapse items sharing a title, keeping the earliest due date.

    Titles are compared after trimming whitespace; untitled items are dropped.
    Output keeps the order in which each title was first seen.
    """
    by_title: Dict[str, MaintenanceItem] = {}
    for item in items:
        title = (item.title or "").strip()
        if not title:
            continue
        existing = by_title.get(title)
        if existing is None or _is_earlier(item, existing):
            if existing is not None:
                logger.debug("Dropping duplicate '%s' (id %s)", title, existing.id)
            by_title[title] = item
        else:
            logger.debug("Dropping duplicate '%s' (id %s)", title, item.id)
    return list(by_title.values())


def rank_alerts(
    items: Iterable[MaintenanceItem], today: Union[date, datetime]
) -> List[MaintenanceItem]:
    """
    Deduplicate items and order them by urgency tier, then due date.

    Items without a due date sort last within their tier.
    """
    unique = remove_duplicates(items)
    return sorted(
        unique,
        key=lambda item: (
            item_urgency(item, today),
            item.next_change_date or datetime.max,
        ),
    )
