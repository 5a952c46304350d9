"""MaintenanceItem class for scheduled, recurring tasks."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class MaintenanceItem:
    """
    A recurring task on a car's schedule.

    The title is the display key and doubles as the dedup identity.
    An interval of 0 means that axis (days or km) is not tracked.
    """

    title: str
    category: str = ""
    interval_days: int = 0
    interval_km: int = 0
    last_change_date: Optional[datetime] = None
    last_change_mileage: int = 0
    next_change_date: Optional[datetime] = None
    next_change_mileage: int = 0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
