"""Status and urgency enums. Lower value = more urgent."""

from enum import Enum, IntEnum


class Status(Enum):
    """Progress status of a prediction."""

    OVERDUE = 1
    DUE_SOON = 2
    NORMAL = 3
    ESTIMATE = 4  # Fallback prediction, not enough history to judge


class Urgency(IntEnum):
    """Alert tier of a scheduled item, from days until its due date."""

    OVERDUE = 0
    URGENT = 1  # due within 0-2 days
    SOON = 2  # due within 3-7 days
    OK = 3
