"""Canonical maintenance categories and free-text type normalization."""

from enum import Enum
from typing import Tuple


class Category(Enum):
    """Canonical service categories used internally regardless of input text."""

    OIL = "Oil"
    BRAKES = "Brakes"
    BATTERY = "Battery"
    TIRES = "Tires"
    FLUIDS = "Fluids"
    INSPECTION = "Inspection"
    OTHER = "Other"


# Ordered: first match wins ("Brake Fluid" is BRAKES)
CATEGORY_KEYWORDS: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.OIL, ("oil",)),
    (Category.BRAKES, ("brake",)),
    (Category.BATTERY, ("battery",)),
    (Category.TIRES, ("tire",)),
    (Category.FLUIDS, ("fluid",)),
    (Category.INSPECTION, ("inspect", "filter")),
)

# Categories that get a forecast (OTHER never does)
PREDICTED_CATEGORIES = tuple(category for category, _ in CATEGORY_KEYWORDS)


def normalize_type(raw: str) -> Category:
    """Map a free-text service type (e.g. 'Oil Change') to a Category."""
    text = (raw or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return Category.OTHER


def keywords_for(category: Category) -> Tuple[str, ...]:
    """Keywords that identify a category, empty for OTHER."""
    for candidate, keywords in CATEGORY_KEYWORDS:
        if candidate == category:
            return keywords
    return ()


def matches_category(text: str, category: Category) -> bool:
    """Check if any of the category's keywords appear in text."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords_for(category))
