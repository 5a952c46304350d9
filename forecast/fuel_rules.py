"""Which schedule tasks apply to which fuel type."""

from typing import Dict, Iterable, List, Optional, Tuple

from .maintenance_item import MaintenanceItem

GASOLINE_TASKS = (
    "Engine Oil",
    "Air Filter",
    "Cabin Filter",
    "Tire Rotation",
    "Brake Fluid",
    "Coolant",
    "Battery Check",
    "Transmission Fluid",
    "Inspection",
)

DIESEL_TASKS = (
    "Engine Oil",
    "Fuel Filter",
    "Air Filter",
    "Cabin Filter",
    "Tire Rotation",
    "Coolant",
    "Battery Check",
    "Brake Fluid",
    "Inspection",
)

HYBRID_TASKS = (
    "Engine Oil",
    "Air Filter",
    "Cabin Filter",
    "Coolant",
    "Battery Check",
    "Brake Fluid",
    "Tire Rotation",
    "Hybrid System Check",
    "Inspection",
)

ELECTRIC_TASKS = (
    "Battery Check",
    "Coolant",
    "Brake Fluid",
    "Tire Rotation",
    "HV System Check",
    "Inspection",
)

ALLOWED_TASKS: Dict[str, Tuple[str, ...]] = {
    "gasoline": GASOLINE_TASKS,
    "petrol": GASOLINE_TASKS,
    "gas": GASOLINE_TASKS,
    "diesel": DIESEL_TASKS,
    "hybrid": HYBRID_TASKS,
    "electric": ELECTRIC_TASKS,
}


def allowed_tasks(fuel_type: Optional[str]) -> Tuple[str, ...]:
    """Task titles allowed for a fuel type. Unknown fuel types get ()."""
    if not fuel_type:
        return ()
    return ALLOWED_TASKS.get(fuel_type.strip().lower(), ())


def filter_tasks_by_fuel(
    items: Iterable[MaintenanceItem], fuel_type: Optional[str]
) -> List[MaintenanceItem]:
    """
    Keep items whose title is allowed for the fuel type.

    No allow-list (unknown or missing fuel type) means no restriction:
    every item passes through.
    """
    items = list(items)
    allowed = allowed_tasks(fuel_type)
    if not allowed:
        return items
    return [item for item in items if item.title in allowed]
