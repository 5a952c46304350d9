"""YAML loading and saving utilities for vehicle data."""

import json
from datetime import datetime, time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml
from dateutil.parser import isoparse

from .car import Car
from .maintenance_item import MaintenanceItem
from .service_record import ServiceRecord
from .vehicle import Vehicle


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO date or datetime string. None and '' give None.

    Values with a UTC offset are converted to naive local time, so they
    compare with the naive datetimes used everywhere else.
    """
    if not value:
        return None
    parsed = isoparse(str(value))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_date(value: Optional[datetime]) -> Optional[str]:
    """ISO string for YAML, date-only when the time is midnight."""
    if value is None:
        return None
    if value.time() == time():
        return value.date().isoformat()
    return value.isoformat()


def _parse_object(
    dct: Dict[str, Any]
) -> Union[Car, MaintenanceItem, ServiceRecord, Vehicle, dict]:
    """Parse dictionary into appropriate object type."""
    # Car object (inside 'car' key)
    if "make" in dct and "model" in dct:
        return Car(
            dct["make"],
            dct["model"],
            dct.get("year"),
            dct.get("mileage") or 0,
            dct.get("fuelType"),
        )
    # Schedule item
    elif "title" in dct:
        kwargs = {}
        if dct.get("id"):
            kwargs["id"] = str(dct["id"])
        return MaintenanceItem(
            dct["title"],
            dct.get("category") or "",
            dct.get("intervalDays") or 0,
            dct.get("intervalKm") or 0,
            parse_date(dct.get("lastChangeDate")),
            dct.get("lastChangeMileage") or 0,
            parse_date(dct.get("nextChangeDate")),
            dct.get("nextChangeMileage") or 0,
            **kwargs,
        )
    # Service record
    elif "type" in dct and "date" in dct:
        return ServiceRecord(
            dct["type"],
            parse_date(dct["date"]),
            dct.get("mileage") or 0,
            dct.get("costParts") or 0.0,
            dct.get("costLabor") or 0.0,
            dct.get("note"),
        )
    # Top-level vehicle object
    elif "car" in dct:
        return Vehicle(dct["car"], dct.get("records"), dct.get("items"))
    else:
        return dct


def load_vehicle(filename: Union[str, Path]) -> Vehicle:
    """Load a vehicle from a YAML file."""
    with open(filename, "rb") as fp:
        # default=str: unquoted YAML dates come back as date objects
        json_data = json.dumps(
            yaml.load(fp, Loader=yaml.SafeLoader), indent=4, default=str
        )
        return json.loads(json_data, object_hook=_parse_object)


def _load_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        return yaml.load(fp, Loader=yaml.SafeLoader) or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _record_to_dict(record: ServiceRecord) -> Dict[str, Any]:
    """Serialize a ServiceRecord to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "type": record.type,
        "date": format_date(record.date),
        "mileage": record.mileage,
    }
    if record.cost_parts:
        d["costParts"] = record.cost_parts
    if record.cost_labor:
        d["costLabor"] = record.cost_labor
    if record.note is not None:
        d["note"] = record.note
    return d


def _item_to_dict(item: MaintenanceItem) -> Dict[str, Any]:
    """Serialize a MaintenanceItem, omitting unset fields."""
    d: Dict[str, Any] = {"id": item.id, "title": item.title}
    if item.category:
        d["category"] = item.category
    if item.interval_days:
        d["intervalDays"] = item.interval_days
    if item.interval_km:
        d["intervalKm"] = item.interval_km
    if item.last_change_date is not None:
        d["lastChangeDate"] = format_date(item.last_change_date)
    if item.last_change_mileage:
        d["lastChangeMileage"] = item.last_change_mileage
    if item.next_change_date is not None:
        d["nextChangeDate"] = format_date(item.next_change_date)
    if item.next_change_mileage:
        d["nextChangeMileage"] = item.next_change_mileage
    return d


def _check_index(entries: list, index: int, kind: str) -> None:
    if index < 0 or index >= len(entries):
        raise IndexError(f"{kind} index {index} out of range (0..{len(entries) - 1})")


def save_service_record(filename: Union[str, Path], record: ServiceRecord) -> None:
    """Append a service record to a vehicle YAML file."""
    data = _load_raw(filename)
    if data.get("records") is None:
        data["records"] = []
    data["records"].append(_record_to_dict(record))
    _write_raw(filename, data)


def update_service_record(
    filename: Union[str, Path], index: int, record: ServiceRecord
) -> None:
    """Replace the service record at records[index]."""
    data = _load_raw(filename)
    records = data.get("records") or []
    _check_index(records, index, "Record")
    records[index] = _record_to_dict(record)
    _write_raw(filename, data)


def delete_service_record(filename: Union[str, Path], index: int) -> None:
    """Remove the service record at records[index]."""
    data = _load_raw(filename)
    records = data.get("records") or []
    _check_index(records, index, "Record")
    del records[index]
    _write_raw(filename, data)


def save_items(filename: Union[str, Path], items: Iterable[MaintenanceItem]) -> None:
    """Replace the whole schedule of a vehicle YAML file."""
    data = _load_raw(filename)
    data["items"] = [_item_to_dict(item) for item in items]
    _write_raw(filename, data)


def save_current_mileage(filename: Union[str, Path], mileage: int) -> None:
    """Update car.mileage in a vehicle YAML file."""
    data = _load_raw(filename)
    if data.get("car") is None:
        data["car"] = {}
    data["car"]["mileage"] = mileage
    _write_raw(filename, data)
