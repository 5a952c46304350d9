#!/usr/bin/env python3
"""
Unified CLI for vehicle maintenance forecasting.

Commands:
  predict      - Forecast the next service per category, with progress
  alerts       - Show scheduled tasks by urgency (deduplicated, fuel-filtered)
  history      - View service records
  items        - List the maintenance schedule
  log          - Add a service record and refresh the matching schedule item
  edit         - Change a service record and refresh the affected schedule items
  delete       - Remove a service record and refresh its schedule item
  reminders    - Preview the 7/3/0-day reminders that would be scheduled
  update-miles - Update current vehicle mileage
  init-items   - Seed the standard maintenance schedule
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from forecast import (
    InMemoryNotificationCenter,
    MaintenanceItem,
    ProgressReport,
    Reminder,
    ServiceRecord,
    Status,
    Urgency,
    generate_default_items,
    load_vehicle,
    save_service_record,
    schedule_item_reminders,
    schedule_prediction_reminders,
)
from forecast.alerts import item_urgency, urgency_label
from forecast.loader import (
    delete_service_record,
    parse_date,
    save_current_mileage,
    save_items,
    update_service_record,
)

logger = logging.getLogger("garage")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format odometer values for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_date(value: Optional[datetime]) -> str:
    return value.date().isoformat() if value is not None else "-"


def format_percent(fraction: Optional[float]) -> str:
    """Format a 0..1 fraction as a whole percentage."""
    return f"{fraction * 100:.0f}%" if fraction is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format a day count as '3mo 15d' or '-2mo 5d'."""
    if days is None:
        return "-"
    sign = "-" if days < 0 else ""
    days = abs(days)
    months = days // 30
    remaining_days = days % 30
    if months > 0:
        return f"{sign}{months}mo {remaining_days}d"
    return f"{sign}{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


STATUS_LABELS = {
    Status.OVERDUE: "OVERDUE",
    Status.DUE_SOON: "DUE SOON",
    Status.NORMAL: "OK",
    Status.ESTIMATE: "ESTIMATE",
}

URGENCY_LABELS = {
    Urgency.OVERDUE: "OVERDUE",
    Urgency.URGENT: "URGENT",
    Urgency.SOON: "SOON",
    Urgency.OK: "OK",
}


def parse_today(value: Optional[str]) -> datetime:
    """--today value, or the current time."""
    if value:
        return parse_date(value)
    return datetime.now()


# =============================================================================
# Predict command
# =============================================================================


def make_prediction_table(
    reports: List[ProgressReport], today: datetime
) -> List[List[str]]:
    """Convert prediction reports to table rows."""
    rows = []
    for report in reports:
        p = report.prediction
        rows.append(
            [
                p.type.value,
                STATUS_LABELS[report.status],
                format_date(p.next_date),
                format_days((p.next_date.date() - today.date()).days),
                format_km(p.next_mileage),
                format_percent(report.progress),
                format_percent(p.confidence),
                p.basis.value,
            ]
        )
    return rows


def cmd_predict(args):
    """Forecast the next service per category."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Current mileage: {vehicle.current_mileage:,.0f} km (as of {format_date(today)})")
    print(f"Service records: {len(vehicle.records)}")
    print()

    reports = vehicle.prediction_reports(today)
    headers = [
        "Category",
        "Status",
        "Next (date)",
        "Remaining",
        "Next (km)",
        "Progress",
        "Confidence",
        "Basis",
    ]
    print(tabulate(make_prediction_table(reports, today), headers=headers, tablefmt="simple"))

    due = [r for r in reports if r.is_due]
    if due:
        print()
        print(f"{len(due)} category(ies) need attention.")

    return 0


# =============================================================================
# Alerts command
# =============================================================================


def make_alert_table(items: List[MaintenanceItem], today: datetime) -> List[List[str]]:
    """Convert ranked schedule items to table rows."""
    rows = []
    for item in items:
        rows.append(
            [
                URGENCY_LABELS[item_urgency(item, today)],
                item.title,
                format_date(item.next_change_date),
                urgency_label(item, today),
                format_km(item.next_change_mileage or None),
            ]
        )
    return rows


def cmd_alerts(args):
    """Show scheduled tasks ranked by urgency."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Fuel type: {vehicle.car.fuel_type or '-'}")
    if args.no_fuel_filter:
        print("Filter: NONE (showing tasks for every fuel type)")
    print()

    alerts = vehicle.alerts(today, fuel_filter=not args.no_fuel_filter)
    if not alerts:
        print("No scheduled tasks.")
        return 0

    headers = ["Urgency", "Task", "Due (date)", "When", "Due (km)"]
    print(tabulate(make_alert_table(alerts, today), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(
    records: List[ServiceRecord],
    show_index: bool = False,
    indices: Optional[List[int]] = None,
) -> List[List[str]]:
    """Convert service records to table rows, optionally with their file index."""
    rows = []
    for i, record in enumerate(records):
        row = [
            format_date(record.date),
            format_km(record.mileage),
            record.type,
            record.category.value,
            format_cost(record.total_cost),
            truncate(record.note),
        ]
        if show_index:
            row.insert(0, str(indices[i] if indices is not None else i))
        rows.append(row)
    return rows


def cmd_history(args):
    """View service records."""
    vehicle = load_vehicle(args.vehicle_file)

    records = vehicle.get_records_sorted(sort_by=args.sort, reverse=not args.asc)

    # Apply filters
    if args.type:
        records = [r for r in records if args.type.lower() in r.type.lower()]

    if args.since:
        since = parse_date(args.since)
        records = [r for r in records if r.date is not None and r.date >= since]

    total_cost = sum(r.total_cost for r in records)
    last = vehicle.last_record

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Current mileage: {vehicle.current_mileage:,.0f} km")
    if last:
        print(f"Last service: {format_date(last.date)} @ {last.mileage:,.0f} km")
    print(f"Total services: {len(vehicle.records)}")
    if args.type or args.since:
        print(f"Showing: {len(records)} (filtered)")
    if total_cost > 0:
        print(f"Total cost: ${total_cost:,.2f}")
    print()

    if not records:
        print("No service records found.")
        return 0

    headers = ["Date", "Mileage", "Service", "Category", "Cost", "Note"]
    indices = None
    if args.index:
        # Position in the file, as taken by edit and delete
        positions = {id(r): i for i, r in enumerate(vehicle.records)}
        indices = [positions[id(r)] for r in records]
        headers.insert(0, "#")
    rows = make_history_table(records, show_index=args.index, indices=indices)
    print(tabulate(rows, headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Items command
# =============================================================================


def make_items_table(items: List[MaintenanceItem]) -> List[List[str]]:
    rows = []
    for item in items:
        interval = []
        if item.interval_km:
            interval.append(f"{item.interval_km:,} km")
        if item.interval_days:
            interval.append(f"{item.interval_days} d")
        rows.append(
            [
                item.title,
                item.category or "-",
                " / ".join(interval) if interval else "-",
                format_date(item.last_change_date),
                format_date(item.next_change_date),
                format_km(item.next_change_mileage or None),
            ]
        )
    return rows


def cmd_items(args):
    """List the maintenance schedule."""
    vehicle = load_vehicle(args.vehicle_file)

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Items: {len(vehicle.items)}")
    print()

    items = sorted(vehicle.items, key=lambda i: (i.title or "").lower())
    headers = ["Task", "Category", "Interval", "Last", "Next (date)", "Next (km)"]
    print(tabulate(make_items_table(items), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Log command
# =============================================================================


def print_schedule_changes(
    before: List[MaintenanceItem], after: List[MaintenanceItem]
) -> List[MaintenanceItem]:
    """Print and return the schedule items a record change refreshed."""
    changed = [new for old, new in zip(before, after) if old is not new]
    for item in changed:
        print(
            f"  Schedule: {item.title} next due {format_date(item.next_change_date)}"
            + (f" / {item.next_change_mileage:,} km" if item.next_change_mileage else "")
        )
    return changed


def cmd_log(args):
    """Add a service record and refresh the matching schedule item."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    service_date = parse_date(args.date) if args.date else today
    mileage = args.mileage if args.mileage is not None else vehicle.current_mileage
    if mileage < 0:
        print(f"Error: Mileage cannot be negative: {mileage}")
        return 1

    record = ServiceRecord(
        type=args.service_type,
        date=service_date,
        mileage=mileage,
        cost_parts=args.parts or 0.0,
        cost_labor=args.labor or 0.0,
        note=args.note,
    )

    print(f"Adding service record to {args.vehicle_file}:")
    print(f"  Service:  {record.type} ({record.category.value})")
    print(f"  Date:     {format_date(record.date)}")
    print(f"  Mileage:  {record.mileage:,.0f}")
    if record.total_cost:
        print(f"  Cost:     {format_cost(record.total_cost)}")
    if record.note:
        print(f"  Note:     {record.note}")

    updated = vehicle.with_record(record, today)
    changed = print_schedule_changes(vehicle.items, updated.items)
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_service_record(args.vehicle_file, record)
    if changed:
        save_items(args.vehicle_file, updated.items)
    if mileage > vehicle.car.mileage:
        save_current_mileage(args.vehicle_file, mileage)
    print("Record saved.")

    return 0


# =============================================================================
# Edit command
# =============================================================================


def cmd_edit(args):
    """Change a service record and refresh the affected schedule items."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    old = vehicle.get_record(args.index)

    record = ServiceRecord(
        type=args.type if args.type is not None else old.type,
        date=parse_date(args.date) if args.date else old.date,
        mileage=args.mileage if args.mileage is not None else old.mileage,
        cost_parts=args.parts if args.parts is not None else old.cost_parts,
        cost_labor=args.labor if args.labor is not None else old.cost_labor,
        note=args.note if args.note is not None else old.note,
    )

    print(f"Editing record {args.index} in {args.vehicle_file}:")
    for label, entry in (("Before", old), ("After", record)):
        print(
            f"  {label + ':':<9} {format_date(entry.date)} {entry.type}"
            f" @ {format_km(entry.mileage)} km"
        )

    updated = vehicle.with_record_replaced(args.index, record, today)
    changed = print_schedule_changes(vehicle.items, updated.items)
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    update_service_record(args.vehicle_file, args.index, record)
    if changed:
        save_items(args.vehicle_file, updated.items)
    print("Record updated.")

    return 0


# =============================================================================
# Delete command
# =============================================================================


def cmd_delete(args):
    """Remove a service record and refresh its schedule item."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    removed = vehicle.get_record(args.index)
    updated = vehicle.with_record_removed(args.index, today)

    print(f"Deleting record {args.index} from {args.vehicle_file}:")
    print(f"  {format_date(removed.date)} {removed.type} @ {format_km(removed.mileage)} km")
    changed = print_schedule_changes(vehicle.items, updated.items)
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    delete_service_record(args.vehicle_file, args.index)
    if changed:
        save_items(args.vehicle_file, updated.items)
    print("Record deleted.")

    return 0


# =============================================================================
# Reminders command
# =============================================================================


def make_reminder_table(reminders: List[Reminder]) -> List[List[str]]:
    rows = []
    for reminder in reminders:
        rows.append(
            [
                reminder.fire_at.strftime("%Y-%m-%d %H:%M"),
                reminder.identifier,
                reminder.title,
                truncate(reminder.body, 60),
            ]
        )
    return rows


def cmd_reminders(args):
    """Preview the reminders that would be scheduled for this car."""
    vehicle = load_vehicle(args.vehicle_file)
    now = parse_today(args.today)

    center = InMemoryNotificationCenter()
    for item in vehicle.alerts(now):
        schedule_item_reminders(center, item, now)
    if args.predictions:
        schedule_prediction_reminders(
            center,
            vehicle.car.name,
            args.vehicle_file.stem,
            vehicle.predictions(now),
            now,
        )

    reminders = sorted(center.pending.values(), key=lambda r: (r.fire_at, r.identifier))

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Reminders: {len(reminders)} (as of {format_date(now)})")
    print()

    if not reminders:
        print("No upcoming reminders.")
        return 0

    headers = ["Fires", "Id", "Title", "Message"]
    print(tabulate(make_reminder_table(reminders), headers=headers, tablefmt="simple"))

    return 0


# =============================================================================
# Update Miles command
# =============================================================================


def cmd_update_miles(args):
    """Update current vehicle mileage."""
    vehicle = load_vehicle(args.vehicle_file)
    old_mileage = vehicle.current_mileage

    print(f"Vehicle: {vehicle.car.name}")
    print(f"Current mileage: {old_mileage:,.0f}")
    print(f"New mileage:     {args.mileage:,.0f}")
    print()

    if args.mileage < old_mileage:
        logger.warning("New mileage %s is below the current %s", args.mileage, old_mileage)

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_current_mileage(args.vehicle_file, args.mileage)
    print("Mileage updated.")

    return 0


# =============================================================================
# Init Items command
# =============================================================================


def cmd_init_items(args):
    """Seed the standard schedule, keeping existing items."""
    vehicle = load_vehicle(args.vehicle_file)
    today = parse_today(args.today)

    created = generate_default_items(vehicle.car, vehicle.items, today)
    if not created:
        print("Schedule already has every standard item.")
        return 0

    print(f"Adding {len(created)} item(s) to {args.vehicle_file}:")
    for item in created:
        print(f"  {item.title} (every {item.interval_days} d)")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_items(args.vehicle_file, vehicle.items + created)
    print("Schedule saved.")

    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle maintenance forecaster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/corolla.yaml predict
  %(prog)s vehicles/corolla.yaml predict --today 2025-06-01
  %(prog)s vehicles/corolla.yaml alerts
  %(prog)s vehicles/corolla.yaml alerts --no-fuel-filter
  %(prog)s vehicles/corolla.yaml history --type oil
  %(prog)s vehicles/corolla.yaml log "Oil Change" --mileage 58000 --parts 40
  %(prog)s vehicles/corolla.yaml history --index
  %(prog)s vehicles/corolla.yaml edit 3 --mileage 46600
  %(prog)s vehicles/corolla.yaml delete 3
  %(prog)s vehicles/corolla.yaml reminders --predictions
  %(prog)s vehicles/corolla.yaml update-miles 58000
  %(prog)s vehicles/corolla.yaml init-items
""",
    )
    parser.add_argument(
        "vehicle_file",
        type=Path,
        help="Path to vehicle YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log engine decisions to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Predict subcommand
    predict_parser = subparsers.add_parser(
        "predict", help="Forecast the next service per category"
    )
    predict_parser.add_argument(
        "--today",
        type=str,
        help="Evaluate as of this date (YYYY-MM-DD, default: now)",
    )

    # Alerts subcommand
    alerts_parser = subparsers.add_parser(
        "alerts", help="Show scheduled tasks ranked by urgency"
    )
    alerts_parser.add_argument(
        "--today",
        type=str,
        help="Evaluate as of this date (YYYY-MM-DD, default: now)",
    )
    alerts_parser.add_argument(
        "--no-fuel-filter",
        action="store_true",
        help="Show tasks regardless of the car's fuel type",
    )

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View service records")
    history_parser.add_argument(
        "--type",
        type=str,
        help="Filter to service types containing text (case-insensitive)",
    )
    history_parser.add_argument(
        "--since",
        type=str,
        help="Show only records since date (YYYY-MM-DD)",
    )
    history_parser.add_argument(
        "--sort",
        choices=["date", "mileage", "type"],
        default="date",
        help="Sort order (default: date)",
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )
    history_parser.add_argument(
        "--index",
        action="store_true",
        help="Show each record's index (as taken by edit and delete)",
    )

    # Items subcommand
    subparsers.add_parser("items", help="List the maintenance schedule")

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Add a service record")
    log_parser.add_argument(
        "service_type",
        type=str,
        help="Service type, free text (e.g., 'Oil Change', 'brake pads')",
    )
    log_parser.add_argument(
        "--date",
        type=str,
        help="Service date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--mileage",
        type=int,
        help="Odometer at time of service (default: current mileage)",
    )
    log_parser.add_argument("--parts", type=float, help="Parts cost")
    log_parser.add_argument("--labor", type=float, help="Labor cost")
    log_parser.add_argument("--note", type=str, help="Note about the service")
    log_parser.add_argument(
        "--today",
        type=str,
        help="Reference date for schedule updates (default: now)",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Edit subcommand
    edit_parser = subparsers.add_parser(
        "edit", help="Change a service record (see history --index)"
    )
    edit_parser.add_argument("index", type=int, help="Record index")
    edit_parser.add_argument("--type", type=str, help="New service type")
    edit_parser.add_argument("--date", type=str, help="New date (YYYY-MM-DD)")
    edit_parser.add_argument("--mileage", type=int, help="New odometer reading")
    edit_parser.add_argument("--parts", type=float, help="New parts cost")
    edit_parser.add_argument("--labor", type=float, help="New labor cost")
    edit_parser.add_argument("--note", type=str, help="New note")
    edit_parser.add_argument(
        "--today",
        type=str,
        help="Reference date for schedule updates (default: now)",
    )
    edit_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without saving",
    )

    # Delete subcommand
    delete_parser = subparsers.add_parser(
        "delete", help="Remove a service record (see history --index)"
    )
    delete_parser.add_argument("index", type=int, help="Record index")
    delete_parser.add_argument(
        "--today",
        type=str,
        help="Reference date for schedule updates (default: now)",
    )
    delete_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be removed without saving",
    )

    # Reminders subcommand
    reminders_parser = subparsers.add_parser(
        "reminders", help="Preview upcoming service reminders"
    )
    reminders_parser.add_argument(
        "--today",
        type=str,
        help="Plan as of this date (YYYY-MM-DD, default: now)",
    )
    reminders_parser.add_argument(
        "--predictions",
        action="store_true",
        help="Also remind about forecast services",
    )

    # Update Miles subcommand
    update_miles_parser = subparsers.add_parser(
        "update-miles", help="Update current vehicle mileage"
    )
    update_miles_parser.add_argument(
        "mileage",
        type=int,
        help="Current odometer reading (km)",
    )
    update_miles_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be updated without saving",
    )

    # Init Items subcommand
    init_parser = subparsers.add_parser(
        "init-items", help="Seed the standard maintenance schedule"
    )
    init_parser.add_argument(
        "--today",
        type=str,
        help="Start date for the new items (default: now)",
    )
    init_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    return parser


COMMANDS = {
    "predict": cmd_predict,
    "alerts": cmd_alerts,
    "history": cmd_history,
    "items": cmd_items,
    "log": cmd_log,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "reminders": cmd_reminders,
    "update-miles": cmd_update_miles,
    "init-items": cmd_init_items,
}


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate vehicle file exists
    if not args.vehicle_file.exists():
        print(f"Error: File not found: {args.vehicle_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except (ValueError, IndexError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
