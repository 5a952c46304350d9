"""Flask JSON API for vehicle maintenance forecasts."""

import os
from datetime import datetime
from pathlib import Path

from flask import Flask, abort, jsonify, request

from forecast import MaintenanceItem, ServiceRecord, Status, Urgency, load_vehicle
from forecast.alerts import days_until, item_urgency
from forecast.loader import (
    format_date,
    parse_date,
    save_current_mileage,
    save_items,
    save_service_record,
)
from forecast.progress import ProgressReport

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Directory holding <vehicle_id>.yaml files
app.config["VEHICLES_DIR"] = Path(
    os.environ.get("VEHICLES_DIR", Path(__file__).parent.parent / "vehicles")
)


def get_vehicle_files():
    """Get all vehicle YAML files."""
    return sorted(Path(app.config["VEHICLES_DIR"]).glob("*.yaml"))


def get_vehicle_path(vehicle_id: str) -> Path:
    """Get full path for a vehicle ID, 404 if it doesn't exist."""
    path = Path(app.config["VEHICLES_DIR"]) / f"{vehicle_id}.yaml"
    if not path.exists():
        abort(404, description=f"Vehicle '{vehicle_id}' not found")
    return path


def request_now() -> datetime:
    """?today=YYYY-MM-DD, or the current time."""
    value = request.args.get("today")
    if not value:
        return datetime.now()
    try:
        return parse_date(value)
    except ValueError:
        abort(400, description=f"Invalid date: {value}")


def report_to_json(report: ProgressReport) -> dict:
    p = report.prediction
    return {
        "type": p.type.value,
        "nextDate": format_date(p.next_date),
        "nextMileage": p.next_mileage,
        "confidence": round(p.confidence, 3),
        "basis": p.basis.value,
        "lastDate": format_date(p.last_date),
        "lastMileage": p.last_mileage,
        "isFallback": p.is_fallback,
        "progress": round(report.progress, 3),
        "status": report.status.name.lower(),
        "isOverdue": report.is_overdue,
    }


def item_to_json(item: MaintenanceItem, today: datetime) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "category": item.category,
        "nextChangeDate": format_date(item.next_change_date),
        "nextChangeMileage": item.next_change_mileage or None,
        "daysUntil": days_until(item.next_change_date, today)
        if item.next_change_date
        else None,
        "urgency": item_urgency(item, today).name.lower(),
    }


@app.errorhandler(400)
@app.errorhandler(404)
def json_error(error):
    return jsonify({"error": error.description}), error.code


@app.route("/")
def index():
    """Summary of all vehicles."""
    now = request_now()
    vehicles = []
    for path in get_vehicle_files():
        vehicle = load_vehicle(path)
        reports = vehicle.prediction_reports(now)
        alerts = vehicle.alerts(now)
        vehicles.append(
            {
                "id": path.stem,
                "name": vehicle.car.name,
                "mileage": vehicle.current_mileage,
                "overdue": sum(1 for r in reports if r.status == Status.OVERDUE),
                "dueSoon": sum(1 for r in reports if r.status == Status.DUE_SOON),
                "urgentTasks": sum(
                    1 for i in alerts if item_urgency(i, now) <= Urgency.URGENT
                ),
            }
        )
    return jsonify(vehicles)


@app.route("/vehicle/<vehicle_id>/predictions")
def vehicle_predictions(vehicle_id: str):
    """Predictions sorted by next date, with progress and status."""
    vehicle = load_vehicle(get_vehicle_path(vehicle_id))
    now = request_now()
    return jsonify(
        {
            "vehicle": vehicle.car.name,
            "mileage": vehicle.current_mileage,
            "predictions": [report_to_json(r) for r in vehicle.prediction_reports(now)],
        }
    )


@app.route("/vehicle/<vehicle_id>/alerts")
def vehicle_alerts(vehicle_id: str):
    """Deduplicated schedule items by urgency. ?all=true skips the fuel filter."""
    vehicle = load_vehicle(get_vehicle_path(vehicle_id))
    now = request_now()
    fuel_filter = request.args.get("all", "").lower() != "true"
    alerts = vehicle.alerts(now, fuel_filter=fuel_filter)
    return jsonify(
        {
            "vehicle": vehicle.car.name,
            "fuelType": vehicle.car.fuel_type,
            "alerts": [item_to_json(i, now) for i in alerts],
        }
    )


@app.route("/vehicle/<vehicle_id>/records", methods=["POST"])
def add_record(vehicle_id: str):
    """Add a service record and refresh the matching schedule item."""
    path = get_vehicle_path(vehicle_id)
    vehicle = load_vehicle(path)
    now = datetime.now()

    service_type = request.form.get("type")
    if not service_type:
        abort(400, description="Please enter a service type")

    try:
        service_date = parse_date(request.form.get("date")) or now
        mileage = int(request.form.get("mileage") or vehicle.current_mileage)
        record = ServiceRecord(
            type=service_type,
            date=service_date,
            mileage=mileage,
            cost_parts=float(request.form.get("costParts") or 0),
            cost_labor=float(request.form.get("costLabor") or 0),
            note=request.form.get("note") or None,
        )
    except ValueError as e:
        abort(400, description=str(e))

    updated = vehicle.with_record(record, now)
    save_service_record(path, record)
    save_items(path, updated.items)
    if record.mileage > vehicle.car.mileage:
        save_current_mileage(path, record.mileage)

    return jsonify({"saved": service_type, "category": record.category.value}), 201


@app.route("/vehicle/<vehicle_id>/mileage", methods=["POST"])
def update_mileage(vehicle_id: str):
    """Update the current odometer reading."""
    path = get_vehicle_path(vehicle_id)

    mileage = request.form.get("mileage")
    if not mileage:
        abort(400, description="Please enter mileage")

    try:
        km = int(mileage)
    except ValueError:
        abort(400, description="Invalid mileage value")
    if km < 0:
        abort(400, description="Invalid mileage value")

    save_current_mileage(path, km)
    return jsonify({"mileage": km})


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
