#!/usr/bin/env python3
"""Tests for recomputing schedule items from service records."""

from datetime import datetime, timedelta

import pytest
from forecast import (
    Car,
    MaintenanceItem,
    ServiceRecord,
    find_item_for_service,
    generate_default_items,
    refresh_item,
    update_next_service,
)
from forecast.schedule import DEFAULT_ITEMS, latest_matching_record, refresh_items_for_service

DAY0 = datetime(2025, 1, 1)
TODAY = datetime(2025, 6, 1)


def day(n: int) -> datetime:
    return DAY0 + timedelta(days=n)


@pytest.fixture
def items():
    return [
        MaintenanceItem("Engine Oil", "Fluids", 180, 8000, DAY0, 40000),
        MaintenanceItem("Brake Fluid", "Fluids", 365, 0, DAY0, 40000),
        MaintenanceItem("Tire Rotation", "Tires", 180, 10000, DAY0, 40000),
    ]


class TestUpdateNextService:
    """Tests for update_next_service."""

    def test_both_axes(self):
        item = MaintenanceItem("Engine Oil", "Fluids", 180, 8000, DAY0, 40000)
        updated = update_next_service(item, TODAY)
        assert updated.next_change_date == day(180)
        assert updated.next_change_mileage == 48000

    def test_does_not_mutate(self):
        item = MaintenanceItem("Engine Oil", "Fluids", 180, 8000, DAY0, 40000)
        update_next_service(item, TODAY)
        assert item.next_change_date is None
        assert item.next_change_mileage == 0

    def test_no_km_interval_uses_category_default(self):
        """A stale next mileage is replaced, never left behind the last change."""
        item = MaintenanceItem("Engine Oil", "Fluids", 180, 0, DAY0, 60000, None, 48000)
        assert update_next_service(item, TODAY).next_change_mileage == 68000
        coolant = MaintenanceItem("Coolant", "Fluids", 365, 0, DAY0, 40000, None, 55555)
        assert update_next_service(coolant, TODAY).next_change_mileage == 50000

    def test_time_only_category_has_no_due_mileage(self):
        battery = MaintenanceItem(
            "Battery Check", "Electrical", 365, 0, DAY0, 40000, None, 45000
        )
        assert update_next_service(battery, TODAY).next_change_mileage == 0

    def test_refresh_without_km_interval_moves_mileage_forward(self):
        item = MaintenanceItem("Engine Oil", "Fluids", 180, 0, DAY0, 40000, None, 48000)
        records = [ServiceRecord("Oil Change", day(100), 60000)]
        refreshed = refresh_item(item, records, TODAY)
        assert refreshed.last_change_mileage == 60000
        assert refreshed.next_change_mileage >= refreshed.last_change_mileage
        assert refreshed.next_change_mileage == 68000

    def test_no_day_interval_uses_category_default(self):
        battery = MaintenanceItem("Battery Check", "Electrical", 0, 0, DAY0)
        assert update_next_service(battery, TODAY).next_change_date == day(730)
        wipers = MaintenanceItem("Wipers", "", 0, 0, DAY0)
        assert update_next_service(wipers, TODAY).next_change_date == day(180)

    def test_no_last_change_counts_from_today(self):
        item = MaintenanceItem("Engine Oil", "Fluids", 180)
        assert update_next_service(item, TODAY).next_change_date == TODAY + timedelta(days=180)


class TestFindItemForService:
    """Tests for find_item_for_service."""

    def test_by_title(self, items):
        assert find_item_for_service(items, "Oil Change").title == "Engine Oil"
        assert find_item_for_service(items, "brake pads").title == "Brake Fluid"
        assert find_item_for_service(items, "Tire rotation").title == "Tire Rotation"

    def test_by_category_text(self):
        item = MaintenanceItem("Pads & rotors", "Brakes")
        assert find_item_for_service([item], "Brake service") is item

    def test_no_match(self, items):
        assert find_item_for_service(items, "Wiper blades") is None
        assert find_item_for_service([], "Oil Change") is None

    def test_title_category_beats_category_text(self):
        """Transmission Fluid lands on its own item, not Engine Oil (category Fluids)."""
        defaults = generate_default_items(Car("Toyota", "Corolla", 2018, 30000), [], TODAY)
        fluid = find_item_for_service(defaults, "Transmission Fluid")
        assert fluid.title == "Transmission Fluid"
        assert find_item_for_service(defaults, "Coolant flush").title == "Coolant"
        assert find_item_for_service(defaults, "Cabin filter swap").title == "Cabin Filter"
        assert find_item_for_service(defaults, "Oil Change").title == "Engine Oil"

    def test_refresh_defaults_after_fluid_service(self):
        car = Car("Toyota", "Corolla", 2018, 30000)
        defaults = generate_default_items(car, [], DAY0)
        records = [ServiceRecord("Transmission Fluid", day(30), 32000)]
        result = refresh_items_for_service(defaults, records, "Transmission Fluid", day(30))
        changed = [
            after.title for before, after in zip(defaults, result) if before is not after
        ]
        assert changed == ["Transmission Fluid"]
        fluid = next(i for i in result if i.title == "Transmission Fluid")
        assert fluid.last_change_mileage == 32000
        assert fluid.next_change_date == day(30 + 730)

    def test_oil_item_ignores_fluid_records(self):
        oil = MaintenanceItem("Engine Oil", "Fluids", 180, 8000, DAY0, 40000)
        records = [
            ServiceRecord("Oil Change", day(10), 41000),
            ServiceRecord("Transmission Fluid", day(50), 43000),
        ]
        assert latest_matching_record(oil, records).mileage == 41000

    def test_free_form_item_matches_records_naming_it(self):
        wipers = MaintenanceItem("Wipers", "", 180)
        records = [ServiceRecord("Wipers replaced", day(5), 1000)]
        assert latest_matching_record(wipers, records).mileage == 1000


class TestRefreshItem:
    """Tests for refresh_item and refresh_items_for_service."""

    @pytest.fixture
    def records(self):
        return [
            ServiceRecord("Oil Change", day(0), 40000),
            ServiceRecord("Oil Change", day(90), 45000),
            ServiceRecord("Brake pads", day(120), 46000),
            ServiceRecord("Oil Change", None, 99999),
        ]

    def test_latest_matching_record(self, items, records):
        latest = latest_matching_record(items[0], records)
        assert latest.date == day(90)
        assert latest.mileage == 45000

    def test_uses_most_recent_record(self, items, records):
        refreshed = refresh_item(items[0], records, TODAY)
        assert refreshed.last_change_date == day(90)
        assert refreshed.last_change_mileage == 45000
        assert refreshed.next_change_date == day(270)
        assert refreshed.next_change_mileage == 53000

    def test_no_matching_record_keeps_last_change(self, items):
        refreshed = refresh_item(items[2], [], TODAY)
        assert refreshed.last_change_date == DAY0
        assert refreshed.next_change_date == day(180)
        assert refreshed.next_change_mileage == 50000

    def test_after_delete(self, items, records):
        """Removing the newest record falls back to the one before it."""
        remaining = [r for r in records if r.mileage != 45000]
        refreshed = refresh_item(items[0], remaining, TODAY)
        assert refreshed.last_change_mileage == 40000
        assert refreshed.next_change_date == day(180)

    def test_only_target_changes(self, items, records):
        result = refresh_items_for_service(items, records, "Oil Change", TODAY)
        assert [i.title for i in result] == ["Engine Oil", "Brake Fluid", "Tire Rotation"]
        assert result[0] is not items[0]
        assert result[0].last_change_mileage == 45000
        assert result[1] is items[1]
        assert result[2] is items[2]

    def test_unmatched_service_changes_nothing(self, items, records):
        result = refresh_items_for_service(items, records, "Wiper blades", TODAY)
        assert all(a is b for a, b in zip(result, items))


class TestGenerateDefaultItems:
    """Tests for generate_default_items."""

    def test_full_schedule(self):
        car = Car("Toyota", "Corolla", 2018, 30000, "gasoline")
        created = generate_default_items(car, [], TODAY)
        assert len(created) == len(DEFAULT_ITEMS)
        oil = next(i for i in created if i.title == "Engine Oil")
        assert oil.last_change_date == TODAY
        assert oil.last_change_mileage == 30000
        assert oil.next_change_date == TODAY + timedelta(days=180)

    def test_skips_existing_titles(self):
        car = Car("Toyota", "Corolla", 2018, 30000, "gasoline")
        existing = [MaintenanceItem(" Engine Oil "), MaintenanceItem("Coolant")]
        created = generate_default_items(car, existing, TODAY)
        titles = [i.title for i in created]
        assert "Engine Oil" not in titles
        assert "Coolant" not in titles
        assert len(created) == len(DEFAULT_ITEMS) - 2

    def test_unique_ids(self):
        car = Car("Toyota", "Corolla", 2018, 0, None)
        created = generate_default_items(car, [], TODAY)
        assert len({i.id for i in created}) == len(created)
