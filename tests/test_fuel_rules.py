#!/usr/bin/env python3
"""Tests for fuel-type task filtering."""

import pytest
from forecast import MaintenanceItem, allowed_tasks, filter_tasks_by_fuel


@pytest.fixture
def items():
    return [
        MaintenanceItem("Engine Oil", "Fluids", 180),
        MaintenanceItem("Fuel Filter", "Filters", 365),
        MaintenanceItem("Tire Rotation", "Tires", 180),
        MaintenanceItem("HV System Check", "Electrical", 365),
        MaintenanceItem("Custom Detailing", "Other", 90),
    ]


def titles(items):
    return [i.title for i in items]


class TestAllowedTasks:
    """Tests for allowed_tasks."""

    def test_gasoline_aliases(self):
        assert allowed_tasks("gasoline") == allowed_tasks("petrol")
        assert allowed_tasks("gasoline") == allowed_tasks("gas")
        assert "Transmission Fluid" in allowed_tasks("gasoline")

    def test_case_and_whitespace_insensitive(self):
        assert allowed_tasks(" Diesel ") == allowed_tasks("diesel")
        assert "Fuel Filter" in allowed_tasks("DIESEL")

    def test_hybrid_and_electric(self):
        assert "Hybrid System Check" in allowed_tasks("hybrid")
        assert "HV System Check" in allowed_tasks("electric")
        assert "Engine Oil" not in allowed_tasks("electric")

    def test_unknown_is_empty(self):
        assert allowed_tasks("hydrogen") == ()
        assert allowed_tasks("") == ()
        assert allowed_tasks(None) == ()


class TestFilterTasksByFuel:
    """Tests for filter_tasks_by_fuel."""

    def test_gasoline(self, items):
        assert titles(filter_tasks_by_fuel(items, "Gasoline")) == [
            "Engine Oil",
            "Tire Rotation",
        ]

    def test_diesel_keeps_fuel_filter(self, items):
        assert titles(filter_tasks_by_fuel(items, "diesel")) == [
            "Engine Oil",
            "Fuel Filter",
            "Tire Rotation",
        ]

    def test_electric(self, items):
        assert titles(filter_tasks_by_fuel(items, "electric")) == [
            "Tire Rotation",
            "HV System Check",
        ]

    @pytest.mark.parametrize("fuel_type", ["hydrogen", "", None, "  "])
    def test_unknown_fuel_type_passes_everything(self, items, fuel_type):
        """No allow-list means no restriction, not an empty result."""
        assert filter_tasks_by_fuel(items, fuel_type) == items

    def test_accepts_any_iterable(self, items):
        assert len(filter_tasks_by_fuel(iter(items), "gas")) == 2
