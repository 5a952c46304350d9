#!/usr/bin/env python3
"""Tests for date and clamping helpers."""

from datetime import date, datetime

from forecast.calculations import add_days, clamp, clamp01, days_between


class TestDaysBetween:
    """Tests for days_between."""

    def test_whole_days(self):
        assert days_between(datetime(2025, 1, 1), datetime(2025, 4, 1)) == 90

    def test_ignores_time_of_day(self):
        """Counts calendar days, not 24h periods."""
        assert days_between(datetime(2025, 1, 1, 23), datetime(2025, 1, 2, 1)) == 1
        assert days_between(datetime(2025, 1, 1, 1), datetime(2025, 1, 1, 23)) == 0

    def test_negative_when_reversed(self):
        assert days_between(datetime(2025, 1, 10), datetime(2025, 1, 1)) == -9

    def test_accepts_dates(self):
        assert days_between(date(2025, 1, 1), datetime(2025, 1, 3, 12)) == 2


class TestAddDays:
    """Tests for add_days."""

    def test_keeps_time(self):
        assert add_days(datetime(2025, 1, 31, 9, 30), 1) == datetime(2025, 2, 1, 9, 30)

    def test_negative(self):
        assert add_days(datetime(2025, 3, 1), -1) == datetime(2025, 2, 28)


class TestClamp:
    """Tests for clamp and clamp01."""

    def test_clamp(self):
        assert clamp(2 / 6, 0.55, 0.95) == 0.55
        assert clamp(1.5, 0.55, 0.95) == 0.95
        assert clamp(0.7, 0.55, 0.95) == 0.7

    def test_clamp01(self):
        assert clamp01(-0.2) == 0.0
        assert clamp01(1.7) == 1.0
        assert clamp01(0.25) == 0.25
