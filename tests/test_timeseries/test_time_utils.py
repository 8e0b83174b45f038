"""
Tests for inventory_signals/utils/time_utils.py.

What we test
------------
  - start_of_week_sunday(): Sunday maps to itself, Monday/Saturday map back.
  - subtract_months(): day clamping, year rollover, negative months rejected.
  - to_local_naive(): naive passthrough, aware conversion to a given zone.
  - Label helpers are locale-independent.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from inventory_signals.utils.time_utils import (
    short_month_day,
    short_month_year,
    start_of_day,
    start_of_month,
    start_of_week_sunday,
    subtract_months,
    to_local_naive,
)


class TestWeekStart:
    def test_sunday_is_its_own_week_start(self):
        assert start_of_week_sunday(datetime(2026, 10, 18, 15, 30)) == datetime(2026, 10, 18)

    def test_monday_maps_to_previous_sunday(self):
        assert start_of_week_sunday(datetime(2026, 10, 19, 12)) == datetime(2026, 10, 18)

    def test_saturday_maps_to_sunday_six_days_back(self):
        assert start_of_week_sunday(datetime(2026, 10, 24, 23, 59)) == datetime(2026, 10, 18)


class TestSubtractMonths:
    def test_clamps_to_month_end(self):
        assert subtract_months(datetime(2026, 3, 31), 1) == datetime(2026, 2, 28)

    def test_leap_february(self):
        assert subtract_months(datetime(2028, 3, 30), 1) == datetime(2028, 2, 29)

    def test_crosses_year(self):
        assert subtract_months(datetime(2026, 1, 15, 9), 1) == datetime(2025, 12, 15, 9)
        assert subtract_months(datetime(2026, 10, 19, 12), 12) == datetime(2025, 10, 19, 12)

    def test_zero_is_identity(self):
        dt = datetime(2026, 10, 19)
        assert subtract_months(dt, 0) == dt

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            subtract_months(datetime(2026, 1, 1), -1)


class TestLocalNaive:
    def test_naive_passthrough(self):
        dt = datetime(2026, 10, 19, 12)
        assert to_local_naive(dt) is dt

    def test_aware_converted_to_zone(self):
        plus_six = timezone(timedelta(hours=6))
        dt = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)
        assert to_local_naive(dt, plus_six) == datetime(2026, 10, 20, 2, 0)


class TestLabels:
    def test_short_labels(self):
        dt = datetime(2026, 10, 5)
        assert short_month_day(dt) == "Oct 5"
        assert short_month_year(dt) == "Oct 2026"

    def test_day_and_month_starts(self):
        dt = datetime(2026, 10, 19, 12, 34, 56, 789)
        assert start_of_day(dt) == datetime(2026, 10, 19)
        assert start_of_month(dt) == datetime(2026, 10, 1)
