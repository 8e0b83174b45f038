"""
Tests for inventory_signals/timeseries/aggregator.py.

Reference instant: Monday 2026-10-19 12:00 local (Sunday-start week begins
Sunday 2026-10-18).

What we test
------------
aggregate():
  - Missing product id -> empty series.
  - Daily: 14-day window, one point per calendar day, "Oct 19" labels.
  - Window boundary is inclusive of the cutoff instant.
  - Weekly: Sunday-start weeks, "Wk Oct 18" labels, 84-day window.
  - Monthly: week buckets over a 30-day window, "Week of ..." labels.
  - Yearly: calendar months over 12 calendar months, "Oct 2026" labels.
  - Revenue is sum(price * quantity); points sorted by bucket start.
  - Only the selected product is counted; unknown granularity rejected.
  - Aware timestamps are bucketed in the supplied local zone.
annotate_trend():
  - Up / down / stable around the 5% threshold; insufficient data; zero prior.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from inventory_signals.models.product import Transaction
from inventory_signals.models.series import RevenuePoint
from inventory_signals.taxonomy.signal_taxonomy import Granularity, TrendDirection
from inventory_signals.timeseries.aggregator import (
    aggregate,
    aggregate_shop_revenue,
    annotate_trend,
    lookback_cutoff,
)

NOW = datetime(2026, 10, 19, 12, 0)

_ids = count()


# ── Helpers ────────────────────────────────────────────────────────────────────

def _tx(when: datetime, price: float = 10.0, quantity: int = 1, product_id: str = "x") -> Transaction:
    return Transaction(
        id=f"t{next(_ids)}", product_id=product_id, date=when, quantity=quantity, price=price
    )


def _points(*revenues: float) -> list[RevenuePoint]:
    return [
        RevenuePoint(
            bucket_label=f"b{i}",
            bucket_start=NOW + timedelta(days=i),
            revenue=r,
            granularity=Granularity.DAILY,
        )
        for i, r in enumerate(revenues)
    ]


# ── aggregate(): general ──────────────────────────────────────────────────────

class TestAggregateGeneral:
    @pytest.mark.parametrize("product_id", [None, ""])
    def test_no_product_selected(self, product_id):
        assert aggregate([_tx(NOW)], product_id, Granularity.DAILY, NOW) == []

    def test_no_transactions(self):
        assert aggregate([], "x", Granularity.WEEKLY, NOW) == []

    def test_other_products_ignored(self):
        txs = [_tx(NOW, product_id="x"), _tx(NOW, product_id="y", price=999)]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        assert [p.revenue for p in points] == [10.0]

    def test_revenue_is_price_times_quantity(self):
        txs = [_tx(NOW, price=12.5, quantity=2), _tx(NOW - timedelta(hours=1), price=5, quantity=3)]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        assert points[0].revenue == pytest.approx(40.0)

    def test_sorted_by_bucket_start(self):
        txs = [_tx(NOW), _tx(NOW - timedelta(days=3)), _tx(NOW - timedelta(days=1))]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        starts = [p.bucket_start for p in points]
        assert starts == sorted(starts)

    def test_string_granularity_accepted(self):
        points = aggregate([_tx(NOW)], "x", "weekly", NOW)
        assert points[0].granularity == Granularity.WEEKLY

    def test_unknown_granularity_rejected(self):
        with pytest.raises(ValueError):
            aggregate([_tx(NOW)], "x", "hourly", NOW)

    def test_shop_series_spans_products(self):
        txs = [_tx(NOW, product_id="x"), _tx(NOW, product_id="gone", price=5)]
        points = aggregate_shop_revenue(txs, Granularity.DAILY, NOW)
        assert points[0].revenue == pytest.approx(15.0)


# ── Daily ─────────────────────────────────────────────────────────────────────

class TestDaily:
    def test_today_yesterday_and_stale(self):
        txs = [_tx(NOW), _tx(NOW - timedelta(days=1)), _tx(NOW - timedelta(days=20))]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        assert [p.bucket_label for p in points] == ["Oct 18", "Oct 19"]

    def test_same_day_merged(self):
        txs = [_tx(datetime(2026, 10, 19, 8)), _tx(datetime(2026, 10, 19, 11))]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        assert len(points) == 1
        assert points[0].bucket_start == datetime(2026, 10, 19)

    def test_cutoff_boundary(self):
        cutoff = lookback_cutoff(Granularity.DAILY, NOW)
        assert cutoff == datetime(2026, 10, 5, 12, 0)
        txs = [_tx(cutoff - timedelta(minutes=1)), _tx(cutoff)]
        points = aggregate(txs, "x", Granularity.DAILY, NOW)
        assert len(points) == 1
        assert points[0].bucket_label == "Oct 5"


# ── Weekly / monthly ──────────────────────────────────────────────────────────

class TestWeekly:
    def test_sunday_start_buckets(self):
        txs = [
            _tx(datetime(2026, 10, 19, 9)),   # Monday
            _tx(datetime(2026, 10, 18, 9)),   # Sunday, same week
            _tx(datetime(2026, 10, 17, 9)),   # Saturday, previous week
        ]
        points = aggregate(txs, "x", Granularity.WEEKLY, NOW)
        assert [p.bucket_label for p in points] == ["Wk Oct 11", "Wk Oct 18"]
        assert [p.revenue for p in points] == [10.0, 20.0]

    def test_eighty_four_day_window(self):
        txs = [_tx(NOW - timedelta(days=80)), _tx(NOW - timedelta(days=90))]
        assert len(aggregate(txs, "x", Granularity.WEEKLY, NOW)) == 1


class TestMonthly:
    def test_buckets_by_week_not_month(self):
        txs = [_tx(datetime(2026, 9, 25, 10)), _tx(datetime(2026, 10, 2, 10))]
        points = aggregate(txs, "x", Granularity.MONTHLY, NOW)
        assert [p.bucket_label for p in points] == ["Week of Sep 20", "Week of Sep 27"]

    def test_thirty_day_window_shorter_than_weekly(self):
        old = _tx(NOW - timedelta(days=40))
        assert aggregate([old], "x", Granularity.MONTHLY, NOW) == []
        assert len(aggregate([old], "x", Granularity.WEEKLY, NOW)) == 1


# ── Yearly ────────────────────────────────────────────────────────────────────

class TestYearly:
    def test_calendar_month_buckets(self):
        txs = [
            _tx(datetime(2026, 10, 1)),
            _tx(datetime(2026, 10, 15)),
            _tx(datetime(2025, 11, 2)),
        ]
        points = aggregate(txs, "x", Granularity.YEARLY, NOW)
        assert [p.bucket_label for p in points] == ["Nov 2025", "Oct 2026"]
        assert points[1].revenue == pytest.approx(20.0)

    def test_twelve_calendar_months(self):
        assert lookback_cutoff(Granularity.YEARLY, NOW) == datetime(2025, 10, 19, 12, 0)
        txs = [_tx(datetime(2025, 10, 1)), _tx(datetime(2025, 10, 19, 13))]
        points = aggregate(txs, "x", Granularity.YEARLY, NOW)
        assert [p.bucket_label for p in points] == ["Oct 2025"]
        assert points[0].revenue == pytest.approx(10.0)


# ── Time zones ────────────────────────────────────────────────────────────────

def test_aware_timestamps_use_local_zone():
    eastern = timezone(timedelta(hours=-5))
    tx = _tx(datetime(2026, 10, 19, 1, 0, tzinfo=timezone.utc))
    points = aggregate([tx], "x", Granularity.DAILY, NOW, tz=eastern)
    assert points[0].bucket_label == "Oct 18"


# ── annotate_trend() ──────────────────────────────────────────────────────────

class TestAnnotateTrend:
    def test_insufficient_data(self):
        assert annotate_trend(_points(100)).direction == TrendDirection.INSUFFICIENT_DATA
        assert annotate_trend([]).direction == TrendDirection.INSUFFICIENT_DATA

    def test_up(self):
        note = annotate_trend(_points(50, 100, 110))
        assert note.direction == TrendDirection.UP
        assert note.change_pct == pytest.approx(0.10)

    def test_down(self):
        assert annotate_trend(_points(100, 90)).direction == TrendDirection.DOWN

    def test_within_threshold_is_stable(self):
        assert annotate_trend(_points(100, 104)).direction == TrendDirection.STABLE
        assert annotate_trend(_points(100, 96)).direction == TrendDirection.STABLE

    def test_custom_threshold(self):
        assert annotate_trend(_points(100, 104), threshold=0.02).direction == TrendDirection.UP

    def test_from_zero(self):
        note = annotate_trend(_points(0, 50))
        assert note.direction == TrendDirection.UP
        assert note.change_pct is None

    def test_zero_to_zero(self):
        note = annotate_trend(_points(0, 0))
        assert note.direction == TrendDirection.STABLE
        assert note.change_pct == 0.0
