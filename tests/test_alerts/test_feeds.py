"""
Tests for inventory_signals/alerts/feeds.py - alert-center feeds.

What we test
------------
  - Stock alerts: stock < 15, ascending by stock, ties in catalogue order.
  - Opportunities: demand High only, catalogue order, trend ids.
  - Every entry navigates to the insights view for its product.
  - AlertCenter.is_empty.
"""

from __future__ import annotations

from inventory_signals.alerts.feeds import build_alert_center, opportunity_feed, stock_alert_feed
from inventory_signals.models.product import Product
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel, NotificationType


def _product(pid: str, stock: int, demand: DemandLevel = DemandLevel.MEDIUM) -> Product:
    return Product(id=pid, name=f"Item {pid}", price=10, stock=stock, demand_level=demand)


class TestStockAlertFeed:
    def test_threshold_and_order(self, now):
        products = [_product("a", 14), _product("b", 15), _product("c", 2), _product("d", 14)]
        feed = stock_alert_feed(products, now)
        assert [n.product_id for n in feed] == ["c", "a", "d"]

    def test_message(self, now):
        feed = stock_alert_feed([_product("a", 7)], now)
        assert feed[0].message == "Only 7 units remaining. Running out soon!"
        assert feed[0].type == NotificationType.LOW_STOCK

    def test_navigates_to_insights(self, now):
        action = stock_alert_feed([_product("a", 7)], now)[0].action
        assert action.target_view == "insights"
        assert action.product_id == "a"


class TestOpportunityFeed:
    def test_high_demand_only(self, demo_products, now):
        feed = opportunity_feed(demo_products, now)
        assert [n.product_id for n in feed] == ["1", "3"]
        assert feed[0].id == "notif-trend-1"
        assert feed[0].type == NotificationType.TREND

    def test_not_capped(self, now):
        products = [_product(str(i), 50, DemandLevel.HIGH) for i in range(15)]
        assert len(opportunity_feed(products, now)) == 15


class TestAlertCenter:
    def test_both_feeds(self, demo_products, now):
        center = build_alert_center(demo_products, now)
        assert len(center.stock_alerts) == 2
        assert len(center.opportunities) == 2
        assert not center.is_empty

    def test_empty(self, now):
        assert build_alert_center([_product("a", 50)], now).is_empty
