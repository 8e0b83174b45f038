"""
Alert-center feeds: critical stock warnings and market opportunities.

These are two parallel derived lists, separate from the capped notification
bell:

  stock alerts   - products with stock < LOW_STOCK_ADVISORY_THRESHOLD (15),
                   ascending by stock (most urgent first); ties keep
                   catalogue order.
  opportunities  - products with demand ``High``, in catalogue order.

Neither feed is capped. Both carry a ``navigate`` action that opens the
insights view focused on the product.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from inventory_signals.alerts.notifications import INSIGHTS_VIEW, notification_id
from inventory_signals.classification.classifier import is_low_stock_advisory
from inventory_signals.models.notification import NavigateAction, Notification
from inventory_signals.models.product import Product
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel, NotificationType


@dataclass(frozen=True)
class AlertCenter:
    """Both alert-center feeds, derived together from one catalogue snapshot."""

    stock_alerts: list[Notification] = field(default_factory=list)
    opportunities: list[Notification] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.stock_alerts and not self.opportunities


def stock_alert_feed(products: Sequence[Product], now: datetime) -> list[Notification]:
    """Critical stock warnings, most urgent first."""
    low = sorted(
        (p for p in products if is_low_stock_advisory(p)),
        key=lambda p: p.stock,
    )
    return [
        Notification(
            id=notification_id(NotificationType.LOW_STOCK, p.id),
            type=NotificationType.LOW_STOCK,
            title=p.name,
            message=f"Only {p.stock} units remaining. Running out soon!",
            timestamp=now,
            link=INSIGHTS_VIEW,
            product_id=p.id,
            action=NavigateAction(target_view=INSIGHTS_VIEW, product_id=p.id),
        )
        for p in low
    ]


def opportunity_feed(products: Sequence[Product], now: datetime) -> list[Notification]:
    """High-demand products, in catalogue order."""
    return [
        Notification(
            id=notification_id(NotificationType.TREND, p.id),
            type=NotificationType.TREND,
            title=p.name,
            message=(
                "This product is currently trending in your region. "
                "Consider increasing price or stock."
            ),
            timestamp=now,
            link=INSIGHTS_VIEW,
            product_id=p.id,
            action=NavigateAction(target_view=INSIGHTS_VIEW, product_id=p.id),
        )
        for p in products
        if p.demand_level is DemandLevel.HIGH
    ]


def build_alert_center(products: Sequence[Product], now: datetime) -> AlertCenter:
    return AlertCenter(
        stock_alerts=stock_alert_feed(products, now),
        opportunities=opportunity_feed(products, now),
    )
