"""
Dashboard KPI block: stock value, catalogue size, at-risk count, recent orders.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from inventory_signals.classification.classifier import is_low_stock_alert
from inventory_signals.models.product import Product, Transaction
from inventory_signals.utils.time_utils import to_local_naive

RECENT_ORDERS_WINDOW_DAYS = 7


@dataclass(frozen=True)
class InventorySummary:
    """Headline numbers for the dashboard.

    Attributes:
        total_stock_value: Sum of ``price * stock`` over the catalogue.
        total_products:    Catalogue size.
        at_risk:           Products below the strict low-stock threshold.
        recent_orders:     Transaction lines dated within the last 7 days.
    """

    total_stock_value: float
    total_products: int
    at_risk: int
    recent_orders: int


def summarize_inventory(
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> InventorySummary:
    """Compute the dashboard KPI block.

    Transactions referencing removed products still count as orders. Aware
    datetimes are compared in ``tz`` (system zone when ``None``), the same
    local time the revenue charts bucket in.
    """
    local_now = to_local_naive(now, tz)
    cutoff = local_now - timedelta(days=RECENT_ORDERS_WINDOW_DAYS)
    recent = sum(1 for t in transactions if to_local_naive(t.date, tz) >= cutoff)
    return InventorySummary(
        total_stock_value=sum(p.price * p.stock for p in products),
        total_products=len(products),
        at_risk=sum(1 for p in products if is_low_stock_alert(p)),
        recent_orders=recent,
    )
