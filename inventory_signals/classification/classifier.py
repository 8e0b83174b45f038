"""
Stock and demand classification: pure functions, no store access or I/O.

Thresholds
----------
Three stock cut-offs are in use and must never be duplicated as literals at
call sites:

    LOW_STOCK_ALERT_THRESHOLD    = 10   strict: notification bell, Critical
                                        tier, dashboard "at risk" count
    LOW_STOCK_ADVISORY_THRESHOLD = 15   soft: alert-center stock feed, pricing
                                        scarcity rule, insight low-stock pick
    STOCK_HEALTHY_THRESHOLD      = 20   Low vs Healthy tier boundary

``EXCESS_STOCK_THRESHOLD = 40`` marks overstock for the pricing engine.
All comparisons are strict (``stock < threshold`` / ``stock > threshold``).

Demand
------
``classify_demand`` returns the stored tier. Demand is an externally supplied
signal (seed data or import) and defaults to ``Medium`` for new products;
the only derived demand view is the purchase-frequency ranking used to pick
the dashboard's top product.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from inventory_signals.models.product import Product, Transaction
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel, StockTier

LOW_STOCK_ALERT_THRESHOLD = 10
LOW_STOCK_ADVISORY_THRESHOLD = 15
STOCK_HEALTHY_THRESHOLD = 20
EXCESS_STOCK_THRESHOLD = 40


def classify_stock(product: Product) -> StockTier:
    """Return the stock health tier of ``product``.

    Rules (first match wins):
        1. CRITICAL : stock < LOW_STOCK_ALERT_THRESHOLD (10)
        2. LOW      : stock < STOCK_HEALTHY_THRESHOLD (20)
        3. HEALTHY  : everything else
    """
    if product.stock < LOW_STOCK_ALERT_THRESHOLD:
        return StockTier.CRITICAL
    if product.stock < STOCK_HEALTHY_THRESHOLD:
        return StockTier.LOW
    return StockTier.HEALTHY


def is_low_stock_alert(product: Product) -> bool:
    """``True`` when stock is below the strict alert threshold."""
    return product.stock < LOW_STOCK_ALERT_THRESHOLD


def is_low_stock_advisory(product: Product) -> bool:
    """``True`` when stock is below the soft advisory threshold."""
    return product.stock < LOW_STOCK_ADVISORY_THRESHOLD


def is_overstocked(product: Product) -> bool:
    """``True`` when stock exceeds the excess-stock threshold."""
    return product.stock > EXCESS_STOCK_THRESHOLD


def classify_demand(product: Product) -> DemandLevel:
    """Return the stored demand tier of ``product``."""
    return product.demand_level


def rank_by_purchase_frequency(products: Iterable[Product]) -> list[Product]:
    """Sort products by ``purchase_frequency`` descending.

    ``sorted`` is stable, so ties keep their input order.
    """
    return sorted(products, key=lambda p: p.purchase_frequency, reverse=True)


def top_product(products: Iterable[Product]) -> Optional[Product]:
    """Most frequently purchased product, or ``None`` for an empty catalogue."""
    ranked = rank_by_purchase_frequency(products)
    return ranked[0] if ranked else None


def first_advisory_low_stock(products: Sequence[Product]) -> Optional[Product]:
    """First product in catalogue order below the advisory threshold."""
    return next((p for p in products if is_low_stock_advisory(p)), None)


def purchase_count(product_id: str, transactions: Iterable[Transaction]) -> int:
    """Number of transaction lines recorded for ``product_id``."""
    return sum(1 for t in transactions if t.product_id == product_id)
