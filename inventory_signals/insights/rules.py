"""
Rule-based insight cards, produced locally without the AI collaborator.

Rules
-----
1. Inventory Optimization
     Subject: the targeted product if ``target_id`` resolves, otherwise the
     first catalogue product with ``stock < LOW_STOCK_ADVISORY_THRESHOLD``.
     Omitted when there is no subject.
     Action:  ``order`` from the supplier search for that product.

2. Pricing Comparison
     Subject: the product with the highest ``purchase_frequency`` (first in
     catalogue order on ties). Omitted for an empty catalogue.
     Action:  ``view_supplier`` on the marketplace search for that product.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional
from urllib.parse import quote

from inventory_signals.classification.classifier import first_advisory_low_stock, top_product
from inventory_signals.models.insight import Insight
from inventory_signals.models.notification import OrderAction, ViewSupplierAction
from inventory_signals.models.product import Product
from inventory_signals.pricing.engine import format_price
from inventory_signals.taxonomy.signal_taxonomy import InsightType

SUPPLIER_SEARCH_URL = "https://www.daraz.com.bd/catalog/?q="
MARKETPLACE_SEARCH_URL = "https://bikroy.com/bn/ads/bangladesh?query="


def supplier_url(product_name: str) -> str:
    return SUPPLIER_SEARCH_URL + quote(product_name, safe="")


def marketplace_url(product_name: str) -> str:
    return MARKETPLACE_SEARCH_URL + quote(product_name, safe="")


def rule_based_insights(
    products: Sequence[Product],
    target_id: Optional[str] = None,
) -> list[Insight]:
    """Build the local insight cards for ``products``.

    Args:
        products:  Current catalogue, in display order. Not modified.
        target_id: Product the user navigated from (alert center), if any.

    Returns:
        Zero, one or two insights, inventory card first.
    """
    insights: list[Insight] = []

    subject = None
    if target_id is not None:
        subject = next((p for p in products if p.id == target_id), None)
    if subject is None:
        subject = first_advisory_low_stock(products)
    if subject is not None:
        url = supplier_url(subject.name)
        insights.append(
            Insight(
                title="Inventory Optimization",
                description=(
                    f"Warning: Stock for {subject.name} is nearly finished. "
                    f"Currently {subject.stock} units left. "
                    "Order now to avoid losing customers."
                ),
                type=InsightType.INVENTORY,
                action_label="Order from Supplier",
                action_url=url,
                action=OrderAction(product_id=subject.id, supplier_url=url),
            )
        )

    top = top_product(products)
    if top is not None:
        url = marketplace_url(top.name)
        insights.append(
            Insight(
                title="Pricing Comparison",
                description=(
                    f"Your price for {top.name} is ${format_price(top.price)}. "
                    "Local marketplace search for this item is rising. "
                    "Consider dynamic pricing to boost profits."
                ),
                type=InsightType.PRICING,
                action_label="Check Marketplace",
                action_url=url,
                action=ViewSupplierAction(url=url, product_id=top.id),
            )
        )

    return insights
