"""
ASCII terminal formatters for CLI reporting commands.

All formatters accept models from the engine and return plain multi-line
strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Stock markers
-------------
Inventory rows carry the stock tier so problems stand out without colour::

  [CRITICAL]  stock < 10
  [LOW]       stock < 20
  [OK]        otherwise
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Optional

from inventory_signals.alerts.feeds import AlertCenter
from inventory_signals.classification.classifier import classify_stock
from inventory_signals.classification.kpis import InventorySummary
from inventory_signals.models.notification import Notification
from inventory_signals.models.pricing import PriceRecommendation
from inventory_signals.models.product import Product
from inventory_signals.models.series import RevenuePoint, TrendNote
from inventory_signals.pricing.engine import format_price
from inventory_signals.taxonomy.signal_taxonomy import StockTier

_TIER_TAGS = {
    StockTier.CRITICAL: "[CRITICAL]",
    StockTier.LOW:      "[LOW]",
    StockTier.HEALTHY:  "[OK]",
}


# ── Inventory ─────────────────────────────────────────────────────────────────


def format_kpi_summary(summary: InventorySummary) -> str:
    lines = [
        "",
        "=== Inventory Summary ===",
        f"  Total stock value: ${summary.total_stock_value:,.2f}",
        f"  Products:          {summary.total_products}",
        f"  At risk (<10):     {summary.at_risk}",
        f"  Orders (7 days):   {summary.recent_orders}",
    ]
    return "\n".join(lines)


def format_inventory_table(products: Sequence[Product]) -> str:
    """Catalogue as a table, in display order (newest first)."""
    lines: list[str] = ["", "=== Inventory ==="]
    if not products:
        lines.append("  (catalogue is empty)")
        return "\n".join(lines)

    header = (
        f"  {'ID':<10}  {'Name':<24}  {'Category':<12}  {'Price':>9}  "
        f"{'Stock':>6}  {'Demand':<6}  {'Freq':>5}  Status"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for p in products:
        new_tag = " (new)" if p.is_new else ""
        lines.append(
            f"  {p.id[:10]:<10}  {p.name[:24]:<24}  {p.category[:12]:<12}  "
            f"{'$' + format_price(p.price):>9}  {p.stock:>6}  "
            f"{p.demand_level.value:<6}  {p.purchase_frequency:>5}  "
            f"{_TIER_TAGS[classify_stock(p)]}{new_tag}"
        )
    return "\n".join(lines)


# ── Alerts ────────────────────────────────────────────────────────────────────


def format_notifications(notifications: Sequence[Notification]) -> str:
    unread = sum(1 for n in notifications if not n.read)
    lines = ["", f"=== Notifications ({unread} unread) ==="]
    if not notifications:
        lines.append("  (no notifications)")
        return "\n".join(lines)
    for n in notifications:
        marker = " " if n.read else "*"
        lines.append(f"  {marker} {n.title}: {n.message}")
    return "\n".join(lines)


def format_alert_center(center: AlertCenter) -> str:
    lines = ["", "=== Alert Center ==="]
    if center.is_empty:
        lines.append("  All clear: no stock warnings or opportunities.")
        return "\n".join(lines)

    lines.append("")
    lines.append(f"  [STOCK ALERTS] ({len(center.stock_alerts)})")
    for n in center.stock_alerts:
        lines.append(f"    {n.title:<24}  {n.message}")
    if not center.stock_alerts:
        lines.append("    (none)")

    lines.append("")
    lines.append(f"  [MARKET OPPORTUNITIES] ({len(center.opportunities)})")
    for n in center.opportunities:
        lines.append(f"    {n.title:<24}  {n.message}")
    if not center.opportunities:
        lines.append("    (none)")
    return "\n".join(lines)


# ── Pricing ───────────────────────────────────────────────────────────────────


def format_pricing_table(
    rows: Sequence[tuple[Product, float, PriceRecommendation, Optional[int]]],
) -> str:
    """Pricing recommendations, one block per product.

    Args:
        rows: ``(product, candidate_price, recommendation, suggested_price)``
              tuples; ``suggested_price`` is ``None`` for non-actionable kinds.
    """
    lines: list[str] = ["", "=== Pricing Recommendations ==="]
    if not rows:
        lines.append("  (catalogue is empty)")
        return "\n".join(lines)

    header = (
        f"  {'Name':<24}  {'Baseline':>9}  {'Candidate':>9}  "
        f"{'Decision':<16}  {'Suggest':>8}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for product, candidate, rec, target in rows:
        target_str = f"${target}" if target is not None else "-"
        lines.append(
            f"  {product.name[:24]:<24}  {'$' + format_price(product.price):>9}  "
            f"{'$' + format_price(candidate):>9}  {rec.kind.value:<16}  {target_str:>8}"
        )
        lines.append(f"      {rec.rationale}")
    return "\n".join(lines)


# ── Revenue ───────────────────────────────────────────────────────────────────


def format_revenue_series(
    points: Sequence[RevenuePoint],
    title: str,
    trend: Optional[TrendNote] = None,
) -> str:
    """Revenue buckets with a proportional bar, oldest first."""
    lines = ["", f"=== Revenue: {title} ==="]
    if not points:
        lines.append("  (no sales in this window)")
        return "\n".join(lines)

    peak = max(p.revenue for p in points) or 1.0
    for p in points:
        bar = "#" * round(30 * p.revenue / peak)
        lines.append(f"  {p.bucket_label:<16}  {p.revenue:>10,.2f}  {bar}")
    if trend is not None:
        lines.append("")
        lines.append(f"  {format_trend_note(trend)}")
    return "\n".join(lines)


def format_trend_note(trend: TrendNote) -> str:
    return f"Trend [{trend.direction.value}]: {trend.message}"
