"""
Price recommendation engine: maps a product plus a candidate price to one of
five recommendation kinds with a human-readable rationale.

Inputs
------
    baseline  = product.price          (last *saved* price)
    candidate = price being typed      (unsaved)
    ratio     = candidate / baseline   (1.0 when baseline == 0)

Decision order (first match wins)
---------------------------------
    1. WARN_HIKE        : ratio > 2.0
    2. WARN_DROP        : ratio < 0.4 AND candidate > 0
    3. demand High AND stock < LOW_STOCK_ADVISORY_THRESHOLD (15):
         ratio < 1.05           -> SUGGEST_INCREASE  (x1.10)
         1.05 <= ratio <= 1.20  -> MAINTAIN ("optimized for high demand")
         ratio > 1.20           -> falls through to rule 5
    4. demand Low AND stock > EXCESS_STOCK_THRESHOLD (40):
         ratio > 0.95           -> SUGGEST_DECREASE  (x0.90)
         otherwise              -> MAINTAIN ("promotional price active")
    5. MAINTAIN (generic)

The hike/drop guards come first so that a runaway edit is always flagged
even when demand rules would otherwise suggest a change.

A candidate of exactly 0 is not a WARN_DROP (guarded by ``candidate > 0``);
it falls through to the demand rules and the default.

Suggested prices are ``round_half_up(baseline * multiplier)``.
"""

from __future__ import annotations

import math

from inventory_signals.classification.classifier import (
    EXCESS_STOCK_THRESHOLD,
    LOW_STOCK_ADVISORY_THRESHOLD,
)
from inventory_signals.models.pricing import PriceRecommendation
from inventory_signals.models.product import Product
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel, RecommendationKind

EXTREME_HIKE_RATIO = 2.0
EXTREME_DROP_RATIO = 0.4

SCARCITY_INCREASE_CEILING = 1.05    # below this ratio, suggest an increase
SCARCITY_OPTIMAL_CEILING = 1.20     # up to this ratio, price is already optimal
OVERSTOCK_DECREASE_FLOOR = 0.95     # above this ratio, suggest a decrease

INCREASE_MULTIPLIER = 1.10
DECREASE_MULTIPLIER = 0.90

DEFAULT_MAINTAIN_RATIONALE = (
    "Current price is in line with demand and stock levels. No change needed."
)


def price_ratio(baseline: float, candidate: float) -> float:
    """Return ``candidate / baseline``, or 1.0 when the baseline is zero."""
    if baseline == 0:
        return 1.0
    return candidate / baseline


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (``round`` rounds to even)."""
    return math.floor(value + 0.5)


def recommend(product: Product, candidate_price: float) -> PriceRecommendation:
    """Evaluate the pricing decision tree for ``product`` at ``candidate_price``.

    Pure: the same ``(product, candidate_price)`` always yields an equal result.

    Args:
        product:         Product carrying the baseline price, stock and demand.
        candidate_price: Unsaved price being considered (0 is valid).

    Returns:
        A ``PriceRecommendation``.
    """
    baseline = product.price
    ratio = price_ratio(baseline, candidate_price)

    if ratio > EXTREME_HIKE_RATIO:
        pct = round_half_up((ratio - 1.0) * 100.0)
        return PriceRecommendation(
            kind=RecommendationKind.WARN_HIKE,
            rationale=(
                f"Extreme price hike! A {pct}% increase will severely reduce "
                "customer demand in this region."
            ),
        )

    if ratio < EXTREME_DROP_RATIO and candidate_price > 0:
        return PriceRecommendation(
            kind=RecommendationKind.WARN_DROP,
            rationale=(
                "Significant price drop detected. Ensure your profit margins "
                f"are protected at ${format_price(candidate_price)}."
            ),
        )

    if (
        product.demand_level is DemandLevel.HIGH
        and product.stock < LOW_STOCK_ADVISORY_THRESHOLD
    ):
        if ratio < SCARCITY_INCREASE_CEILING:
            target = round_half_up(baseline * INCREASE_MULTIPLIER)
            return PriceRecommendation(
                kind=RecommendationKind.SUGGEST_INCREASE,
                rationale=(
                    f"Demand is high and stock is low ({product.stock}). "
                    f"Increase price to ${target} to maximize profit."
                ),
                suggested_multiplier=INCREASE_MULTIPLIER,
            )
        if ratio <= SCARCITY_OPTIMAL_CEILING:
            return PriceRecommendation(
                kind=RecommendationKind.MAINTAIN,
                rationale="Price is currently optimized for high demand. Good job!",
            )

    if product.demand_level is DemandLevel.LOW and product.stock > EXCESS_STOCK_THRESHOLD:
        if ratio > OVERSTOCK_DECREASE_FLOOR:
            target = round_half_up(baseline * DECREASE_MULTIPLIER)
            return PriceRecommendation(
                kind=RecommendationKind.SUGGEST_DECREASE,
                rationale=(
                    f"Low demand and high stock ({product.stock}). "
                    f"Reduce price to ${target} to clear inventory faster."
                ),
                suggested_multiplier=DECREASE_MULTIPLIER,
            )
        return PriceRecommendation(
            kind=RecommendationKind.MAINTAIN,
            rationale="Promotional price is active. Monitoring for demand recovery.",
        )

    return PriceRecommendation(
        kind=RecommendationKind.MAINTAIN,
        rationale=DEFAULT_MAINTAIN_RATIONALE,
    )


def suggested_price(product: Product, recommendation: PriceRecommendation) -> int | None:
    """Price that applying ``recommendation`` would commit, or ``None``."""
    if recommendation.suggested_multiplier is None:
        return None
    return round_half_up(product.price * recommendation.suggested_multiplier)


def format_price(value: float) -> str:
    """``12`` for whole numbers, ``12.50`` otherwise."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"
