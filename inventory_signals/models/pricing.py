"""
Price recommendation output model.

A ``PriceRecommendation`` is derived, never stored: ``pricing.engine.recommend``
rebuilds it from the product and the candidate price on every keystroke.
``suggested_multiplier`` is set only for the two ``suggest_*`` kinds and is
always applied to the product's *baseline* (last saved) price.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from inventory_signals.taxonomy.signal_taxonomy import RecommendationKind

_SUGGEST_KINDS = frozenset({
    RecommendationKind.SUGGEST_INCREASE,
    RecommendationKind.SUGGEST_DECREASE,
})


class PriceRecommendation(BaseModel):
    """Outcome of the pricing decision tree for one (product, candidate) pair.

    Attributes:
        kind: Decision outcome.
        rationale: Human-readable explanation shown next to the price input.
        suggested_multiplier: Multiplier on the baseline price for
            ``suggest_increase`` / ``suggest_decrease``; ``None`` otherwise.
    """

    model_config = ConfigDict(frozen=True)

    kind: RecommendationKind
    rationale: str
    suggested_multiplier: Optional[float] = None

    @model_validator(mode="after")
    def validate_multiplier_matches_kind(self) -> "PriceRecommendation":
        if self.kind in _SUGGEST_KINDS and self.suggested_multiplier is None:
            raise ValueError(f"{self.kind} requires a suggested_multiplier.")
        if self.kind not in _SUGGEST_KINDS and self.suggested_multiplier is not None:
            raise ValueError(f"{self.kind} must not carry a suggested_multiplier.")
        if self.suggested_multiplier is not None and self.suggested_multiplier <= 0:
            raise ValueError("suggested_multiplier must be positive.")
        return self

    @property
    def is_actionable(self) -> bool:
        """``True`` when the recommendation can be applied with one click."""
        return self.suggested_multiplier is not None
