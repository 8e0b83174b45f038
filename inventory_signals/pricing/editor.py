"""
Unsaved price edits and the two commit paths.

``PriceEditSession`` holds the candidate price the user is typing for each
product, separate from the product's baseline. Recommendations are always
evaluated against the candidate; only two operations ever touch the store:

  - ``apply_recommendation(id)`` commits ``round_half_up(baseline * multiplier)``
  - ``save_manual(id)``          commits the literal candidate

Both clear the draft for that product.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from inventory_signals.models.pricing import PriceRecommendation
from inventory_signals.pricing.engine import recommend, suggested_price
from inventory_signals.store.entity_store import EntityStore
from inventory_signals.utils.logging import event_context

logger = logging.getLogger(__name__)


class PriceEditSession:
    """Tracks in-progress price edits against an ``EntityStore``."""

    def __init__(self, store: EntityStore) -> None:
        self._store = store
        self._drafts: dict[str, float] = {}

    def set_candidate(self, product_id: str, value: float | str) -> float:
        """Record a typed candidate price.

        Text input is parsed leniently: empty or non-numeric text is 0. A
        non-finite value (``nan``, ``inf``) is also treated as 0.

        Raises:
            KeyError: If the product does not exist.
            ValueError: If the candidate is negative.
        """
        self._require(product_id)
        if isinstance(value, str):
            try:
                parsed = float(value.strip())
            except ValueError:
                logger.debug("Treating non-numeric price input %r as 0", value)
                parsed = 0.0
        else:
            parsed = float(value)
        if not math.isfinite(parsed):
            logger.debug("Treating non-finite price input %r as 0", value)
            parsed = 0.0
        if parsed < 0:
            raise ValueError(f"Candidate price must be >= 0, got {parsed}.")
        self._drafts[product_id] = parsed
        return parsed

    def candidate_for(self, product_id: str) -> float:
        """Draft price if editing, otherwise the baseline."""
        if product_id in self._drafts:
            return self._drafts[product_id]
        return self._require(product_id).price

    def is_editing(self, product_id: str) -> bool:
        return product_id in self._drafts

    def discard(self, product_id: str) -> None:
        self._drafts.pop(product_id, None)

    def recommendation_for(self, product_id: str) -> PriceRecommendation:
        product = self._require(product_id)
        return recommend(product, self.candidate_for(product_id))

    def apply_recommendation(self, product_id: str) -> Optional[float]:
        """Commit the suggested price for ``product_id``.

        Returns:
            The committed price, or ``None`` when the current recommendation
            carries no multiplier (nothing is committed).
        """
        product = self._require(product_id)
        target = suggested_price(product, self.recommendation_for(product_id))
        if target is None:
            return None
        self._store.set_price(product_id, target)
        self._drafts.pop(product_id, None)
        logger.info(
            "Applied recommended price %s to %s", target, product_id,
            extra=event_context("recommendation_applied", [product_id]),
        )
        return float(target)

    def save_manual(self, product_id: str) -> Optional[float]:
        """Commit the typed candidate as the new baseline.

        Returns:
            The committed price, or ``None`` if there was no draft.
        """
        if product_id not in self._drafts:
            return None
        price = self._drafts[product_id]
        self._store.set_price(product_id, price)
        del self._drafts[product_id]
        logger.info(
            "Saved manual price %s for %s", price, product_id,
            extra=event_context("manual_price_saved", [product_id]),
        )
        return price

    def _require(self, product_id: str):
        product = self._store.get_product(product_id)
        if product is None:
            raise KeyError(f"Unknown product id: {product_id!r}")
        return product
