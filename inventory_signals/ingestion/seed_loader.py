"""
Seed catalogue loader: JSON -> validated ``Product`` list.

The seed file is a JSON array of product objects using the model's field
names, e.g. ``config/seed/demo_inventory.json``.

Validation rules
----------------
- The top level must be a JSON array.
- Every entry must validate as a ``Product``.
- Duplicate ``id`` values are rejected.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from inventory_signals.models.product import Product

logger = logging.getLogger(__name__)


def load_seed_products(path: Path) -> list[Product]:
    """Load and validate the seed catalogue at ``path``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON, a non-array top level, an invalid
            entry, or a duplicate id.
    """
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Seed file is not valid JSON ({path.name}): {exc}") from exc

    if not isinstance(records, list):
        raise ValueError(f"Seed file must contain a JSON array: {path.name}")

    products: list[Product] = []
    seen_ids: set[str] = set()
    for i, rec in enumerate(records):
        try:
            product = Product.model_validate(rec)
        except ValidationError as exc:
            raise ValueError(f"Seed product at index {i} is invalid: {exc}") from exc
        if product.id in seen_ids:
            raise ValueError(f"Duplicate product id '{product.id}' at index {i}.")
        seen_ids.add(product.id)
        products.append(product)

    logger.info("Loaded %d seed product(s) from %s", len(products), path.name)
    return products
