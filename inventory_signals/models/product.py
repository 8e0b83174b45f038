"""
Product and transaction models.

``Product`` is the catalogue entry owned by the ``EntityStore``. It is frozen:
the store replaces a product with ``model_copy(update=...)`` on every mutation,
so a ``Product`` handed to a pure function can never change underneath it.

``Transaction`` is an immutable sale record. Its ``price`` is the unit price
*at time of sale* and is independent of the product's current price. Its
``product_id`` may reference a product that has since been removed; callers
resolve names through ``EntityStore.product_name()`` which falls back to
``UNKNOWN_ITEM_NAME``.
"""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from inventory_signals.taxonomy.signal_taxonomy import DemandLevel

UNKNOWN_ITEM_NAME = "Unknown item"


class Product(BaseModel):
    """A sellable catalogue item.

    Attributes:
        id: Unique, stable identifier.
        name: Display name.
        category: Free-form category tag, e.g. ``"Electronics"``.
        price: Current (last saved) unit price; the pricing baseline.
        stock: Units on hand.
        demand_level: Advisory demand tier; ``Medium`` for new products.
        purchase_frequency: Count of recent purchases; used for ranking.
        is_new: ``True`` for products added during this session.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str = "Other"
    price: float
    stock: int
    demand_level: DemandLevel = DemandLevel.MEDIUM
    purchase_frequency: int = 0
    is_new: bool = False

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Product id must be a non-empty string.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"price must be a finite number >= 0, got {v}.")
        return v

    @field_validator("stock")
    @classmethod
    def validate_stock(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"stock must be >= 0, got {v}.")
        return v

    @field_validator("purchase_frequency")
    @classmethod
    def validate_purchase_frequency(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"purchase_frequency must be >= 0, got {v}.")
        return v


class Transaction(BaseModel):
    """A single sale line; immutable once recorded.

    Attributes:
        id: Unique identifier.
        product_id: Product reference; may dangle after the product is removed.
        date: When the sale happened. Input lists need not be sorted.
        quantity: Units sold (>= 1).
        price: Unit price at time of sale.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    product_id: str
    date: datetime
    quantity: int
    price: float

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"quantity must be >= 1, got {v}.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"price must be a finite number >= 0, got {v}.")
        return v

    @property
    def revenue(self) -> float:
        """``price * quantity`` for this line."""
        return self.price * self.quantity
