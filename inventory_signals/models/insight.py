"""
Insight, invoice-line and chat-reply models.

These are the shapes exchanged with the external AI collaborators. The
collaborators themselves are opaque; only these payloads are validated.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventory_signals.models.notification import Action
from inventory_signals.models.product import Product
from inventory_signals.taxonomy.signal_taxonomy import InsightType


class Insight(BaseModel):
    """One narrative insight card.

    Attributes:
        title: Headline.
        description: Body text.
        type: Topic of the insight.
        action_label: Button caption.
        action_url: Link opened by the button.
        action: Optional typed action payload.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    description: str
    type: InsightType = InsightType.GENERAL
    action_label: str = Field(default="", alias="actionLabel")
    action_url: str = Field(default="", alias="actionUrl")
    action: Optional[Action] = None


class InvoiceLine(BaseModel):
    """A product line read off a supplier invoice image."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: str = "Other"
    price: float
    quantity: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Invoice line name must not be blank.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v) or v < 0:
            raise ValueError(f"price must be a finite number >= 0, got {v}.")
        return v

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"quantity must be >= 0, got {v}.")
        return v


class ChatReply(BaseModel):
    """A locally answered inventory question."""

    model_config = ConfigDict(frozen=True)

    text: str
    product: Optional[Product] = None
    suggestions: list[str] = []
    actions: list[Action] = []
