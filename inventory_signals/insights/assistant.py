"""
Inventory question answering: local lookups first, AI collaborator second.

A query that names a catalogue product (case-insensitive substring match,
first product in catalogue order wins) and asks about stock is answered
locally from the current catalogue, so the figure is always exact. Anything
else is handed to the ``InsightTextGenerator`` with the catalogue as
context.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from inventory_signals.classification.classifier import STOCK_HEALTHY_THRESHOLD, classify_stock
from inventory_signals.insights.client import InsightTextGenerator
from inventory_signals.insights.rules import marketplace_url, supplier_url
from inventory_signals.models.insight import ChatReply
from inventory_signals.models.notification import OrderAction, ViewSupplierAction
from inventory_signals.models.product import Product
from inventory_signals.pricing.engine import format_price

logger = logging.getLogger(__name__)

STOCK_QUERY_KEYWORDS = ("how much", "stock", "কয়টা", "মজুদ")

REORDER_SUGGESTIONS = ["Reorder Now", "View Suppliers"]

CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."
EMPTY_REPLY_MESSAGE = "No response generated."


def match_product(products: Sequence[Product], query: str) -> Optional[Product]:
    q = query.lower()
    return next((p for p in products if p.name.lower() in q), None)


def answer_stock_query(products: Sequence[Product], query: str) -> Optional[ChatReply]:
    """Answer a stock question locally.

    Returns:
        A ``ChatReply`` with the stock tier and reorder suggestions, or
        ``None`` when the query does not name a product or does not ask
        about stock.
    """
    product = match_product(products, query)
    q = query.lower()
    if product is None or not any(k in q for k in STOCK_QUERY_KEYWORDS):
        return None

    tier = classify_stock(product)
    text = (
        f"You currently have {product.stock} units of {product.name} in stock. "
        f"This level is considered {tier.value}."
    )
    if product.stock < STOCK_HEALTHY_THRESHOLD:
        text += (
            f"\nWarning: Stock for {product.name} is nearly finished. "
            "Reorder soon to avoid losing sales."
        )
    return ChatReply(
        text=text,
        product=product,
        suggestions=list(REORDER_SUGGESTIONS),
        actions=[
            OrderAction(product_id=product.id, supplier_url=supplier_url(product.name)),
            ViewSupplierAction(url=marketplace_url(product.name), product_id=product.id),
        ],
    )


def build_chat_context(products: Sequence[Product], query: str, lang: str = "en") -> str:
    inventory = ", ".join(
        f"{p.name}: {p.stock} units (Price: ${format_price(p.price)})" for p in products
    )
    language = "BANGLA" if lang == "bn" else "ENGLISH"
    return (
        f"SYSTEM DATA: You have the following inventory: {inventory}.\n"
        f"YOU MUST RESPOND IN {language}.\n"
        "If a user asks for stock, give the exact number from the system data.\n"
        "Use shopkeeper-friendly terminology.\n\n"
        f"Question: {query}"
    )


def answer(
    products: Sequence[Product],
    query: str,
    generator: Optional[InsightTextGenerator] = None,
    lang: str = "en",
) -> ChatReply:
    """Answer ``query``; never raises.

    Local stock answers take priority. Other questions go to ``generator``;
    without one, or when it fails, a fixed apology is returned.
    """
    local = answer_stock_query(products, query)
    if local is not None:
        return local
    if generator is None:
        return ChatReply(text=CHAT_ERROR_MESSAGE)

    try:
        text = generator.generate_insight_text(build_chat_context(products, query, lang))
    except Exception:
        logger.warning("Chat collaborator failed", exc_info=True)
        return ChatReply(text=CHAT_ERROR_MESSAGE)
    return ChatReply(text=text or EMPTY_REPLY_MESSAGE)
