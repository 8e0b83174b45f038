"""
Tests for inventory_signals/insights/assistant.py.

What we test
------------
  - Stock questions naming a product are answered locally with the tier.
  - Below Healthy a reorder warning is appended; suggestions and actions set.
  - Bangla stock keywords are recognised.
  - Other questions go to the collaborator with the catalogue as context.
  - No collaborator, or a failing one, yields the fixed apology.
"""

from __future__ import annotations

from inventory_signals.insights.assistant import (
    CHAT_ERROR_MESSAGE,
    EMPTY_REPLY_MESSAGE,
    REORDER_SUGGESTIONS,
    STOCK_QUERY_KEYWORDS,
    answer,
    answer_stock_query,
    match_product,
)
from inventory_signals.taxonomy.signal_taxonomy import ActionKind


class _Generator:
    def __init__(self, text: str = "Sure thing.") -> None:
        self.text = text
        self.context = ""

    def generate_insight_text(self, context: str) -> str:
        self.context = context
        return self.text


class _BrokenGenerator:
    def generate_insight_text(self, context: str) -> str:
        raise TimeoutError("slow")


class TestLocalStockAnswers:
    def test_healthy_product(self, demo_products):
        reply = answer_stock_query(demo_products, "How much Smartwatch Pro is in stock?")
        assert reply.text == (
            "You currently have 45 units of Smartwatch Pro in stock. "
            "This level is considered Healthy."
        )
        assert reply.product.id == "1"

    def test_low_product_gets_warning(self, demo_products):
        reply = answer_stock_query(demo_products, "stock of coffee maker elite")
        assert "This level is considered Critical." in reply.text
        assert reply.text.endswith(
            "Warning: Stock for Coffee Maker Elite is nearly finished. "
            "Reorder soon to avoid losing sales."
        )
        assert reply.suggestions == REORDER_SUGGESTIONS
        assert [a.kind for a in reply.actions] == [ActionKind.ORDER, ActionKind.VIEW_SUPPLIER]

    def test_bangla_keyword(self, demo_products):
        reply = answer_stock_query(demo_products, f"Bluetooth Earbuds {STOCK_QUERY_KEYWORDS[2]}?")
        assert "12 units of Bluetooth Earbuds" in reply.text

    def test_no_product_named(self, demo_products):
        assert answer_stock_query(demo_products, "how much stock do I have?") is None

    def test_not_a_stock_question(self, demo_products):
        assert answer_stock_query(demo_products, "What should Smartwatch Pro cost?") is None

    def test_first_match_in_catalogue_order(self, demo_products):
        assert match_product(demo_products, "smartwatch pro or earbuds").id == "1"


class TestAnswer:
    def test_local_answer_skips_collaborator(self, demo_products):
        generator = _Generator()
        reply = answer(demo_products, "how much Ceramic Vase Set", generator)
        assert "30 units" in reply.text
        assert generator.context == ""

    def test_collaborator_used(self, demo_products):
        generator = _Generator("Raise the T-shirt price a little.")
        reply = answer(demo_products, "Any pricing tips?", generator, lang="bn")
        assert reply.text == "Raise the T-shirt price a little."
        assert "Eco-Cotton T-Shirt: 120 units (Price: $25)" in generator.context
        assert "YOU MUST RESPOND IN BANGLA." in generator.context
        assert generator.context.endswith("Question: Any pricing tips?")

    def test_empty_collaborator_reply(self, demo_products):
        assert answer(demo_products, "hi", _Generator("")).text == EMPTY_REPLY_MESSAGE

    def test_no_collaborator(self, demo_products):
        assert answer(demo_products, "hi").text == CHAT_ERROR_MESSAGE

    def test_failing_collaborator(self, demo_products):
        reply = answer(demo_products, "hi", _BrokenGenerator())
        assert reply.text == CHAT_ERROR_MESSAGE
        assert reply.actions == []
