"""
Tests for inventory_signals/store/entity_store.py.

What we test
------------
  - add_product prepends, marks is_new, generates a 9-char id.
  - add_products emits one event; batch order ends reversed (each prepended).
  - Duplicate ids are rejected and leave the store unchanged.
  - remove_product keeps transactions; product_name falls back to "Unknown item".
  - set_price: only price mutator; negative or non-finite -> ValueError, unknown -> KeyError.
  - append_transactions is append-only and reports referenced ids.
  - Subscribers receive exactly one event per mutation; unsubscribe works.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from inventory_signals.models.product import UNKNOWN_ITEM_NAME, Product, Transaction
from inventory_signals.store.entity_store import EntityStore, StoreEvent


def _tx(tx_id: str, product_id: str) -> Transaction:
    return Transaction(
        id=tx_id, product_id=product_id, date=datetime(2026, 10, 18), quantity=1, price=10
    )


def _recording(store: EntityStore) -> list[StoreEvent]:
    events: list[StoreEvent] = []
    store.subscribe(lambda _store, event: events.append(event))
    return events


class TestAddProduct:
    def test_prepends_new_product(self, store):
        product = store.add_product("Lamp", "Home", 30, 8)
        assert store.products[0] == product
        assert len(store.products) == 6

    def test_marks_new_and_generates_id(self, store):
        product = store.add_product("Lamp", "Home", 30, 8)
        assert product.is_new
        assert len(product.id) == 9

    def test_explicit_id(self, store):
        product = store.add_product("Lamp", "Home", 30, 8, product_id="lamp-1")
        assert store.get_product("lamp-1") == product

    def test_duplicate_id_rejected(self, store):
        before = store.products
        with pytest.raises(ValueError):
            store.add_product("Dup", "Home", 1, 1, product_id="1")
        assert store.products == before

    def test_negative_stock_rejected(self, store):
        with pytest.raises(ValueError):
            store.add_product("Bad", "Home", 1, -1)

    def test_bulk_add_single_event(self, store):
        events = _recording(store)
        a = Product(id="a", name="A", price=1, stock=1)
        b = Product(id="b", name="B", price=1, stock=1)
        store.add_products([a, b])
        assert len(events) == 1
        assert events[0] == StoreEvent("products_added", ("a", "b"))
        assert [p.id for p in store.products[:2]] == ["b", "a"]

    def test_bulk_add_sibling_duplicates_rejected(self, store):
        a = Product(id="a", name="A", price=1, stock=1)
        with pytest.raises(ValueError):
            store.add_products([a, a])
        assert store.get_product("a") is None

    def test_empty_bulk_add_emits_nothing(self, store):
        events = _recording(store)
        assert store.add_products([]) == []
        assert events == []


class TestRemoveProduct:
    def test_transactions_kept(self, store):
        store.append_transactions([_tx("t1", "2")])
        store.remove_product("2")
        assert store.get_product("2") is None
        assert len(store.transactions_for("2")) == 1

    def test_dangling_name(self, store):
        store.remove_product("2")
        assert store.product_name("2") == UNKNOWN_ITEM_NAME
        assert store.product_name("1") == "Smartwatch Pro"

    def test_unknown_id(self, store):
        with pytest.raises(KeyError):
            store.remove_product("nope")


class TestSetPrice:
    def test_updates_price_only(self, store):
        updated = store.set_price("1", 210)
        assert updated.price == 210
        assert updated.stock == 45
        assert store.get_product("1").price == 210

    def test_keeps_catalogue_order(self, store):
        order = [p.id for p in store.products]
        store.set_price("3", 30)
        assert [p.id for p in store.products] == order

    def test_negative_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_price("1", -5)
        assert store.get_product("1").price == 199

    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    def test_non_finite_rejected(self, store, price):
        events = _recording(store)
        with pytest.raises(ValueError, match="finite"):
            store.set_price("1", price)
        assert store.get_product("1").price == 199
        assert events == []

    def test_unknown_id(self, store):
        with pytest.raises(KeyError):
            store.set_price("nope", 5)


class TestTransactionsAndEvents:
    def test_append_returns_count(self, store):
        assert store.append_transactions([_tx("t1", "1"), _tx("t2", "1")]) == 2
        assert len(store.transactions) == 2

    def test_append_event_lists_unique_ids(self, store):
        events = _recording(store)
        store.append_transactions([_tx("t1", "1"), _tx("t2", "2"), _tx("t3", "1")])
        assert events == [StoreEvent("transactions_appended", ("1", "2"))]

    def test_one_event_per_mutation(self, store):
        events = _recording(store)
        store.add_product("Lamp", "Home", 30, 8)
        store.set_price("1", 150)
        store.remove_product("5")
        assert [e.kind for e in events] == ["products_added", "price_changed", "product_removed"]

    def test_failed_mutation_emits_nothing(self, store):
        events = _recording(store)
        with pytest.raises(KeyError):
            store.set_price("nope", 1)
        assert events == []

    def test_unsubscribe(self, store):
        events: list[StoreEvent] = []
        unsubscribe = store.subscribe(lambda _s, e: events.append(e))
        unsubscribe()
        store.set_price("1", 150)
        assert events == []

    def test_duplicate_initial_ids_rejected(self):
        p = Product(id="x", name="X", price=1, stock=1)
        with pytest.raises(ValueError):
            EntityStore([p, p])
