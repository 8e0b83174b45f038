"""
In-memory entity store for one dashboard session.

The store is an explicit object passed to whatever needs it; there is no
module-level state. It owns the product catalogue and the transaction log
and exposes the only mutation paths:

    add_product / add_products   - create (new products are prepended)
    remove_product               - destroy (transactions are kept)
    set_price                    - the only way ``Product.price`` changes
    append_transactions          - append-only log

Every mutation is synchronous and atomic: inputs are validated before any
state changes, and subscribers are notified exactly once afterwards with a
``StoreEvent``. Subscribers run derived computations (notifications, alert
feeds) in the mutation pipeline rather than on render.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal, Optional
from uuid import uuid4

from inventory_signals.models.product import UNKNOWN_ITEM_NAME, Product, Transaction
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel
from inventory_signals.utils.logging import event_context

logger = logging.getLogger(__name__)

StoreEventKind = Literal[
    "products_added", "product_removed", "price_changed", "transactions_appended",
]


@dataclass(frozen=True)
class StoreEvent:
    """Describes one completed mutation.

    Attributes:
        kind:        What changed.
        product_ids: Products affected (for transactions: referenced ids).
    """

    kind: StoreEventKind
    product_ids: tuple[str, ...]


Subscriber = Callable[["EntityStore", StoreEvent], None]


def new_entity_id() -> str:
    """Short random id for products and transactions created in-session."""
    return uuid4().hex[:9]


class EntityStore:
    """Owns the products and transactions of a session.

    Args:
        products:     Initial catalogue, in display order.
        transactions: Initial transaction log.

    Raises:
        ValueError: If ``products`` contains duplicate ids.
    """

    def __init__(
        self,
        products: Iterable[Product] = (),
        transactions: Iterable[Transaction] = (),
    ) -> None:
        self._products: list[Product] = list(products)
        self._transactions: list[Transaction] = list(transactions)
        self._subscribers: list[Subscriber] = []
        _check_unique_ids(self._products)

    # ── Reads ─────────────────────────────────────────────────────────────────

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def get_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def product_name(self, product_id: str) -> str:
        """Display name for ``product_id``; ``"Unknown item"`` if it no longer exists."""
        product = self.get_product(product_id)
        return product.name if product is not None else UNKNOWN_ITEM_NAME

    def transactions_for(self, product_id: str) -> list[Transaction]:
        return [t for t in self._transactions if t.product_id == product_id]

    # ── Subscription ──────────────────────────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` to run after every mutation.

        Returns:
            A zero-argument function that removes the subscription.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add_product(
        self,
        name: str,
        category: str,
        price: float,
        stock: int,
        *,
        demand_level: DemandLevel = DemandLevel.MEDIUM,
        purchase_frequency: int = 0,
        product_id: Optional[str] = None,
    ) -> Product:
        """Create a product and prepend it to the catalogue.

        Raises:
            ValueError: If the id already exists.
            pydantic.ValidationError: On negative price / stock.
        """
        product = Product(
            id=product_id or new_entity_id(),
            name=name,
            category=category,
            price=price,
            stock=stock,
            demand_level=demand_level,
            purchase_frequency=purchase_frequency,
            is_new=True,
        )
        self.add_products([product])
        return product

    def add_products(self, products: Iterable[Product]) -> list[Product]:
        """Bulk-add products (newest first), emitting a single event.

        Raises:
            ValueError: If any id collides with an existing or sibling product.
        """
        incoming = list(products)
        if not incoming:
            return []
        _check_unique_ids([*incoming, *self._products])
        # Each product is prepended in turn: the last of the batch ends up first.
        self._products = [*reversed(incoming), *self._products]
        self._emit(
            StoreEvent("products_added", tuple(p.id for p in incoming)),
            "Added %d product(s)", len(incoming),
        )
        return incoming

    def remove_product(self, product_id: str) -> Product:
        """Remove a product; its transactions remain and may dangle.

        Raises:
            KeyError: If no such product exists.
        """
        product = self._require(product_id)
        self._products = [p for p in self._products if p.id != product_id]
        self._emit(StoreEvent("product_removed", (product_id,)), "Removed product %s", product_id)
        return product

    def set_price(self, product_id: str, price: float) -> Product:
        """Commit a new baseline price.

        Raises:
            KeyError: If no such product exists.
            ValueError: If ``price`` is negative or not finite.
        """
        if not math.isfinite(price) or price < 0:
            raise ValueError(f"price must be a finite number >= 0, got {price}.")
        current = self._require(product_id)
        updated = current.model_copy(update={"price": float(price)})
        self._products = [updated if p.id == product_id else p for p in self._products]
        self._emit(
            StoreEvent("price_changed", (product_id,)),
            "Price for %s: %s -> %s", product_id, current.price, updated.price,
        )
        return updated

    def append_transactions(self, transactions: Iterable[Transaction]) -> int:
        """Append sale records; returns the number appended."""
        incoming = list(transactions)
        if not incoming:
            return 0
        self._transactions.extend(incoming)
        ids = tuple(dict.fromkeys(t.product_id for t in incoming))
        self._emit(
            StoreEvent("transactions_appended", ids), "Appended %d transaction(s)", len(incoming)
        )
        return len(incoming)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _require(self, product_id: str) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise KeyError(f"Unknown product id: {product_id!r}")
        return product

    def _emit(self, event: StoreEvent, msg: str, *args: object) -> None:
        logger.debug(msg, *args, extra=event_context(event.kind, event.product_ids))
        for callback in list(self._subscribers):
            callback(self, event)


def _check_unique_ids(products: Iterable[Product]) -> None:
    seen: set[str] = set()
    for p in products:
        if p.id in seen:
            raise ValueError(f"Duplicate product id: {p.id!r}")
        seen.add(p.id)
