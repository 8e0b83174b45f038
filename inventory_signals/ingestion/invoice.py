"""
Supplier-invoice import through an external extraction collaborator.

The collaborator reads an invoice image and returns product lines
``{name, category, price, quantity}``. Its internals are opaque; this module
only validates its output and turns it into store records:

  - each valid line becomes a new ``Product`` with ``stock = quantity``
  - each line with ``quantity >= 1`` also yields one ``Transaction`` dated
    ``now - backdate_days`` at the line price

Collaborator failures never propagate: they are logged and returned as an
``InvoiceImportOutcome`` with ``ok=False`` and the store left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol, Union

from pydantic import ValidationError

from inventory_signals.models.insight import InvoiceLine
from inventory_signals.models.product import Product, Transaction
from inventory_signals.store.entity_store import EntityStore, new_entity_id

logger = logging.getLogger(__name__)

INVOICE_FAILED_MESSAGE = "Failed to process invoice"


class InvoiceExtractor(Protocol):
    """Anything that can read product lines off an invoice image."""

    def extract_invoice_data(
        self, image_bytes: bytes
    ) -> list[Union[InvoiceLine, dict[str, Any]]]: ...


@dataclass(frozen=True)
class InvoiceImportOutcome:
    """Result of one invoice import, suitable for a toast message."""

    ok: bool
    message: str
    products_added: int = 0
    transactions_added: int = 0
    skipped_lines: int = 0


def import_invoice(
    store: EntityStore,
    extractor: InvoiceExtractor,
    image_bytes: bytes,
    *,
    now: datetime,
    backdate_days: int = 1,
) -> InvoiceImportOutcome:
    """Extract invoice lines and add them to ``store``.

    Args:
        store:         Target store.
        extractor:     Invoice-extraction collaborator.
        image_bytes:   Raw image payload handed to the collaborator.
        now:           Reference instant for the backdated transactions.
        backdate_days: How far before ``now`` the transactions are dated.

    Returns:
        ``InvoiceImportOutcome``; ``ok`` is ``False`` when the collaborator
        failed or produced no usable line.
    """
    try:
        raw_lines = list(extractor.extract_invoice_data(image_bytes))
    except Exception:
        logger.warning("Invoice extraction failed", exc_info=True)
        return InvoiceImportOutcome(ok=False, message=INVOICE_FAILED_MESSAGE)

    lines: list[InvoiceLine] = []
    skipped = 0
    for raw in raw_lines:
        try:
            lines.append(raw if isinstance(raw, InvoiceLine) else InvoiceLine.model_validate(raw))
        except ValidationError as exc:
            skipped += 1
            logger.warning("Skipped invoice line %r: %s", raw, exc.errors()[0]["msg"])

    if not lines:
        return InvoiceImportOutcome(
            ok=False, message=INVOICE_FAILED_MESSAGE, skipped_lines=skipped
        )

    sold_at = now - timedelta(days=backdate_days)
    products: list[Product] = []
    transactions: list[Transaction] = []
    for line in lines:
        product = Product(
            id=new_entity_id(),
            name=line.name,
            category=line.category,
            price=line.price,
            stock=line.quantity,
            is_new=True,
        )
        products.append(product)
        if line.quantity >= 1:
            transactions.append(
                Transaction(
                    id=new_entity_id(),
                    product_id=product.id,
                    date=sold_at,
                    quantity=line.quantity,
                    price=line.price,
                )
            )

    store.add_products(products)
    store.append_transactions(transactions)
    logger.info(
        "Invoice import: %d product(s), %d transaction(s), %d skipped",
        len(products), len(transactions), skipped,
    )
    return InvoiceImportOutcome(
        ok=True,
        message="Invoice processed successfully!",
        products_added=len(products),
        transactions_added=len(transactions),
        skipped_lines=skipped,
    )
