"""
CSV import parser for sales logs and inventory sheets.

Two header layouts are recognised (case-insensitive, surrounding whitespace
trimmed, column order free). The header must match one layout exactly:

  sales      product_id, product_name, category, date, units_sold, unit_price
  inventory  product_name, category, price, quantity

Sales rows become ``Transaction`` records. Product ids not seen before get a
``Product`` too: latest unit price, stock 0, purchase frequency = row count.

Inventory rows become ``Product`` records with ``stock = quantity`` and a
fresh id, matching manual product entry.

Row handling
------------
Malformed rows (missing field, non-numeric or non-finite number, bad date,
negative value) are skipped and reported in ``ImportResult.errors`` as
``(line_no, message)``.
The import fails as a whole only when the header is unrecognised
(``CsvInvalidHeaderError``) or no row survives (``CsvNoValidRowsError``).

Date formats:
  date  -> YYYY-MM-DD or ISO 8601 datetime (``Z`` suffix accepted)
"""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import ValidationError

from inventory_signals.models.product import Product, Transaction
from inventory_signals.store.entity_store import new_entity_id
from inventory_signals.utils.logging import event_context
from inventory_signals.utils.time_utils import to_local_naive

logger = logging.getLogger(__name__)

SALES_COLUMNS = frozenset({
    "product_id", "product_name", "category", "date", "units_sold", "unit_price",
})
INVENTORY_COLUMNS = frozenset({"product_name", "category", "price", "quantity"})

CsvLayout = Literal["sales", "inventory"]


class CsvImportError(ValueError):
    """Base class for whole-file CSV import failures.

    Attributes:
        code: Stable machine-readable error signal.
    """

    code = "csvImportFailed"


class CsvInvalidHeaderError(CsvImportError):
    code = "csvInvalidHeader"


class CsvNoValidRowsError(CsvImportError):
    code = "csvNoValidRows"


@dataclass
class ImportResult:
    """Records produced by one CSV import.

    Attributes:
        layout:       Which header layout matched.
        products:     New products (sales: unseen ids; inventory: every row).
        transactions: Sale records (sales layout only).
        errors:       ``(line_no, message)`` for every skipped row.
    """

    layout: CsvLayout
    products: list[Product] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    errors: list[tuple[int, str]] = field(default_factory=list)


def parse_sales_csv(text: str) -> ImportResult:
    """Parse CSV text in either recognised layout.

    Args:
        text: Full file contents, header row first.

    Returns:
        ``ImportResult`` with at least one product or transaction.

    Raises:
        CsvInvalidHeaderError: Empty input or a header matching neither layout.
        CsvNoValidRowsError: No data row could be parsed.
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if not header:
        raise CsvInvalidHeaderError("CSV is empty or has no header row.")

    columns = [h.strip().lower() for h in header]
    layout = _detect_layout(columns)

    result = ImportResult(layout=layout)
    rows: list[tuple[int, dict[str, str]]] = []
    for line_no, values in enumerate(reader, start=2):
        if not any(v.strip() for v in values):
            continue
        if len(values) != len(columns):
            result.errors.append(
                (line_no, f"Expected {len(columns)} fields, got {len(values)}.")
            )
            continue
        rows.append((line_no, dict(zip(columns, values))))

    if layout == "sales":
        _parse_sales_rows(rows, result)
    else:
        _parse_inventory_rows(rows, result)

    for line_no, msg in result.errors:
        logger.warning(
            "Skipped CSV row %d: %s", line_no, msg,
            extra=event_context("csv_row_skipped", line_no=line_no),
        )

    if not result.products and not result.transactions:
        raise CsvNoValidRowsError(
            f"No valid rows in CSV ({len(result.errors)} row(s) rejected)."
        )

    logger.info(
        "Parsed %s CSV: %d product(s), %d transaction(s), %d skipped",
        layout, len(result.products), len(result.transactions), len(result.errors),
    )
    return result


def parse_csv_file(path: Path) -> ImportResult:
    """Read ``path`` as UTF-8 and parse it with :func:`parse_sales_csv`.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")
    return parse_sales_csv(path.read_text(encoding="utf-8-sig"))


# ── Private helpers ────────────────────────────────────────────────────────────

def _detect_layout(columns: list[str]) -> CsvLayout:
    found = set(columns)
    if len(found) == len(columns):
        if found == SALES_COLUMNS:
            return "sales"
        if found == INVENTORY_COLUMNS:
            return "inventory"
    raise CsvInvalidHeaderError(
        f"Unrecognised CSV header: {columns}\n"
        f"Expected {sorted(SALES_COLUMNS)} or {sorted(INVENTORY_COLUMNS)}"
    )


def _parse_sales_rows(rows: list[tuple[int, dict[str, str]]], result: ImportResult) -> None:
    # product_id -> (name, category, latest date, latest unit price, row count)
    seen: dict[str, list] = {}

    for line_no, row in rows:
        try:
            product_id = _req(row, "product_id")
            tx = Transaction(
                id=new_entity_id(),
                product_id=product_id,
                date=_parse_datetime(row, "date"),
                quantity=_parse_int(row, "units_sold"),
                price=_parse_float(row, "unit_price"),
            )
            name = _req(row, "product_name")
            category = _req(row, "category")
        except (ValueError, ValidationError) as exc:
            result.errors.append((line_no, _first_line(exc)))
            continue

        result.transactions.append(tx)
        entry = seen.get(product_id)
        if entry is None:
            seen[product_id] = [name, category, to_local_naive(tx.date), tx.price, 1]
            continue
        entry[4] += 1
        moment = to_local_naive(tx.date)
        if moment >= entry[2]:
            entry[2], entry[3] = moment, tx.price

    for product_id, (name, category, _, price, count) in seen.items():
        result.products.append(
            Product(
                id=product_id,
                name=name,
                category=category,
                price=price,
                stock=0,
                purchase_frequency=count,
            )
        )


def _parse_inventory_rows(
    rows: list[tuple[int, dict[str, str]]],
    result: ImportResult,
) -> None:
    for line_no, row in rows:
        try:
            product = Product(
                id=new_entity_id(),
                name=_req(row, "product_name"),
                category=_req(row, "category"),
                price=_parse_float(row, "price"),
                stock=_parse_int(row, "quantity"),
                is_new=True,
            )
        except (ValueError, ValidationError) as exc:
            result.errors.append((line_no, _first_line(exc)))
            continue
        result.products.append(product)


def _req(row: dict[str, str], key: str) -> str:
    """Return a required string field, stripped; raise if empty."""
    v = row.get(key, "").strip()
    if not v:
        raise ValueError(f"Required field '{key}' is empty.")
    return v


def _parse_int(row: dict[str, str], key: str) -> int:
    v = _req(row, key)
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Invalid integer for '{key}': '{v}'.")


def _parse_float(row: dict[str, str], key: str) -> float:
    v = _req(row, key)
    try:
        parsed = float(v)
    except ValueError:
        raise ValueError(f"Invalid number for '{key}': '{v}'.")
    if not math.isfinite(parsed):
        raise ValueError(f"Invalid number for '{key}': '{v}'.")
    return parsed


def _parse_datetime(row: dict[str, str], key: str) -> datetime:
    """Parse an ISO date or datetime string from a CSV row field."""
    v = _req(row, key)
    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(
            f"Invalid date for '{key}': '{v}'. Expected YYYY-MM-DD or ISO 8601."
        )


def _first_line(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        err = exc.errors()[0]
        loc = ".".join(str(p) for p in err["loc"])
        return f"{loc}: {err['msg']}" if loc else err["msg"]
    return str(exc).splitlines()[0]
