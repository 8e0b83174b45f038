"""
Snapshot export helpers for notifications, insights and revenue series.

String serialisers (``*_to_json`` / ``*_to_text``) return text so callers
decide where it goes; the ``export_to_*`` helpers write to disk and return
the written ``Path``.

JSON round trip
---------------
``notifications_from_json(notifications_to_json(ns)) == ns`` holds
field-for-field: timestamps are ISO 8601 (offset kept when aware), actions
keep their ``kind`` tag and parse back into the same variant.

Insights are written with their wire aliases (``actionLabel``,
``actionUrl``) so the export matches what the AI collaborator produces.

CSV exports are flat (no nested dicts) so they load directly in a
spreadsheet. ``flatten_revenue_series_for_export()`` is the adapter for
revenue points.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter

from inventory_signals.models.insight import Insight
from inventory_signals.models.notification import Notification
from inventory_signals.models.series import RevenuePoint

_NOTIFICATION_LIST = TypeAdapter(list[Notification])


def notifications_to_json(notifications: Sequence[Notification]) -> str:
    """Serialise notifications, newest first, as a pretty-printed JSON array."""
    return _NOTIFICATION_LIST.dump_json(list(notifications), indent=2).decode("utf-8")


def notifications_from_json(text: str) -> list[Notification]:
    """Parse the output of :func:`notifications_to_json`.

    Raises:
        pydantic.ValidationError: On malformed JSON or entries.
    """
    return _NOTIFICATION_LIST.validate_json(text)


def notifications_to_text(notifications: Sequence[Notification]) -> str:
    """One line per notification: read marker, timestamp, title, message."""
    if not notifications:
        return "(no notifications)"
    lines = []
    for n in notifications:
        marker = "[x]" if n.read else "[ ]"
        lines.append(
            f"{marker} {n.timestamp.isoformat(timespec='seconds')}  {n.title}: {n.message}"
        )
    return "\n".join(lines)


def insights_to_json(insights: Sequence[Insight]) -> str:
    payload = [i.model_dump(mode="json", by_alias=True, exclude_none=True) for i in insights]
    return json.dumps(payload, indent=2, ensure_ascii=False)


def insights_to_text(insights: Sequence[Insight]) -> str:
    if not insights:
        return "(no insights)"
    blocks = []
    for i in insights:
        block = [f"{i.title} [{i.type.value}]", f"  {i.description}"]
        if i.action_label:
            block.append(f"  -> {i.action_label}: {i.action_url}")
        blocks.append("\n".join(block))
    return "\n\n".join(blocks)


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list | str, path: Path) -> Path:
    """Write ``data`` to a JSON file; strings are written as-is."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = data if isinstance(data, str) else json.dumps(data, indent=2, default=str)
    path.write_text(text, encoding="utf-8")
    return path


def export_text(text: str, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
    return path


def flatten_revenue_series_for_export(
    points: Sequence[RevenuePoint],
    product_id: str = "",
    product_name: str = "",
) -> list[dict]:
    """One flat row per revenue bucket.

    Each row contains ``product_id``, ``product_name``, ``granularity``,
    ``bucket_label``, ``bucket_start`` (ISO) and ``revenue``.
    """
    return [
        {
            "product_id":   product_id,
            "product_name": product_name,
            "granularity":  p.granularity.value,
            "bucket_label": p.bucket_label,
            "bucket_start": p.bucket_start.isoformat(),
            "revenue":      p.revenue,
        }
        for p in points
    ]
