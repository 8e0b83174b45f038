"""
Notification bell derivation: synthesise, de-duplicate, merge, cap.

Algorithm
---------
1. For every product with ``stock < LOW_STOCK_ALERT_THRESHOLD`` (10),
   synthesise a ``low_stock`` notification with id ``"notif-stock-<id>"``.
2. Drop synthesised entries whose id already exists in ``previous``.
3. Prepend the survivors (catalogue order) to ``previous``.
4. Truncate to the first ``cap`` entries (default 10).

Carried-over entries are kept as-is, so their ``read`` flag and original
timestamp survive recomputation. Running the derivation twice with an
unchanged catalogue is therefore a no-op.

A notification whose condition has cleared (e.g. after a restock) is not
removed; it ages out of the list as newer notifications push it past the cap.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from inventory_signals.classification.classifier import is_low_stock_alert
from inventory_signals.models.notification import NavigateAction, Notification
from inventory_signals.models.product import Product
from inventory_signals.taxonomy.signal_taxonomy import NotificationType

NOTIFICATION_CAP = 10
ALERTS_VIEW = "alerts"
INSIGHTS_VIEW = "insights"

_ID_PREFIX: dict[NotificationType, str] = {
    NotificationType.LOW_STOCK: "notif-stock-",
    NotificationType.TREND: "notif-trend-",
    NotificationType.INSIGHT: "notif-insight-",
}


def notification_id(notification_type: NotificationType, entity_id: str) -> str:
    """Deterministic id for a (type, source entity) pair."""
    return f"{_ID_PREFIX[notification_type]}{entity_id}"


def low_stock_notification(product: Product, now: datetime) -> Notification:
    """Build the bell notification for a product below the alert threshold."""
    return Notification(
        id=notification_id(NotificationType.LOW_STOCK, product.id),
        type=NotificationType.LOW_STOCK,
        title="Low Stock Warning",
        message=f"{product.name} only has {product.stock} units left.",
        timestamp=now,
        read=False,
        link=ALERTS_VIEW,
        product_id=product.id,
        action=NavigateAction(target_view=ALERTS_VIEW, product_id=product.id),
    )


def derive_notifications(
    products: Iterable[Product],
    previous: Sequence[Notification],
    *,
    now: datetime,
    cap: int = NOTIFICATION_CAP,
) -> list[Notification]:
    """Recompute the notification list after a store mutation.

    Args:
        products: Current catalogue.
        previous: Notification list before this mutation (newest first).
        now:      Timestamp stamped on newly synthesised notifications.
        cap:      Maximum list length.

    Returns:
        New list, newest first, at most ``cap`` long.

    Raises:
        ValueError: If ``cap`` is less than 1.
    """
    if cap < 1:
        raise ValueError(f"cap must be >= 1, got {cap}.")

    existing_ids = {n.id for n in previous}
    fresh: list[Notification] = []
    for product in products:
        if not is_low_stock_alert(product):
            continue
        candidate = low_stock_notification(product, now)
        if candidate.id in existing_ids:
            continue
        existing_ids.add(candidate.id)
        fresh.append(candidate)

    return [*fresh, *previous][:cap]


def mark_all_read(notifications: Iterable[Notification]) -> list[Notification]:
    """Return copies of ``notifications`` with ``read=True``."""
    return [
        n if n.read else n.model_copy(update={"read": True})
        for n in notifications
    ]


def unread_count(notifications: Iterable[Notification]) -> int:
    return sum(1 for n in notifications if not n.read)
