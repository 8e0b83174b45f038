"""
Notification model and the action payloads attached to alerts and insights.

Action payloads form a closed tagged union keyed on ``kind``:

  - ``OrderAction``        - ``kind="order"``: reorder a product from a supplier.
  - ``ViewSupplierAction`` - ``kind="view_supplier"``: open a supplier listing.
  - ``NavigateAction``     - ``kind="navigate"``: switch dashboard view.

Each variant carries only the fields its kind needs, and pydantic picks the
variant from the ``kind`` discriminator when parsing exported JSON.

``Notification`` is frozen. Derived lists are rebuilt, never edited in place:
``mark_all_read()`` returns new instances with ``read=True``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from inventory_signals.taxonomy.signal_taxonomy import NotificationType


class OrderAction(BaseModel):
    """Reorder stock for ``product_id`` at ``supplier_url``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["order"] = "order"
    product_id: str
    supplier_url: str


class ViewSupplierAction(BaseModel):
    """Open an external supplier or marketplace listing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["view_supplier"] = "view_supplier"
    url: str
    product_id: Optional[str] = None


class NavigateAction(BaseModel):
    """Switch the dashboard to ``target_view``, optionally focused on a product."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["navigate"] = "navigate"
    target_view: str
    product_id: Optional[str] = None


Action = Annotated[
    Union[OrderAction, ViewSupplierAction, NavigateAction],
    Field(discriminator="kind"),
]


class Notification(BaseModel):
    """A derived, ephemeral alert shown in the notification bell or alert center.

    Attributes:
        id: Deterministic id built by ``alerts.notifications.notification_id``.
        type: Source category.
        title: Short headline.
        message: One-sentence body.
        timestamp: When the notification was first derived.
        read: Set by ``mark_all_read``; preserved across recomputation.
        link: Target view for the presentation layer, e.g. ``"alerts"``.
        product_id: Product the notification is about, if any.
        action: Optional follow-up action payload.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: NotificationType
    title: str
    message: str
    timestamp: datetime
    read: bool = False
    link: Optional[str] = None
    product_id: Optional[str] = None
    action: Optional[Action] = None
