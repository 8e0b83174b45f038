"""
One dashboard session: the store plus everything derived from it.

``InventorySession`` subscribes to its ``EntityStore`` and, after every
mutation, recomputes the derived state in the mutation pipeline:

  notifications  -> ``derive_notifications`` merged with the previous list,
                    capped at ``[notifications] cap``
  alert_center   -> both alert-center feeds, rebuilt from scratch

Reads that depend on a reference time (revenue series, KPIs) take an
explicit ``now`` or fall back to the injected ``clock``.

Insight refreshes are last-resolved-wins: whichever call completes last
replaces ``insights``; nothing is cancelled or merged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Optional

from inventory_signals.alerts.feeds import AlertCenter, build_alert_center
from inventory_signals.alerts.notifications import derive_notifications, mark_all_read, unread_count
from inventory_signals.classification.kpis import InventorySummary, summarize_inventory
from inventory_signals.config import AppConfig
from inventory_signals.ingestion.csv_import import ImportResult, parse_csv_file
from inventory_signals.ingestion.invoice import (
    InvoiceExtractor,
    InvoiceImportOutcome,
    import_invoice,
)
from inventory_signals.insights.client import InsightTextGenerator, get_insights
from inventory_signals.insights.rules import rule_based_insights
from inventory_signals.models.insight import Insight
from inventory_signals.models.notification import Notification
from inventory_signals.models.series import RevenuePoint, TrendNote
from inventory_signals.pricing.editor import PriceEditSession
from inventory_signals.store.entity_store import EntityStore, StoreEvent
from inventory_signals.taxonomy.signal_taxonomy import Granularity
from inventory_signals.timeseries.aggregator import aggregate, aggregate_shop_revenue, annotate_trend
from inventory_signals.utils.logging import event_context
from inventory_signals.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class InventorySession:
    """Store, derived alerts, price drafts and insights for one user session.

    Args:
        store:  The session's entity store.
        config: Application config; defaults to ``AppConfig()``.
        clock:  Returns the current instant; injectable for tests.
        tz:     Shop-local zone for revenue bucketing (system zone if ``None``).
    """

    def __init__(
        self,
        store: EntityStore,
        config: Optional[AppConfig] = None,
        *,
        clock: Callable[[], datetime] = utcnow,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.store = store
        self.config = config or AppConfig()
        self.prices = PriceEditSession(store)
        self._clock = clock
        self._tz = tz
        self._notifications: list[Notification] = []
        self._alert_center = AlertCenter()
        self._insights: list[Insight] = []

        self._recompute()
        self._unsubscribe = store.subscribe(self._on_store_event)

    # ── Derived state ─────────────────────────────────────────────────────────

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def unread_count(self) -> int:
        return unread_count(self._notifications)

    @property
    def alert_center(self) -> AlertCenter:
        return self._alert_center

    @property
    def insights(self) -> list[Insight]:
        return list(self._insights)

    def mark_all_read(self) -> None:
        self._notifications = mark_all_read(self._notifications)

    def summary(self, now: Optional[datetime] = None) -> InventorySummary:
        return summarize_inventory(
            self.store.products, self.store.transactions, now or self._clock(), tz=self._tz
        )

    def revenue_series(
        self,
        product_id: Optional[str],
        granularity: Optional[Granularity | str] = None,
        now: Optional[datetime] = None,
    ) -> list[RevenuePoint]:
        """Revenue points for one product; granularity defaults to config."""
        return aggregate(
            self.store.transactions,
            product_id,
            granularity or self.config.trends.default_granularity,
            now or self._clock(),
            tz=self._tz,
        )

    def shop_revenue_series(
        self,
        granularity: Optional[Granularity | str] = None,
        now: Optional[datetime] = None,
    ) -> list[RevenuePoint]:
        return aggregate_shop_revenue(
            self.store.transactions,
            granularity or self.config.trends.default_granularity,
            now or self._clock(),
            tz=self._tz,
        )

    def trend(self, points: list[RevenuePoint]) -> TrendNote:
        return annotate_trend(points, self.config.trends.change_threshold)

    # ── Insights ──────────────────────────────────────────────────────────────

    def refresh_insights(
        self,
        generator: Optional[InsightTextGenerator] = None,
        *,
        target_id: Optional[str] = None,
    ) -> list[Insight]:
        """Replace ``insights`` with a fresh set.

        With a generator, the AI collaborator is asked (falling back to a
        single fallback insight on failure). Without one, the rule-based
        cards are used, focused on ``target_id`` when given.
        """
        if generator is None:
            fresh = rule_based_insights(self.store.products, target_id)
        else:
            fresh = get_insights(
                generator,
                self.store.products,
                self.store.transactions,
                self.config.insights.language,
            )
        self._insights = fresh
        return list(fresh)

    # ── Imports ───────────────────────────────────────────────────────────────

    def import_csv(self, path: Path) -> ImportResult:
        """Parse ``path`` and apply it to the store.

        Products whose id already exists are left as they are; their rows
        still contribute transactions.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            CsvImportError: If the whole file is rejected.
        """
        result = parse_csv_file(path)
        new_products = [p for p in result.products if self.store.get_product(p.id) is None]
        kept = len(result.products) - len(new_products)
        if kept:
            logger.info("CSV import: %d product(s) already in catalogue", kept)
        self.store.add_products(new_products)
        self.store.append_transactions(result.transactions)
        return result

    def import_invoice(
        self, extractor: InvoiceExtractor, image_bytes: bytes
    ) -> InvoiceImportOutcome:
        return import_invoice(
            self.store,
            extractor,
            image_bytes,
            now=self._clock(),
            backdate_days=self.config.imports.invoice_backdate_days,
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def close(self) -> None:
        """Stop tracking store mutations."""
        self._unsubscribe()

    def _on_store_event(self, store: EntityStore, event: StoreEvent) -> None:
        logger.debug(
            "Recomputing derived state after %s", event.kind,
            extra=event_context(event.kind, event.product_ids),
        )
        self._recompute()

    def _recompute(self) -> None:
        now = self._clock()
        products = self.store.products
        self._notifications = derive_notifications(
            products,
            self._notifications,
            now=now,
            cap=self.config.notifications.cap,
        )
        self._alert_center = build_alert_center(products, now)
