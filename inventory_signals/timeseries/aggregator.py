"""
Revenue aggregation into time buckets for trend charts.

Pipeline
--------
1. Filter transactions to one ``product_id`` (exact match).
2. Compute the lookback cutoff from ``now``:

       daily    14 days
       weekly   84 days
       monthly  30 days     (shorter than weekly)
       yearly   12 calendar months

3. Drop transactions dated before the cutoff.
4. Key each remaining transaction by bucket:

       daily    local calendar day          label "Oct 19"
       weekly   Sunday-start week           label "Wk Oct 18"
       monthly  Sunday-start week           label "Week of Oct 18"
       yearly   calendar month              label "Oct 2026"

   ``monthly`` deliberately shares the weekly bucketing rule; it differs
   from ``weekly`` only in its lookback window and label.

5. Sum ``price * quantity`` per bucket and sort by bucket start instant.

All timestamps are normalised to naive local wall time first, so buckets
follow the shop's calendar rather than UTC.

Trend annotation
----------------
``annotate_trend`` compares the last two points: more than 5% up is an
upward trend, more than 5% down is a downward trend, otherwise stable.
Fewer than two points yields ``insufficient_data``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from inventory_signals.models.product import Transaction
from inventory_signals.models.series import RevenuePoint, TrendNote
from inventory_signals.taxonomy.signal_taxonomy import Granularity, TrendDirection
from inventory_signals.utils.time_utils import (
    short_month_day,
    short_month_year,
    start_of_day,
    start_of_month,
    start_of_week_sunday,
    subtract_months,
    to_local_naive,
)

logger = logging.getLogger(__name__)

LOOKBACK_DAYS: dict[Granularity, int] = {
    Granularity.DAILY: 14,
    Granularity.WEEKLY: 84,
    Granularity.MONTHLY: 30,
}
YEARLY_LOOKBACK_MONTHS = 12

TREND_CHANGE_THRESHOLD = 0.05


def lookback_cutoff(granularity: Granularity, now: datetime) -> datetime:
    """Earliest local instant included for ``granularity`` at ``now``."""
    local_now = to_local_naive(now)
    if granularity is Granularity.YEARLY:
        return subtract_months(local_now, YEARLY_LOOKBACK_MONTHS)
    return local_now - timedelta(days=LOOKBACK_DAYS[granularity])


def bucket_for(granularity: Granularity, moment: datetime) -> tuple[datetime, str]:
    """Return ``(bucket_start, bucket_label)`` for a local naive ``moment``."""
    if granularity is Granularity.DAILY:
        start = start_of_day(moment)
        return start, short_month_day(start)
    if granularity is Granularity.WEEKLY:
        start = start_of_week_sunday(moment)
        return start, f"Wk {short_month_day(start)}"
    if granularity is Granularity.MONTHLY:
        start = start_of_week_sunday(moment)
        return start, f"Week of {short_month_day(start)}"
    start = start_of_month(moment)
    return start, short_month_year(start)


def aggregate(
    transactions: Iterable[Transaction],
    product_id: Optional[str],
    granularity: Granularity | str,
    now: datetime,
    *,
    tz: Optional[tzinfo] = None,
) -> list[RevenuePoint]:
    """Bucket one product's revenue at ``granularity``.

    Args:
        transactions: Transaction log (any order; dangling references fine).
        product_id:   Selected product; ``None`` or ``""`` yields ``[]``.
        granularity:  ``Granularity`` member or its string value.
        now:          Reference instant for the lookback window.
        tz:           Local zone for aware timestamps (system zone if ``None``).

    Returns:
        Points sorted ascending by ``bucket_start``.

    Raises:
        ValueError: If ``granularity`` is not a known value.
    """
    if not product_id:
        return []
    selected = (t for t in transactions if t.product_id == product_id)
    return _bucket_revenue(selected, Granularity(granularity), now, tz)


def aggregate_shop_revenue(
    transactions: Iterable[Transaction],
    granularity: Granularity | str,
    now: datetime,
    *,
    tz: Optional[tzinfo] = None,
) -> list[RevenuePoint]:
    """Bucket revenue across every transaction, including removed products."""
    return _bucket_revenue(transactions, Granularity(granularity), now, tz)


def annotate_trend(
    points: list[RevenuePoint],
    threshold: float = TREND_CHANGE_THRESHOLD,
) -> TrendNote:
    """Describe the change between the last two points of a series."""
    if len(points) < 2:
        return TrendNote(
            direction=TrendDirection.INSUFFICIENT_DATA,
            message="Not enough data to determine a trend.",
        )

    prior, latest = points[-2].revenue, points[-1].revenue
    if prior == 0:
        if latest > 0:
            return TrendNote(
                direction=TrendDirection.UP,
                message="Upward trend: revenue resumed after an empty period.",
            )
        return TrendNote(
            direction=TrendDirection.STABLE,
            change_pct=0.0,
            message="Stable: no revenue in the last two periods.",
        )

    change = (latest - prior) / prior
    if change > threshold:
        direction, message = TrendDirection.UP, f"Upward trend: revenue up {change:.1%}."
    elif change < -threshold:
        direction, message = TrendDirection.DOWN, f"Downward trend: revenue down {-change:.1%}."
    else:
        direction, message = TrendDirection.STABLE, f"Stable: revenue changed {change:+.1%}."
    return TrendNote(direction=direction, change_pct=round(change, 4), message=message)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _bucket_revenue(
    transactions: Iterable[Transaction],
    granularity: Granularity,
    now: datetime,
    tz: Optional[tzinfo],
) -> list[RevenuePoint]:
    cutoff = lookback_cutoff(granularity, to_local_naive(now, tz))
    totals: dict[datetime, float] = {}
    labels: dict[datetime, str] = {}

    for tx in transactions:
        moment = to_local_naive(tx.date, tz)
        if moment < cutoff:
            continue
        start, label = bucket_for(granularity, moment)
        totals[start] = totals.get(start, 0.0) + tx.revenue
        labels[start] = label

    points = [
        RevenuePoint(
            bucket_label=labels[start],
            bucket_start=start,
            revenue=round(totals[start], 2),
            granularity=granularity,
        )
        for start in sorted(totals)
    ]
    logger.debug("Aggregated %d %s bucket(s)", len(points), granularity.value)
    return points
