"""
Revenue series models for trend charts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from inventory_signals.taxonomy.signal_taxonomy import Granularity, TrendDirection


class RevenuePoint(BaseModel):
    """Summed revenue for one time bucket.

    Attributes:
        bucket_label: Display string, e.g. ``"Oct 19"`` or ``"Wk Oct 18"``.
        bucket_start: Local start instant of the bucket; the sort key.
        revenue: Sum of ``price * quantity`` over transactions in the bucket.
        granularity: Granularity the point was aggregated at.
    """

    model_config = ConfigDict(frozen=True)

    bucket_label: str
    bucket_start: datetime
    revenue: float
    granularity: Granularity


class TrendNote(BaseModel):
    """Comparison of the last two points of a revenue series.

    ``change_pct`` is ``None`` when there are fewer than two points or when
    the prior bucket had zero revenue.
    """

    model_config = ConfigDict(frozen=True)

    direction: TrendDirection
    change_pct: Optional[float] = None
    message: str
