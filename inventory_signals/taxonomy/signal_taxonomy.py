"""
Closed vocabularies used across the inventory signal engine.

Every derived signal is expressed through one of these enums:
  - ``DemandLevel``        - advisory sales-velocity tier on a product.
  - ``StockTier``          - stock health derived from on-hand units.
  - ``NotificationType``   - source category of a notification.
  - ``RecommendationKind`` - outcome of the pricing decision tree.
  - ``Granularity``        - time bucket used by revenue series.
  - ``TrendDirection``     - last-two-points comparison of a series.
  - ``ActionKind``         - tag of an action payload on alerts / insights.
  - ``InsightType``        - topic of an insight card.

Usage example::

    from inventory_signals.taxonomy.signal_taxonomy import DemandLevel, StockTier

    if product.demand_level is DemandLevel.HIGH:
        ...

This module has NO imports from any other ``inventory_signals`` package.
"""

from enum import StrEnum


class DemandLevel(StrEnum):
    """Advisory demand tier; supplied externally or defaulted, never computed."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class StockTier(StrEnum):
    """Stock health tier derived from a product's on-hand units."""

    HEALTHY = "Healthy"
    LOW = "Low"
    CRITICAL = "Critical"


class NotificationType(StrEnum):
    """Source category of a notification."""

    LOW_STOCK = "low_stock"
    """Stock fell below the strict alert threshold."""

    INSIGHT = "insight"
    """Narrative insight produced by the insight collaborator."""

    TREND = "trend"
    """Market opportunity raised for high-demand products."""


class RecommendationKind(StrEnum):
    """Discrete outcome of the pricing decision tree."""

    WARN_HIKE = "warn_hike"
    WARN_DROP = "warn_drop"
    SUGGEST_INCREASE = "suggest_increase"
    SUGGEST_DECREASE = "suggest_decrease"
    MAINTAIN = "maintain"


class Granularity(StrEnum):
    """Selectable bucket size for revenue series."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class TrendDirection(StrEnum):
    """Direction of the most recent change in a revenue series."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"
    INSUFFICIENT_DATA = "insufficient_data"


class ActionKind(StrEnum):
    """Tag of an action payload attached to alerts, insights and chat replies."""

    ORDER = "order"
    """Reorder stock from a supplier (carries a product id and supplier URL)."""

    VIEW_SUPPLIER = "view_supplier"
    """Open a supplier / marketplace listing for comparison."""

    NAVIGATE = "navigate"
    """Switch the dashboard to another view, optionally focused on a product."""


class InsightType(StrEnum):
    """Topic of an insight card."""

    INVENTORY = "inventory"
    PRICING = "pricing"
    GENERAL = "general"
