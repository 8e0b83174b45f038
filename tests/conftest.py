"""
Shared pytest fixtures for the Inventory Signals test suite.

Provides:
  - ``now``: fixed naive local reference instant (Monday 19 Oct 2026, noon).
  - ``demo_products``: the five-product demo catalogue, built in code so
    tests do not depend on the seed file.
  - ``store``: a fresh ``EntityStore`` seeded with ``demo_products``.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from inventory_signals.models.product import Product
from inventory_signals.store.entity_store import EntityStore
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel

NOW = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def demo_products() -> list[Product]:
    """Smartwatch (High, 45), Coffee Maker (Medium, 5), T-Shirt (High, 120),
    Earbuds (Low, 12), Vase Set (Medium, 30)."""
    return [
        Product(id="1", name="Smartwatch Pro", category="Electronics", price=199, stock=45,
                demand_level=DemandLevel.HIGH, purchase_frequency=31),
        Product(id="2", name="Coffee Maker Elite", category="Home", price=89, stock=5,
                demand_level=DemandLevel.MEDIUM, purchase_frequency=12),
        Product(id="3", name="Eco-Cotton T-Shirt", category="Apparel", price=25, stock=120,
                demand_level=DemandLevel.HIGH, purchase_frequency=88),
        Product(id="4", name="Bluetooth Earbuds", category="Electronics", price=59, stock=12,
                demand_level=DemandLevel.LOW, purchase_frequency=5),
        Product(id="5", name="Ceramic Vase Set", category="Home", price=45, stock=30,
                demand_level=DemandLevel.MEDIUM, purchase_frequency=18),
    ]


@pytest.fixture
def store(demo_products) -> EntityStore:
    """A fresh store per test, seeded with the demo catalogue."""
    return EntityStore(demo_products)
