"""
Tests for inventory_signals/ingestion/seed_loader.py.

What we test
------------
  - The shipped demo catalogue loads: five products, demo stock levels.
  - Missing file, invalid JSON, non-array top level, invalid entry and
    duplicate id are all rejected.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from inventory_signals.ingestion.seed_loader import load_seed_products
from inventory_signals.taxonomy.signal_taxonomy import DemandLevel

DEMO_SEED = Path(__file__).parents[2] / "config" / "seed" / "demo_inventory.json"


def _write(tmp_path: Path, payload) -> Path:
    path = tmp_path / "seed.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def _entry(pid: str = "1", **overrides) -> dict:
    base = {"id": pid, "name": "Widget", "category": "Other", "price": 10, "stock": 5}
    base.update(overrides)
    return base


class TestDemoSeed:
    def test_loads_five_products(self):
        products = load_seed_products(DEMO_SEED)
        assert [p.id for p in products] == ["1", "2", "3", "4", "5"]

    def test_demo_values(self):
        products = {p.id: p for p in load_seed_products(DEMO_SEED)}
        assert products["2"].name == "Coffee Maker Elite"
        assert products["2"].stock == 5
        assert products["3"].demand_level == DemandLevel.HIGH
        assert products["4"].demand_level == DemandLevel.LOW
        assert not any(p.is_new for p in products.values())


class TestSeedValidation:
    def test_minimal_entry_defaults(self, tmp_path):
        product = load_seed_products(_write(tmp_path, [_entry()]))[0]
        assert product.demand_level == DemandLevel.MEDIUM
        assert product.purchase_frequency == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_seed_products(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "seed.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(ValueError, match="not valid JSON"):
            load_seed_products(path)

    def test_top_level_not_array(self, tmp_path):
        with pytest.raises(ValueError, match="JSON array"):
            load_seed_products(_write(tmp_path, {"products": []}))

    def test_invalid_entry(self, tmp_path):
        with pytest.raises(ValueError, match="index 1"):
            load_seed_products(_write(tmp_path, [_entry("1"), _entry("2", stock=-3)]))

    def test_duplicate_id(self, tmp_path):
        with pytest.raises(ValueError, match="Duplicate product id '1'"):
            load_seed_products(_write(tmp_path, [_entry("1"), _entry("1")]))
