"""Shared pytest fixtures for tindahan tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from tindahan.catalog.config import CatalogRules
from tindahan.domain.inventory import InventoryRecord
from tindahan.runtime import load_catalog_rules, set_project_root
from tindahan.runtime.catalog_store import JsonCatalogStore
from tindahan.runtime.paths import ProjectPaths

DEFAULT_RULES = ProjectPaths().default_catalog_rules

ItemFactory = Callable[..., InventoryRecord]


@pytest.fixture(autouse=True)
def isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the project root at a temp dir so no real catalog or overrides are read."""
    monkeypatch.setenv("TINDAHAN_HOME", str(tmp_path))
    set_project_root(tmp_path)
    load_catalog_rules.cache_clear()
    yield tmp_path
    load_catalog_rules.cache_clear()


@pytest.fixture
def rules() -> CatalogRules:
    return load_catalog_rules((str(DEFAULT_RULES),))


@pytest.fixture
def store() -> JsonCatalogStore:
    return JsonCatalogStore()


@pytest.fixture
def make_item() -> ItemFactory:
    counter = iter(range(1, 10_000))

    def _make(
        item_name: str,
        price: str = "10.00",
        stock: int = 100,
        category: str = "General",
    ) -> InventoryRecord:
        return InventoryRecord(
            id=f"item-{next(counter)}",
            item_name=item_name,
            price=price,
            stock=stock,
            category=category,
        )

    return _make
