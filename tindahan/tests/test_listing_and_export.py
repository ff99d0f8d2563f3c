from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from tindahan.application.inventory import (
    availability_label,
    inventory_stats,
    low_stock_items,
    public_listing,
    run_inventory_export,
)
from tindahan.catalog.config import CatalogRules
from tindahan.catalog.export import FLAT_HEADER, SECTION_HEADER, export_rows
from tindahan.domain.inventory import INVENTORY_EXPORT, InventoryDraft
from tindahan.runtime.catalog_store import JsonCatalogStore


@pytest.fixture
def stocked(store: JsonCatalogStore) -> JsonCatalogStore:
    for name, price, stock, category in [
        ("Nova", "18.00", 24, "Snacks"),
        ("Kopiko", "8.00", 5, "Coffee"),
        ("Piattos", "20.00", 0, "Snacks"),
        ("Mystery", "ask", 3, "General"),
    ]:
        store.create_inventory_item(InventoryDraft(item_name=name, price=price, stock=stock, category=category))
    return store


@pytest.mark.parametrize(
    ("stock", "label"),
    [(0, "Out of Stock"), (-1, "Out of Stock"), (1, "Limited Stock"), (10, "Limited Stock"), (11, "In Stock")],
)
def test_availability_label(stock: int, label: str) -> None:
    assert availability_label(stock, 10) == label


def test_public_listing_hides_stock_counts(stocked: JsonCatalogStore, rules: CatalogRules) -> None:
    listing = public_listing(stocked, "snacks 18", rules)

    assert [(item.item_name, item.availability) for item in listing] == [("Nova", "In Stock")]
    assert not hasattr(listing[0], "stock")


def test_low_stock_items_lowest_first(stocked: JsonCatalogStore, rules: CatalogRules) -> None:
    assert [item.item_name for item in low_stock_items(stocked, rules=rules)] == ["Piattos", "Mystery", "Kopiko"]
    assert [item.item_name for item in low_stock_items(stocked, threshold=0, rules=rules)] == ["Piattos"]


def test_stats_skip_unpriced_items(stocked: JsonCatalogStore, rules: CatalogRules) -> None:
    stats = inventory_stats(stocked, rules)

    assert stats.total_items == 4
    assert stats.total_stock == 32
    assert stats.low_stock_count == 3
    assert stats.total_value == Decimal("472.00")


def test_flat_export_rows(stocked: JsonCatalogStore) -> None:
    rows = export_rows(stocked.list_inventory(), "flat")

    assert rows[0] == FLAT_HEADER
    assert rows[1] == ["Nova", "18.00", 24, "Snacks"]


def test_sectioned_export_groups_by_category(stocked: JsonCatalogStore) -> None:
    rows = export_rows(stocked.list_inventory(), "sectioned")

    assert rows[:6] == [
        ["Snacks"],
        SECTION_HEADER,
        ["---", "---", "---"],
        ["Nova", Decimal("18.00"), 24],
        ["Piattos", Decimal("20.00"), 0],
        [],
    ]
    assert ["Mystery", "ask", 3] in rows


def test_unknown_export_layout() -> None:
    with pytest.raises(ValueError, match="layout"):
        export_rows([], "pdf")  # type: ignore[arg-type]


def test_export_workflow_names_file_and_logs(stocked: JsonCatalogStore) -> None:
    export = run_inventory_export(stocked, "flat", user_id="u1", today=date(2024, 3, 9))

    assert export.filename == "inventory-export-2024-03-09.xlsx"
    assert export.item_count == 4
    assert export.content[:2] == b"PK"
    assert stocked.list_activity()[0].action == INVENTORY_EXPORT
