"""Spreadsheet export rows.

The flat layout is a plain table. The sectioned layout mirrors the shop's
own price list (category row, header row, products) and can be imported
back with the sectioned parser.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Literal

from tindahan.catalog.bulk_pricing import parse_money
from tindahan.catalog.search import sort_inventory
from tindahan.domain.inventory import DEFAULT_CATEGORY, InventoryRecord

ExportLayout = Literal["flat", "sectioned"]

FLAT_HEADER = ["Item Name", "Price", "Stock", "Category"]
SECTION_HEADER = ["Product - Items", "Retail Price", "Stocks"]
SECTION_RULE = ["---", "---", "---"]


def _price_cell(item: InventoryRecord) -> Decimal | str:
    value = parse_money(item.price)
    return value if value is not None else item.price


def flat_export_rows(items: Sequence[InventoryRecord]) -> list[list[Any]]:
    rows: list[list[Any]] = [list(FLAT_HEADER)]
    for item in items:
        rows.append([item.item_name, item.price, item.stock, item.category])
    return rows


def sectioned_export_rows(items: Sequence[InventoryRecord]) -> list[list[Any]]:
    """Group by category (first-seen order), each block followed by a blank row."""
    groups: dict[str, list[InventoryRecord]] = {}
    for item in items:
        groups.setdefault(item.category or DEFAULT_CATEGORY, []).append(item)

    rows: list[list[Any]] = []
    for category, members in groups.items():
        rows.append([category])
        rows.append(list(SECTION_HEADER))
        rows.append(list(SECTION_RULE))
        for item in sort_inventory(members, "itemName"):
            rows.append([item.item_name, _price_cell(item), item.stock])
        rows.append([])
    return rows


def export_rows(items: Sequence[InventoryRecord], layout: ExportLayout = "flat") -> list[list[Any]]:
    if layout == "flat":
        return flat_export_rows(items)
    if layout == "sectioned":
        return sectioned_export_rows(items)
    raise ValueError(f"Unknown export layout: {layout!r}")
