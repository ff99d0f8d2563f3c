"""Inventory listing, public storefront, low-stock and dashboard stats."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from tindahan.catalog.bulk_pricing import round_money
from tindahan.catalog.config import CatalogRules
from tindahan.catalog.search import SearchMode, filter_inventory, search_inventory, sort_inventory
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.inventory import InventoryRecord, ScoredMatch
from tindahan.runtime import load_catalog_rules

Availability = Literal["In Stock", "Limited Stock", "Out of Stock"]


@dataclass(frozen=True)
class PublicItem:
    """What anonymous shoppers see: no stock counts, only availability."""

    item_name: str
    price: str
    category: str
    availability: Availability


@dataclass(frozen=True)
class InventoryStats:
    total_items: int
    total_stock: int
    low_stock_count: int
    total_value: Decimal


def list_inventory(
    store: CatalogStore,
    query: str | None = None,
    mode: SearchMode = "smart",
    sort_by: str = "itemName",
    descending: bool = False,
    rules: CatalogRules | None = None,
) -> list[InventoryRecord]:
    """Ranked search results for a query, otherwise the catalog in the chosen sort order."""
    rules = rules or load_catalog_rules()
    return filter_inventory(store.list_inventory(), query, mode, sort_by, descending, rules.search)


def search_matches(
    store: CatalogStore,
    query: str,
    mode: SearchMode = "smart",
    rules: CatalogRules | None = None,
) -> list[ScoredMatch]:
    rules = rules or load_catalog_rules()
    return search_inventory(store.list_inventory(), query, mode, rules.search)


def availability_label(stock: int, low_stock_threshold: int) -> Availability:
    if stock <= 0:
        return "Out of Stock"
    if stock <= low_stock_threshold:
        return "Limited Stock"
    return "In Stock"


def public_listing(
    store: CatalogStore,
    query: str | None = None,
    rules: CatalogRules | None = None,
) -> list[PublicItem]:
    rules = rules or load_catalog_rules()
    threshold = rules.store.low_stock_threshold
    return [
        PublicItem(
            item_name=item.item_name,
            price=item.price,
            category=item.category,
            availability=availability_label(item.stock, threshold),
        )
        for item in filter_inventory(store.list_inventory(), query, "smart", config=rules.search)
    ]


def low_stock_items(
    store: CatalogStore,
    threshold: int | None = None,
    rules: CatalogRules | None = None,
) -> list[InventoryRecord]:
    """Items at or below the threshold, lowest stock first."""
    if threshold is None:
        threshold = (rules or load_catalog_rules()).store.low_stock_threshold
    low = [item for item in store.list_inventory() if item.stock <= threshold]
    return sort_inventory(low, "stock")


def inventory_stats(store: CatalogStore, rules: CatalogRules | None = None) -> InventoryStats:
    rules = rules or load_catalog_rules()
    items = store.list_inventory()
    total_value = Decimal("0")
    for item in items:
        price = item.price_value
        if price is not None and price.is_finite():
            total_value += price * item.stock
    return InventoryStats(
        total_items=len(items),
        total_stock=sum(item.stock for item in items),
        low_stock_count=sum(1 for item in items if item.stock <= rules.store.low_stock_threshold),
        total_value=round_money(total_value),
    )
