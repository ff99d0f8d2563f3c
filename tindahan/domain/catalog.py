"""Storage port for the inventory catalog.

Core algorithms only ever see lists of records; this protocol is the
boundary that owns persistence and write serialization.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import Any, Protocol

from tindahan.domain.inventory import ActivityEntry, Category, InventoryDraft, InventoryRecord
from tindahan.domain.sales import DailySales, DailySalesDraft

CatalogListener = Callable[[], None]


class CatalogStore(Protocol):
    """Persistence operations the application workflows depend on."""

    def list_inventory(self) -> list[InventoryRecord]: ...

    def get_inventory_item(self, item_id: str) -> InventoryRecord: ...

    def create_inventory_item(self, draft: InventoryDraft) -> InventoryRecord:
        """Persist a new item; raises DuplicateItemError on a case-insensitive name collision."""
        ...

    def update_inventory_item(self, item_id: str, **changes: Any) -> InventoryRecord: ...

    def delete_inventory_item(self, item_id: str) -> None: ...

    def clear_inventory(self) -> int: ...

    def list_categories(self) -> list[Category]: ...

    def get_category(self, category_id: str) -> Category: ...

    def create_category(self, name: str, description: str = "") -> Category: ...

    def update_category(self, category_id: str, **changes: Any) -> Category: ...

    def delete_category(self, category_id: str) -> None: ...

    def list_sales(self) -> list[DailySales]: ...

    def get_sales_record(self, record_id: str) -> DailySales: ...

    def create_sales_record(self, draft: DailySalesDraft) -> DailySales: ...

    def update_sales_record(self, record_id: str, draft: DailySalesDraft) -> DailySales:
        """Replace every figure of an existing record, keeping its id and creation time."""
        ...

    def delete_sales_record(self, record_id: str) -> None: ...

    def log_activity(self, action: str, details: str, user_id: str | None = None) -> ActivityEntry: ...

    def list_activity(self, limit: int | None = None) -> list[ActivityEntry]: ...

    def batch(self) -> AbstractContextManager[None]:
        """Group several writes into one persisted update and one change notification."""
        ...

    def on_catalog_change(self, callback: CatalogListener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        ...
