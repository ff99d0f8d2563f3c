"""JSON-document catalog store.

The whole catalog (inventory, categories, daily sales, activity log) lives in one JSON
document that is rewritten atomically on every committed change. With
``path=None`` the store is memory-only, which is what the tests use.

Writes are serialized by a re-entrant lock. ``batch()`` holds the lock for
its whole block, writes the document once at the end, notifies listeners
once, and restores the previous state if the block raises.
"""

from __future__ import annotations

import json
import os
import threading
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import fields, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tindahan.catalog.sales import newest_first
from tindahan.domain.catalog import CatalogListener
from tindahan.domain.errors import (
    DuplicateCategoryError,
    DuplicateItemError,
    InvalidRecordError,
    RecordNotFoundError,
)
from tindahan.domain.inventory import DEFAULT_CATEGORY, ActivityEntry, Category, InventoryDraft, InventoryRecord
from tindahan.domain.sales import DailySales, DailySalesDraft
from tindahan.runtime.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_VERSION = 1
ITEM_FIELDS = {"item_name", "price", "stock", "category"}
CATEGORY_FIELDS = {"name", "description"}


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def _new_id() -> str:
    return uuid.uuid4().hex


def _name_key(name: str) -> str:
    return name.strip().lower()


def _draft_fields(draft: DailySalesDraft) -> dict[str, Any]:
    return {f.name: getattr(draft, f.name) for f in fields(draft)}


class JsonCatalogStore:
    """Catalog persisted as a single JSON document (or kept in memory when ``path`` is None)."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._lock = threading.RLock()
        self._items: dict[str, InventoryRecord] = {}
        self._categories: dict[str, Category] = {}
        self._sales: dict[str, DailySales] = {}
        self._activity: list[ActivityEntry] = []
        self._listeners: list[CatalogListener] = []
        self._batch_depth = 0
        self._dirty = False
        if path is not None and path.exists():
            self._load(path)

    # --- persistence ---
    def _load(self, path: Path) -> None:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
        for raw in document.get("inventory", []):
            record = InventoryRecord.from_dict(raw)
            self._items[record.id] = record
        for raw in document.get("categories", []):
            category = Category.from_dict(raw)
            self._categories[category.id] = category
        for raw in document.get("sales", []):
            sales_record = DailySales.from_dict(raw)
            self._sales[sales_record.id] = sales_record
        self._activity = [ActivityEntry.from_dict(raw) for raw in document.get("activity", [])]
        logger.debug(
            "Loaded %d items, %d categories, %d sales records from %s",
            len(self._items),
            len(self._categories),
            len(self._sales),
            path,
        )

    def _document(self) -> dict[str, Any]:
        return {
            "version": DOCUMENT_VERSION,
            "inventory": [record.to_dict() for record in self._items.values()],
            "categories": [category.to_dict() for category in self._categories.values()],
            "sales": [record.to_dict() for record in self._sales.values()],
            "activity": [entry.to_dict() for entry in self._activity],
        }

    def _persist(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._document(), f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, self.path)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Catalog change listener %r failed", callback)

    def _commit(self) -> None:
        if self._batch_depth:
            self._dirty = True
            return
        self._persist()
        self._notify()

    @contextmanager
    def batch(self) -> Iterator[None]:
        with self._lock:
            outermost = self._batch_depth == 0
            if outermost:
                saved = (dict(self._items), dict(self._categories), dict(self._sales), list(self._activity))
            self._batch_depth += 1
            try:
                yield
            except BaseException:
                self._batch_depth -= 1
                if outermost:
                    self._items, self._categories, self._sales, self._activity = saved
                    self._dirty = False
                raise
            self._batch_depth -= 1
            if outermost and self._dirty:
                self._dirty = False
                self._persist()
                self._notify()

    def on_catalog_change(self, callback: CatalogListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    # --- inventory ---
    def list_inventory(self) -> list[InventoryRecord]:
        with self._lock:
            return list(self._items.values())

    def get_inventory_item(self, item_id: str) -> InventoryRecord:
        with self._lock:
            try:
                return self._items[item_id]
            except KeyError:
                raise RecordNotFoundError("Inventory item", item_id) from None

    def _check_item_name(self, item_name: str, exclude_id: str | None = None) -> str:
        name = item_name.strip()
        if not name:
            raise InvalidRecordError("Item name is required")
        key = _name_key(name)
        for record in self._items.values():
            if record.id != exclude_id and _name_key(record.item_name) == key:
                raise DuplicateItemError(name)
        return name

    @staticmethod
    def _check_stock(stock: int) -> int:
        if stock < 0:
            raise InvalidRecordError(f"Stock cannot be negative (got {stock})")
        return stock

    def create_inventory_item(self, draft: InventoryDraft) -> InventoryRecord:
        with self._lock:
            now = _now()
            record = InventoryRecord(
                id=_new_id(),
                item_name=self._check_item_name(draft.item_name),
                price=draft.price,
                stock=self._check_stock(draft.stock),
                category=draft.category.strip() or DEFAULT_CATEGORY,
                created_at=now,
                updated_at=now,
            )
            self._items[record.id] = record
            self._commit()
            return record

    def update_inventory_item(self, item_id: str, **changes: Any) -> InventoryRecord:
        unknown = set(changes) - ITEM_FIELDS
        if unknown:
            raise TypeError(f"Unknown inventory fields: {', '.join(sorted(unknown))}")
        with self._lock:
            current = self.get_inventory_item(item_id)
            if "item_name" in changes:
                changes["item_name"] = self._check_item_name(changes["item_name"], exclude_id=item_id)
            if "stock" in changes:
                changes["stock"] = self._check_stock(int(changes["stock"]))
            if "category" in changes:
                changes["category"] = str(changes["category"]).strip() or DEFAULT_CATEGORY
            record = replace(current, **changes, updated_at=_now())
            self._items[item_id] = record
            self._commit()
            return record

    def delete_inventory_item(self, item_id: str) -> None:
        with self._lock:
            if item_id not in self._items:
                raise RecordNotFoundError("Inventory item", item_id)
            del self._items[item_id]
            self._commit()

    def clear_inventory(self) -> int:
        with self._lock:
            count = len(self._items)
            self._items.clear()
            self._commit()
            return count

    # --- categories ---
    def list_categories(self) -> list[Category]:
        with self._lock:
            return sorted(self._categories.values(), key=lambda category: category.name.lower())

    def get_category(self, category_id: str) -> Category:
        with self._lock:
            try:
                return self._categories[category_id]
            except KeyError:
                raise RecordNotFoundError("Category", category_id) from None

    def _check_category_name(self, name: str, exclude_id: str | None = None) -> str:
        cleaned = name.strip()
        if not cleaned:
            raise InvalidRecordError("Category name is required")
        for category in self._categories.values():
            if category.id != exclude_id and category.name == cleaned:
                raise DuplicateCategoryError(cleaned)
        return cleaned

    def create_category(self, name: str, description: str = "") -> Category:
        with self._lock:
            category = Category(
                id=_new_id(),
                name=self._check_category_name(name),
                description=description.strip(),
                created_at=_now(),
            )
            self._categories[category.id] = category
            self._commit()
            return category

    def update_category(self, category_id: str, **changes: Any) -> Category:
        unknown = set(changes) - CATEGORY_FIELDS
        if unknown:
            raise TypeError(f"Unknown category fields: {', '.join(sorted(unknown))}")
        with self._lock:
            current = self.get_category(category_id)
            if "name" in changes:
                changes["name"] = self._check_category_name(changes["name"], exclude_id=category_id)
            if "description" in changes:
                changes["description"] = str(changes["description"] or "").strip()
            category = replace(current, **changes)
            self._categories[category_id] = category
            self._commit()
            return category

    def delete_category(self, category_id: str) -> None:
        with self._lock:
            if category_id not in self._categories:
                raise RecordNotFoundError("Category", category_id)
            del self._categories[category_id]
            self._commit()

    # --- daily sales ---
    def list_sales(self) -> list[DailySales]:
        """Newest date first."""
        with self._lock:
            return newest_first(self._sales.values())

    def get_sales_record(self, record_id: str) -> DailySales:
        with self._lock:
            try:
                return self._sales[record_id]
            except KeyError:
                raise RecordNotFoundError("Sales record", record_id) from None

    def create_sales_record(self, draft: DailySalesDraft) -> DailySales:
        with self._lock:
            now = _now()
            record = DailySales(id=_new_id(), **_draft_fields(draft), created_at=now, updated_at=now)
            self._sales[record.id] = record
            self._commit()
            return record

    def update_sales_record(self, record_id: str, draft: DailySalesDraft) -> DailySales:
        with self._lock:
            current = self.get_sales_record(record_id)
            record = replace(current, **_draft_fields(draft), updated_at=_now())
            self._sales[record_id] = record
            self._commit()
            return record

    def delete_sales_record(self, record_id: str) -> None:
        with self._lock:
            if record_id not in self._sales:
                raise RecordNotFoundError("Sales record", record_id)
            del self._sales[record_id]
            self._commit()

    # --- activity ---
    def log_activity(self, action: str, details: str, user_id: str | None = None) -> ActivityEntry:
        with self._lock:
            entry = ActivityEntry(id=_new_id(), action=action, details=details, user_id=user_id, timestamp=_now())
            self._activity.append(entry)
            self._commit()
            return entry

    def list_activity(self, limit: int | None = None) -> list[ActivityEntry]:
        """Newest first."""
        with self._lock:
            entries = list(reversed(self._activity))
        return entries[:limit] if limit is not None else entries


def open_catalog_store(path: Path | None = None) -> JsonCatalogStore:
    """Open the project's catalog document (``data/catalog.json`` under the project root)."""
    from tindahan.runtime.paths import get_paths

    return JsonCatalogStore(path or get_paths().catalog_file)
