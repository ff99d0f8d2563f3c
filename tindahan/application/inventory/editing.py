"""Add/edit/delete workflows for single inventory items.

The item form accepts either a plain unit price or bulk terms (quantity
and total price). Bulk terms are stored in the item name, e.g. ``"V Fresh
(4 for 5)"`` with a unit price of ``1.25``; the edit form reads them back.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from tindahan.catalog.bulk_pricing import (
    compose_bulk_item,
    extract_bulk_suffix,
    format_amount,
    format_money,
    parse_money,
)
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import InvalidRecordError
from tindahan.domain.inventory import (
    DEFAULT_CATEGORY,
    INVENTORY_ADD,
    INVENTORY_CLEAR,
    INVENTORY_DELETE,
    INVENTORY_UPDATE,
    InventoryDraft,
    InventoryRecord,
)
from tindahan.runtime import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ItemForm:
    """Values of the add/edit item form."""

    item_name: str
    price: str = ""
    stock: int = 0
    category: str = DEFAULT_CATEGORY
    bulk_quantity: int | None = None
    bulk_price: str | None = None

    @property
    def is_bulk(self) -> bool:
        return self.bulk_quantity is not None or bool(self.bulk_price and self.bulk_price.strip())


def _money_field(raw: str | None, label: str) -> Decimal:
    value = parse_money((raw or "").replace("₱", "").replace(",", "").strip())
    if value is None:
        raise InvalidRecordError(f"{label} must be a number (got {raw!r})")
    return value


def form_to_draft(form: ItemForm, known_categories: Iterable[str]) -> InventoryDraft:
    """Validate a form into a draft. Unknown or blank categories become ``General``."""
    name = form.item_name.strip()
    if not name:
        raise InvalidRecordError("Item name is required")
    if form.stock < 0:
        raise InvalidRecordError(f"Stock cannot be negative (got {form.stock})")

    if form.is_bulk:
        if form.bulk_quantity is None or form.bulk_quantity <= 0:
            raise InvalidRecordError("Bulk quantity must be a positive whole number")
        bulk_price = _money_field(form.bulk_price, "Bulk price")
        if bulk_price <= 0:
            raise InvalidRecordError("Bulk price must be greater than zero")
        existing = extract_bulk_suffix(name)
        base = existing.base_name if existing else name
        name, price = compose_bulk_item(base, form.bulk_quantity, bulk_price)
    else:
        unit_price = _money_field(form.price, "Price")
        if unit_price < 0:
            raise InvalidRecordError("Price cannot be negative")
        price = format_money(unit_price)

    category = form.category.strip()
    if category not in set(known_categories):
        category = DEFAULT_CATEGORY
    return InventoryDraft(item_name=name, price=price, stock=form.stock, category=category)


def build_edit_form(record: InventoryRecord) -> ItemForm:
    """Pre-fill the edit form, splitting a bulk suffix back into quantity and total price."""
    parts = extract_bulk_suffix(record.item_name)
    if parts is None:
        return ItemForm(
            item_name=record.item_name,
            price=record.price,
            stock=record.stock,
            category=record.category,
        )
    return ItemForm(
        item_name=parts.base_name,
        price=record.price,
        stock=record.stock,
        category=record.category,
        bulk_quantity=parts.quantity,
        bulk_price=format_amount(parts.bulk_price),
    )


def _category_names(store: CatalogStore) -> list[str]:
    return [category.name for category in store.list_categories()]


def add_inventory_item(store: CatalogStore, form: ItemForm, user_id: str | None = None) -> InventoryRecord:
    draft = form_to_draft(form, _category_names(store))
    with store.batch():
        record = store.create_inventory_item(draft)
        store.log_activity(INVENTORY_ADD, f'Added item "{record.item_name}"', user_id)
    logger.info("Added %r at %s", record.item_name, record.price)
    return record


def update_inventory_item(
    store: CatalogStore,
    item_id: str,
    form: ItemForm,
    user_id: str | None = None,
) -> InventoryRecord:
    draft = form_to_draft(form, _category_names(store))
    with store.batch():
        record = store.update_inventory_item(
            item_id,
            item_name=draft.item_name,
            price=draft.price,
            stock=draft.stock,
            category=draft.category,
        )
        store.log_activity(INVENTORY_UPDATE, f'Updated item "{record.item_name}"', user_id)
    return record


def delete_inventory_item(store: CatalogStore, item_id: str, user_id: str | None = None) -> InventoryRecord:
    with store.batch():
        record = store.get_inventory_item(item_id)
        store.delete_inventory_item(item_id)
        store.log_activity(INVENTORY_DELETE, f'Deleted item "{record.item_name}"', user_id)
    return record


def clear_inventory(store: CatalogStore, user_id: str | None = None) -> int:
    with store.batch():
        removed = store.clear_inventory()
        store.log_activity(INVENTORY_CLEAR, f"Cleared all inventory items ({removed} removed)", user_id)
    logger.info("Cleared %d inventory items", removed)
    return removed
