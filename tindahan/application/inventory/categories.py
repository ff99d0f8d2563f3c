"""Category registry workflows: create, rename with cascade, guarded delete."""

from __future__ import annotations

from dataclasses import dataclass

from tindahan.catalog.config import CatalogRules
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import CategoryInUseError
from tindahan.domain.inventory import (
    CATEGORY_CASCADE_UPDATE,
    CATEGORY_CREATE,
    CATEGORY_DELETE,
    CATEGORY_UPDATE,
    Category,
)
from tindahan.runtime import get_logger, load_catalog_rules

logger = get_logger(__name__)

DEFAULT_CATEGORY_DESCRIPTION = "Default category"


@dataclass(frozen=True)
class CategoryUpdateResult:
    category: Category
    previous_name: str
    items_updated: int = 0


def seed_default_categories(store: CatalogStore, rules: CatalogRules | None = None) -> list[Category]:
    """Create any configured default categories that are not registered yet."""
    rules = rules or load_catalog_rules()
    registered = {category.name for category in store.list_categories()}
    created: list[Category] = []
    with store.batch():
        for name in rules.store.default_categories:
            if name not in registered:
                created.append(store.create_category(name, DEFAULT_CATEGORY_DESCRIPTION))
                registered.add(name)
    if created:
        logger.info("Seeded %d default categories", len(created))
    return created


def create_category(store: CatalogStore, name: str, description: str = "", user_id: str | None = None) -> Category:
    with store.batch():
        category = store.create_category(name, description)
        store.log_activity(CATEGORY_CREATE, f'Created category "{category.name}"', user_id)
    return category


def update_category(
    store: CatalogStore,
    category_id: str,
    name: str | None = None,
    description: str | None = None,
    user_id: str | None = None,
) -> CategoryUpdateResult:
    """Update a category; a rename rewrites every item that used the old name.

    The rename, the item rewrites and their log entries are committed as one
    batch: a single cascade entry covers all rewritten items.
    """
    with store.batch():
        current = store.get_category(category_id)
        changes: dict[str, str] = {}
        if name is not None and name.strip() != current.name:
            changes["name"] = name
        if description is not None:
            changes["description"] = description
        if not changes:
            return CategoryUpdateResult(category=current, previous_name=current.name)

        updated = store.update_category(category_id, **changes)

        items_updated = 0
        if updated.name != current.name:
            for item in store.list_inventory():
                if item.category == current.name:
                    store.update_inventory_item(item.id, category=updated.name)
                    items_updated += 1
            if items_updated:
                store.log_activity(
                    CATEGORY_CASCADE_UPDATE,
                    f'Updated {items_updated} inventory items from category "{current.name}" to "{updated.name}"',
                    user_id,
                )
            logger.info("Renamed category %r to %r (%d items)", current.name, updated.name, items_updated)

        store.log_activity(CATEGORY_UPDATE, f'Updated category "{updated.name}"', user_id)
    return CategoryUpdateResult(category=updated, previous_name=current.name, items_updated=items_updated)


def delete_category(store: CatalogStore, category_id: str, user_id: str | None = None) -> Category:
    """Delete a category. Raises CategoryInUseError while any item still references it."""
    with store.batch():
        category = store.get_category(category_id)
        in_use = sum(1 for item in store.list_inventory() if item.category == category.name)
        if in_use:
            raise CategoryInUseError(category.name, in_use)
        store.delete_category(category_id)
        store.log_activity(CATEGORY_DELETE, f'Deleted category "{category.name}"', user_id)
    return category
