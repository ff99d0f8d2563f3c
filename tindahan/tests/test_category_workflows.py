from __future__ import annotations

import pytest
from tindahan.application.inventory import (
    create_category,
    delete_category,
    seed_default_categories,
    update_category,
)
from tindahan.catalog.config import CatalogRules
from tindahan.domain.errors import CategoryInUseError, DuplicateCategoryError
from tindahan.domain.inventory import (
    CATEGORY_CASCADE_UPDATE,
    CATEGORY_CREATE,
    CATEGORY_DELETE,
    CATEGORY_UPDATE,
    InventoryDraft,
)
from tindahan.runtime.catalog_store import JsonCatalogStore


def _stock_rice_aisle(store: JsonCatalogStore) -> None:
    for name in ("Jasmine", "Dinorado", "Sinandomeng", "Malagkit", "Red Rice"):
        store.create_inventory_item(InventoryDraft(item_name=name, price="50.00", stock=20, category="Rice"))
    store.create_inventory_item(InventoryDraft(item_name="Nova", price="18.00", stock=20, category="Snacks"))


def test_rename_cascades_to_items_with_one_log_entry(store: JsonCatalogStore) -> None:
    rice = create_category(store, "Rice", user_id="u1")
    _stock_rice_aisle(store)
    calls: list[str] = []
    store.on_catalog_change(lambda: calls.append("changed"))

    result = update_category(store, rice.id, name="Grains", user_id="u1")

    assert result.previous_name == "Rice"
    assert result.category.name == "Grains"
    assert result.items_updated == 5
    categories = {item.item_name: item.category for item in store.list_inventory()}
    assert sorted(name for name, category in categories.items() if category == "Grains") == [
        "Dinorado",
        "Jasmine",
        "Malagkit",
        "Red Rice",
        "Sinandomeng",
    ]
    assert categories["Nova"] == "Snacks"
    actions = [entry.action for entry in store.list_activity()]
    assert actions.count(CATEGORY_CASCADE_UPDATE) == 1
    assert actions[:2] == [CATEGORY_UPDATE, CATEGORY_CASCADE_UPDATE]
    assert calls == ["changed"]


def test_description_change_does_not_touch_items(store: JsonCatalogStore) -> None:
    rice = create_category(store, "Rice")
    _stock_rice_aisle(store)

    result = update_category(store, rice.id, description="Per kilo")

    assert result.items_updated == 0
    assert result.category.description == "Per kilo"
    assert CATEGORY_CASCADE_UPDATE not in [entry.action for entry in store.list_activity()]


def test_rename_to_existing_name_changes_nothing(store: JsonCatalogStore) -> None:
    rice = create_category(store, "Rice")
    create_category(store, "Grains")
    _stock_rice_aisle(store)

    with pytest.raises(DuplicateCategoryError):
        update_category(store, rice.id, name="Grains")

    assert store.get_category(rice.id).name == "Rice"
    assert sum(1 for item in store.list_inventory() if item.category == "Rice") == 5


def test_category_in_use_cannot_be_deleted(store: JsonCatalogStore) -> None:
    rice = create_category(store, "Rice")
    _stock_rice_aisle(store)

    with pytest.raises(CategoryInUseError) as excinfo:
        delete_category(store, rice.id)

    assert excinfo.value.item_count == 5
    assert [category.name for category in store.list_categories()] == ["Rice"]


def test_unused_category_is_deleted_and_logged(store: JsonCatalogStore) -> None:
    spare = create_category(store, "Spare", user_id="u1")

    deleted = delete_category(store, spare.id, user_id="u1")

    assert deleted.name == "Spare"
    assert store.list_categories() == []
    assert [entry.action for entry in store.list_activity()] == [CATEGORY_DELETE, CATEGORY_CREATE]


def test_seeding_default_categories_is_idempotent(store: JsonCatalogStore, rules: CatalogRules) -> None:
    first = seed_default_categories(store, rules)
    second = seed_default_categories(store, rules)

    assert len(first) == len(rules.store.default_categories)
    assert second == []
    assert "Cigarettes" in [category.name for category in store.list_categories()]
