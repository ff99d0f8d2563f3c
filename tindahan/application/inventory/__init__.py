"""Inventory and category workflows."""

from tindahan.application.inventory.categories import (
    CategoryUpdateResult,
    create_category,
    delete_category,
    seed_default_categories,
    update_category,
)
from tindahan.application.inventory.editing import (
    ItemForm,
    add_inventory_item,
    build_edit_form,
    clear_inventory,
    delete_inventory_item,
    form_to_draft,
    update_inventory_item,
)
from tindahan.application.inventory.export import InventoryExport, run_inventory_export
from tindahan.application.inventory.ingest import (
    AUTO_CREATED_DESCRIPTION,
    SpreadsheetImportRequest,
    SpreadsheetImportResult,
    run_spreadsheet_file_import,
    run_spreadsheet_import,
)
from tindahan.application.inventory.listing import (
    InventoryStats,
    PublicItem,
    availability_label,
    inventory_stats,
    list_inventory,
    low_stock_items,
    public_listing,
    search_matches,
)
from tindahan.application.inventory.price_check import run_price_check

__all__ = [
    "AUTO_CREATED_DESCRIPTION",
    "CategoryUpdateResult",
    "InventoryExport",
    "InventoryStats",
    "ItemForm",
    "PublicItem",
    "SpreadsheetImportRequest",
    "SpreadsheetImportResult",
    "add_inventory_item",
    "availability_label",
    "build_edit_form",
    "clear_inventory",
    "create_category",
    "delete_category",
    "delete_inventory_item",
    "form_to_draft",
    "inventory_stats",
    "list_inventory",
    "low_stock_items",
    "public_listing",
    "run_inventory_export",
    "run_price_check",
    "run_spreadsheet_file_import",
    "run_spreadsheet_import",
    "search_matches",
    "seed_default_categories",
    "update_category",
    "update_inventory_item",
]
