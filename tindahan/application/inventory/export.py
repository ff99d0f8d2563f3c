"""Spreadsheet export workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from tindahan.catalog.export import ExportLayout, export_rows
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.inventory import INVENTORY_EXPORT
from tindahan.runtime.spreadsheet_io import write_xlsx_bytes


@dataclass(frozen=True)
class InventoryExport:
    filename: str
    content: bytes
    rows: list[list[Any]]
    item_count: int


def run_inventory_export(
    store: CatalogStore,
    layout: ExportLayout = "flat",
    user_id: str | None = None,
    today: date | None = None,
) -> InventoryExport:
    """Build the export workbook and record the export in the activity log."""
    items = store.list_inventory()
    rows = export_rows(items, layout)
    content = write_xlsx_bytes(rows, bold_first_row=layout == "flat")
    filename = f"inventory-export-{(today or date.today()).isoformat()}.xlsx"
    store.log_activity(INVENTORY_EXPORT, f"Exported {len(items)} items to Excel file ({layout} layout)", user_id)
    return InventoryExport(filename=filename, content=content, rows=rows, item_count=len(items))
