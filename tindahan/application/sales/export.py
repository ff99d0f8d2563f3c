"""Daily sales export workflow."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from tindahan.catalog.sales import filter_sales, sales_export_rows
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.sales import SALES_EXPORT
from tindahan.runtime.spreadsheet_io import write_xlsx_bytes


@dataclass(frozen=True)
class SalesExport:
    filename: str
    content: bytes
    rows: list[list[Any]]
    record_count: int


def run_sales_export(
    store: CatalogStore,
    month: str | None = None,
    user_id: str | None = None,
    today: date | None = None,
) -> SalesExport:
    """Write the daily sales ledger (optionally one month of it) to an .xlsx workbook."""
    records = filter_sales(store.list_sales(), month)
    rows = sales_export_rows(records)
    content = write_xlsx_bytes(rows, sheet_title="Daily Sales", bold_first_row=True)
    filename = f"daily-sales-{month or 'all'}-{(today or date.today()).isoformat()}.xlsx"
    store.log_activity(SALES_EXPORT, f"Exported {len(records)} sales records to Excel file", user_id)
    return SalesExport(filename=filename, content=content, rows=rows, record_count=len(records))
