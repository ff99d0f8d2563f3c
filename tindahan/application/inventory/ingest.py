"""Spreadsheet import workflow orchestration."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Literal

from tindahan.catalog.config import CatalogRules
from tindahan.catalog.sheet_parser import (
    ParsedSheet,
    Row,
    SheetStrategy,
    SkippedRow,
    missing_categories,
    parse_inventory_rows,
    parse_upload_sheet,
)
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import DuplicateItemError, SpreadsheetFormatError
from tindahan.domain.inventory import INVENTORY_UPLOAD, InventoryDraft, InventoryRecord
from tindahan.runtime import get_logger, load_catalog_rules
from tindahan.runtime.spreadsheet_io import read_spreadsheet_rows

logger = get_logger(__name__)

AUTO_CREATED_DESCRIPTION = "Auto-created from spreadsheet upload"

ImportLayout = Literal["sectioned", "upload"]
ImportStatus = Literal["imported", "nothing_new", "format_error"]


@dataclass(frozen=True)
class SpreadsheetImportRequest:
    """Inputs for running the spreadsheet import workflow."""

    rows: Sequence[Row]
    layout: ImportLayout = "sectioned"
    source_name: str = "spreadsheet"
    user_id: str | None = None


@dataclass(frozen=True)
class SpreadsheetImportResult:
    """Outcome from the spreadsheet import workflow."""

    status: ImportStatus
    created: list[InventoryRecord] = field(default_factory=list)
    duplicates_skipped: int = 0
    rows_skipped: list[SkippedRow] = field(default_factory=list)
    categories_created: list[str] = field(default_factory=list)
    strategy: SheetStrategy | None = None
    error: str | None = None

    @property
    def summary(self) -> str:
        if self.status == "format_error":
            return self.error or "Could not detect file format"
        parts = [f"Imported {len(self.created)} item(s)"]
        if self.duplicates_skipped:
            parts.append(f"{self.duplicates_skipped} duplicate(s) skipped")
        if self.rows_skipped:
            parts.append(f"{len(self.rows_skipped)} row(s) without a usable price or name")
        if self.categories_created:
            parts.append(f"{len(self.categories_created)} new categor{'y' if len(self.categories_created) == 1 else 'ies'}")
        return ", ".join(parts)


def _parse(request: SpreadsheetImportRequest, rules: CatalogRules) -> ParsedSheet:
    if request.layout == "upload":
        return parse_upload_sheet(request.rows, rules.sheet)
    return parse_inventory_rows(request.rows, rules.sheet)


def _align_categories(drafts: list[InventoryDraft], registered: Sequence[str]) -> list[InventoryDraft]:
    """Reuse the registered spelling of a category that differs only by case (``RICE`` -> ``Rice``)."""
    by_lower = {name.lower(): name for name in registered}
    aligned: list[InventoryDraft] = []
    for draft in drafts:
        known = by_lower.get(draft.category.lower())
        aligned.append(replace(draft, category=known) if known and known != draft.category else draft)
    return aligned


def run_spreadsheet_import(
    store: CatalogStore,
    request: SpreadsheetImportRequest,
    rules: CatalogRules | None = None,
) -> SpreadsheetImportResult:
    """Parse rows, auto-create missing categories, then insert items one by one.

    Duplicate names (against the catalog and earlier rows of the same file)
    are counted and skipped.
    """
    rules = rules or load_catalog_rules()
    try:
        parsed = _parse(request, rules)
    except SpreadsheetFormatError as exc:
        logger.warning("Import of %s failed: %s", request.source_name, exc)
        return SpreadsheetImportResult(status="format_error", error=str(exc))

    registered = [category.name for category in store.list_categories()]
    drafts = _align_categories(parsed.drafts, registered)

    created: list[InventoryRecord] = []
    duplicates = 0
    with store.batch():
        new_categories = missing_categories(drafts, registered)
        for name in new_categories:
            store.create_category(name, AUTO_CREATED_DESCRIPTION)

        seen = {item.item_name.strip().lower() for item in store.list_inventory()}
        for draft in drafts:
            key = draft.item_name.strip().lower()
            if key in seen:
                duplicates += 1
                logger.debug("Skipping duplicate item %r", draft.item_name)
                continue
            try:
                created.append(store.create_inventory_item(draft))
            except DuplicateItemError:
                duplicates += 1
                continue
            seen.add(key)

        store.log_activity(
            INVENTORY_UPLOAD,
            f"Uploaded {len(created)} items from {request.source_name} "
            f"({duplicates} duplicates skipped, {parsed.strategy} layout)",
            request.user_id,
        )

    result = SpreadsheetImportResult(
        status="imported" if created else "nothing_new",
        created=created,
        duplicates_skipped=duplicates,
        rows_skipped=parsed.skipped,
        categories_created=new_categories,
        strategy=parsed.strategy,
    )
    logger.info("Import of %s: %s", request.source_name, result.summary)
    return result


def run_spreadsheet_file_import(
    store: CatalogStore,
    source: Path | bytes,
    filename: str | None = None,
    layout: ImportLayout = "sectioned",
    user_id: str | None = None,
    rules: CatalogRules | None = None,
) -> SpreadsheetImportResult:
    """Read a workbook or CSV file and run the import workflow on its rows."""
    source_name = filename or (source.name if isinstance(source, Path) else "upload")
    try:
        rows = read_spreadsheet_rows(source, source_name)
    except SpreadsheetFormatError as exc:
        return SpreadsheetImportResult(status="format_error", error=str(exc))
    return run_spreadsheet_import(
        store,
        SpreadsheetImportRequest(rows=rows, layout=layout, source_name=source_name, user_id=user_id),
        rules,
    )
