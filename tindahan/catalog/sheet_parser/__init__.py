"""Spreadsheet ingestion: raw cell rows in, inventory drafts out.

Two layouts are tried in order. The sectioned layout (category rows above
``[name, price]`` rows) is preferred; the columnar layout (``[category,
name, price]`` per row) is only used when the sectioned pass finds nothing,
so the two are never mixed within one file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from tindahan.catalog.config import SheetRules
from tindahan.domain.errors import SpreadsheetFormatError
from tindahan.domain.inventory import InventoryDraft

from .columnar_parser import parse_columnar_rows
from .common import Row, SkippedRow
from .sectioned_parser import parse_sectioned_rows
from .upload_parser import UploadSheet, parse_upload_rows

logger = logging.getLogger(__name__)

SheetStrategy = Literal["sectioned", "columnar", "upload"]


@dataclass(frozen=True)
class ParsedSheet:
    drafts: list[InventoryDraft]
    strategy: SheetStrategy
    skipped: list[SkippedRow] = field(default_factory=list)


def parse_inventory_rows(rows: Sequence[Row], rules: SheetRules) -> ParsedSheet:
    """Parse raw rows with the sectioned layout, falling back to the columnar one.

    Raises SpreadsheetFormatError when neither layout yields an item.
    """
    drafts, skipped = parse_sectioned_rows(rows, rules)
    if drafts:
        logger.info("Parsed %d items (sectioned layout, %d rows skipped)", len(drafts), len(skipped))
        return ParsedSheet(drafts=drafts, strategy="sectioned", skipped=skipped)

    logger.info("Sectioned layout found no items; trying category-per-row layout")
    drafts, skipped = parse_columnar_rows(rows, rules)
    if drafts:
        logger.info("Parsed %d items (columnar layout, %d rows skipped)", len(drafts), len(skipped))
        return ParsedSheet(drafts=drafts, strategy="columnar", skipped=skipped)

    raise SpreadsheetFormatError("Could not detect file format")


def parse_upload_sheet(rows: Sequence[Row], rules: SheetRules) -> ParsedSheet:
    """Parse the tabular upload layout. Raises SpreadsheetFormatError when it yields no items."""
    sheet = parse_upload_rows(rows, rules)
    if not sheet.drafts:
        raise SpreadsheetFormatError("Could not detect file format")
    return ParsedSheet(drafts=sheet.drafts, strategy="upload", skipped=sheet.skipped)


def missing_categories(drafts: Iterable[InventoryDraft], existing: Iterable[str]) -> list[str]:
    """Categories used by drafts but absent from the registry, in first-seen order."""
    known = set(existing)
    missing: list[str] = []
    for draft in drafts:
        if draft.category not in known:
            known.add(draft.category)
            missing.append(draft.category)
    return missing


__all__ = [
    "ParsedSheet",
    "Row",
    "SheetStrategy",
    "SkippedRow",
    "UploadSheet",
    "missing_categories",
    "parse_columnar_rows",
    "parse_inventory_rows",
    "parse_sectioned_rows",
    "parse_upload_rows",
    "parse_upload_sheet",
]
