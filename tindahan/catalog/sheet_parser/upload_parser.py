"""Interactive upload layout: a tabular sheet with (or without) a header row.

Unlike the sectioned layout, this one reads stock and category columns.
Header detection looks at the first few rows for a row naming both an item
column and a price/stock column. Without one, columns are assumed to be
``item name, price, stock, category``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from tindahan.catalog.config import SheetRules
from tindahan.domain.errors import SpreadsheetFormatError
from tindahan.domain.inventory import InventoryDraft

from .common import (
    Row,
    SkippedRow,
    build_draft,
    cell_at,
    cell_text,
    describe_price_problem,
    has_currency_symbol,
    is_blank_row,
    parse_price_cell,
    row_texts,
)

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 10
NAME_WORDS = ("item", "product", "name")
VALUE_WORDS = ("price", "stock", "quantity")
MIN_HEADING_LENGTH = 4


@dataclass(frozen=True)
class UploadColumns:
    item_name: int
    price: int
    stock: int
    category: int | None = None


# No-header files are read in this column order.
POSITIONAL_COLUMNS = UploadColumns(item_name=0, price=1, stock=2, category=3)


@dataclass(frozen=True)
class UploadSheet:
    drafts: list[InventoryDraft]
    skipped: list[SkippedRow]
    header_row: int | None  # 0-based index, None when columns were assumed


def find_header_row(rows: Sequence[Row], scan_rows: int = HEADER_SCAN_ROWS) -> int | None:
    for index, row in enumerate(rows[:scan_rows]):
        joined = " ".join(row_texts(row)).lower()
        if any(word in joined for word in NAME_WORDS) and any(word in joined for word in VALUE_WORDS):
            return index
    return None


def _first_column(headers: Sequence[str], *needles: str) -> int | None:
    for index, header in enumerate(headers):
        if any(needle in header for needle in needles):
            return index
    return None


def resolve_columns(header: Row) -> UploadColumns:
    """Map header cells to column indexes; item, price and stock columns are required."""
    headers = [text.lower() for text in row_texts(header)]
    item_index = _first_column(headers, "item", "product")
    if item_index is None:
        item_index = _first_column(headers, "name")
    price_index = _first_column(headers, "price")
    stock_index = _first_column(headers, "stock", "quantity")

    if item_index is None:
        raise SpreadsheetFormatError('Could not find an "Item Name" column; check the header row')
    if price_index is None:
        raise SpreadsheetFormatError('Could not find a "Price" column; check the header row')
    if stock_index is None:
        raise SpreadsheetFormatError('Could not find a "Stock" column; check the header row')
    return UploadColumns(
        item_name=item_index,
        price=price_index,
        stock=stock_index,
        category=_first_column(headers, "category"),
    )


def parse_stock(raw: object) -> int:
    """Whole-unit stock count; blanks, text and negatives count as zero."""
    text = cell_text(raw)
    if not text:
        return 0
    try:
        value = int(Decimal(text.replace(",", "")))
    except (InvalidOperation, ValueError):
        return 0
    return max(value, 0)


def _category_heading(texts: Sequence[str], rules: SheetRules) -> str | None:
    """Looser heading check: any lone cell of 4+ characters without a currency sign."""
    if not texts or not texts[0] or any(texts[1:]):
        return None
    label = texts[0]
    if len(label) < MIN_HEADING_LENGTH or has_currency_symbol(label, rules):
        return None
    return label


def parse_upload_rows(rows: Sequence[Row], rules: SheetRules) -> UploadSheet:
    """Parse a tabular upload. Raises SpreadsheetFormatError when required columns are missing."""
    header_row = find_header_row(rows)
    if header_row is None:
        if not any(len([t for t in row_texts(row) if t]) >= 2 for row in rows):
            raise SpreadsheetFormatError("Could not detect file format; expected item and price columns")
        logger.info("No header row found; assuming columns: item name, price, stock, category")
        columns = POSITIONAL_COLUMNS
        start = 0
    else:
        columns = resolve_columns(rows[header_row])
        start = header_row + 1

    drafts: list[InventoryDraft] = []
    skipped: list[SkippedRow] = []
    current_category = rules.default_category

    for index in range(start, len(rows)):
        row = rows[index]
        row_number = index + 1
        texts = row_texts(row)
        if is_blank_row(texts):
            continue

        heading = _category_heading(texts, rules)
        if heading is not None:
            current_category = heading
            logger.debug("Row %d: category %s", row_number, current_category)
            continue

        name = cell_text(cell_at(row, columns.item_name))
        if not name:
            skipped.append(SkippedRow(row_number, "missing item name", " | ".join(texts)))
            continue

        price_cell = cell_at(row, columns.price)
        price = parse_price_cell(price_cell, rules)
        if price is None:
            reason = describe_price_problem(price_cell)
            logger.debug("Row %d: skipped %r (%s)", row_number, name, reason)
            skipped.append(SkippedRow(row_number, reason, name))
            continue

        category = current_category
        if columns.category is not None:
            category = cell_text(cell_at(row, columns.category)) or current_category

        drafts.append(build_draft(name, price, parse_stock(cell_at(row, columns.stock)), category))

    return UploadSheet(drafts=drafts, skipped=skipped, header_row=header_row)
