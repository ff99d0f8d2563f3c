"""Primary layout: category rows followed by ``[name, price]`` product rows.

    SNACKS
    Product - Items | Retail Price | Stocks
    Nova            | 18
    V Fresh         | 4 for 5 pesos

A lone label directly above the header row names its section verbatim
(exact marker or canonical names still map to the canonical category), so
exported sheets read back with their categories intact. The layout carries
no stock column, so every item gets the configured default stock.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from tindahan.catalog.config import SheetRules
from tindahan.domain.inventory import InventoryDraft

from .common import (
    Row,
    SkippedRow,
    build_draft,
    cell_at,
    describe_price_problem,
    is_blank_row,
    is_header_marker,
    is_standalone_heading,
    is_table_heading,
    match_category_marker,
    match_exact_category,
    parse_price_cell,
    row_texts,
)

logger = logging.getLogger(__name__)


def parse_sectioned_rows(rows: Sequence[Row], rules: SheetRules) -> tuple[list[InventoryDraft], list[SkippedRow]]:
    """Parse the category-as-own-row layout."""
    drafts: list[InventoryDraft] = []
    skipped: list[SkippedRow] = []
    current_category = rules.default_category

    for index, row in enumerate(rows):
        row_number = index + 1
        texts = row_texts(row)
        if is_blank_row(texts):
            continue

        first = texts[0]
        if not first:
            skipped.append(SkippedRow(row_number, "missing item name", " | ".join(texts)))
            continue

        next_texts = row_texts(rows[index + 1]) if index + 1 < len(rows) else []
        if is_table_heading(texts, next_texts, rules):
            current_category = match_exact_category(first, rules) or first
            logger.debug("Row %d: category %s (table heading)", row_number, current_category)
            continue

        price_cell = cell_at(row, 1)
        price = parse_price_cell(price_cell, rules)

        # "Jasmine Rice | 50" is a product, not the RICE section.
        category = match_category_marker(first, rules) if price is None else None
        if category is not None:
            current_category = category
            logger.debug("Row %d: category %s", row_number, current_category)
            continue

        if is_header_marker(first, rules):
            continue

        if is_standalone_heading(texts, rules):
            current_category = first
            logger.debug("Row %d: category %s (heading)", row_number, current_category)
            continue

        if price is None:
            reason = describe_price_problem(price_cell)
            logger.debug("Row %d: skipped %r (%s)", row_number, first, reason)
            skipped.append(SkippedRow(row_number, reason, first))
            continue

        drafts.append(build_draft(first, price, rules.default_stock, current_category))

    return drafts, skipped
