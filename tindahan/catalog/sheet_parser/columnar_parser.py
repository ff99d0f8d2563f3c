"""Fallback layout: one ``[category, name, price]`` row per product."""

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
    match_category_marker,
    parse_price_cell,
    row_texts,
)

logger = logging.getLogger(__name__)


def parse_columnar_rows(rows: Sequence[Row], rules: SheetRules) -> tuple[list[InventoryDraft], list[SkippedRow]]:
    """Parse the category-as-column layout.

    A blank category cell keeps the category of the previous row, so
    sheets that only fill the first row of each group still work.
    """
    drafts: list[InventoryDraft] = []
    skipped: list[SkippedRow] = []
    current_category = rules.default_category

    for index, row in enumerate(rows):
        row_number = index + 1
        texts = row_texts(row)
        if is_blank_row(texts):
            continue

        category_text = texts[0]
        name = texts[1] if len(texts) > 1 else ""
        if not name:
            continue
        if is_header_marker(name, rules) or is_header_marker(category_text, rules):
            continue

        if category_text:
            current_category = match_category_marker(category_text, rules) or category_text

        price_cell = cell_at(row, 2)
        price = parse_price_cell(price_cell, rules)
        if price is None:
            reason = describe_price_problem(price_cell)
            logger.debug("Row %d: skipped %r (%s)", row_number, name, reason)
            skipped.append(SkippedRow(row_number, reason, name))
            continue

        drafts.append(build_draft(name, price, rules.default_stock, current_category))

    return drafts, skipped
