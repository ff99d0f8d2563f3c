"""Shared helpers for spreadsheet row parsing."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from tindahan.catalog.bulk_pricing import (
    compose_bulk_item,
    extract_bulk_suffix,
    format_money,
    parse_bulk_price_cell,
    parse_money,
)
from tindahan.catalog.config import SheetRules
from tindahan.domain.inventory import InventoryDraft

Row = Sequence[Any]


@dataclass(frozen=True)
class SkippedRow:
    """Diagnostic for a row that produced no item."""

    row_number: int  # 1-based, as shown in spreadsheet apps
    reason: str
    text: str = ""


@dataclass(frozen=True)
class ParsedPrice:
    unit_price: Decimal
    bulk_quantity: int | None = None
    bulk_price: Decimal | None = None


def cell_text(cell: Any) -> str:
    """Trimmed display text of a raw cell; blanks and NaN become ``""``."""
    if cell is None:
        return ""
    if isinstance(cell, float):
        if math.isnan(cell):
            return ""
        if cell.is_integer():
            return str(int(cell))
    return str(cell).strip()


def row_texts(row: Row | None) -> list[str]:
    if not row:
        return []
    return [cell_text(cell) for cell in row]


def cell_at(row: Row, index: int) -> Any:
    return row[index] if 0 <= index < len(row) else None


def is_blank_row(texts: Sequence[str]) -> bool:
    return not any(texts)


def clean_price_text(raw: Any, rules: SheetRules) -> str:
    """Strip currency symbols and thousands separators from a price cell."""
    text = cell_text(raw)
    for symbol in rules.currency_symbols:
        text = re.sub(re.escape(symbol), "", text, flags=re.IGNORECASE)
    return text.replace(",", "").strip()


def parse_price_cell(raw: Any, rules: SheetRules) -> ParsedPrice | None:
    """Parse a price cell into a positive unit price.

    Plain numbers are used as-is. Bulk text like ``"4 for 5 pesos"`` is
    accepted when ``rules.route_bulk_price_text`` is on and the terms fill
    the whole cell. Anything else (blank, zero, negative, other text)
    yields None.
    """
    value = parse_money(clean_price_text(raw, rules))
    if value is not None:
        return ParsedPrice(unit_price=value) if value > 0 else None

    if not rules.route_bulk_price_text:
        return None
    bulk = parse_bulk_price_cell(cell_text(raw))
    if not bulk.is_bulk or bulk.unit_price is None:
        return None
    return ParsedPrice(
        unit_price=bulk.unit_price,
        bulk_quantity=bulk.bulk_quantity,
        bulk_price=bulk.bulk_price,
    )


def describe_price_problem(raw: Any) -> str:
    text = cell_text(raw)
    if not text:
        return "missing price"
    return f"invalid price {text!r}"


def is_header_marker(text: str, rules: SheetRules) -> bool:
    """True if text is a table-header cell (exact, case-insensitive)."""
    if not text:
        return False
    upper = text.strip().upper()
    return any(upper == marker.upper() for marker in rules.header_markers)


def match_category_marker(text: str, rules: SheetRules) -> str | None:
    """Canonical category name if text contains a known category marker."""
    if not text:
        return None
    upper = text.upper()
    for marker in rules.category_markers:
        if marker.marker.upper() in upper:
            return marker.name
    return None


def match_exact_category(text: str, rules: SheetRules) -> str | None:
    """Canonical category name if text equals a marker or a canonical name (case-insensitive)."""
    upper = text.strip().upper()
    for marker in rules.category_markers:
        if upper in (marker.marker.upper(), marker.name.upper()):
            return marker.name
    return None


def has_currency_symbol(text: str, rules: SheetRules) -> bool:
    upper = text.upper()
    return any(symbol.upper() in upper for symbol in rules.currency_symbols)


def is_standalone_heading(texts: Sequence[str], rules: SheetRules) -> bool:
    """A lone upper-case label such as ``SNACKS`` that no marker knows about."""
    if not texts or not texts[0] or any(texts[1:]):
        return False
    label = texts[0]
    if not any(ch.isalpha() for ch in label) or label != label.upper():
        return False
    if any(ch.isdigit() for ch in label):
        return False
    return not has_currency_symbol(label, rules)


def is_table_heading(texts: Sequence[str], next_texts: Sequence[str], rules: SheetRules) -> bool:
    """A lone label sitting directly above a ``Product - Items`` header row.

    Such a label names its section verbatim, whatever characters it holds.
    """
    if not texts or not texts[0] or any(texts[1:]) or is_header_marker(texts[0], rules):
        return False
    return bool(next_texts) and is_header_marker(next_texts[0], rules)


def build_draft(item_name: str, price: ParsedPrice, stock: int, category: str) -> InventoryDraft:
    """Turn a parsed row into a draft, composing the bulk name suffix when needed."""
    name = item_name.strip()
    unit_price = format_money(price.unit_price)
    if price.bulk_quantity is not None and price.bulk_price is not None and extract_bulk_suffix(name) is None:
        name, unit_price = compose_bulk_item(name, price.bulk_quantity, price.bulk_price)
    return InventoryDraft(item_name=name, price=unit_price, stock=stock, category=category)
