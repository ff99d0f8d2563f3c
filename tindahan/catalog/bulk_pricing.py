"""Bulk pricing terms: free-text parsing and the ``"<name> (<qty> for <price>)"`` name suffix.

Bulk terms show up in three places: typed into a price cell ("4 for 5
pesos"), composed into an item name by the add/edit form ("V Fresh (4 for
5)"), and read back out of that name when quoting or editing. All money is
``Decimal`` rounded half-up to centavos.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from tindahan.domain.inventory import BulkNameParts, BulkPricingInfo, InventoryRecord

CENTS = Decimal("0.01")

_AMOUNT = r"[₱$]?\s*(?P<price>\d+(?:\.\d+)?)"

# Tried in order; the first match wins.
BULK_PATTERNS = [
    # "10 candy for 5", "3 pcs = ₱20", "12 pieces for 50.00"
    re.compile(
        r"(?<![\d.])(?P<qty>\d+)\s*(?:candy|candies|pcs|pc|pieces)\s*(?:for|=)\s*" + _AMOUNT,
        re.IGNORECASE,
    ),
    # "4 for 5 pesos", "3=20", "2 for $1.50"
    re.compile(r"(?<![\d.])(?P<qty>\d+)\s*(?:for|=)\s*" + _AMOUNT, re.IGNORECASE),
]

# A price cell holding nothing but bulk terms, e.g. "4 for 5 pesos" or "3 pcs = ₱20".
BULK_PRICE_CELL = re.compile(
    r"^\s*(?P<qty>\d+)\s*(?:candy|candies|pcs|pc|pieces)?\s*(?:for|=)\s*"
    + _AMOUNT
    + r"\s*(?:pesos?|php)?\s*$",
    re.IGNORECASE,
)

# Anchored to the exact suffix shape produced by compose_bulk_item().
BULK_NAME_SUFFIX = re.compile(
    r"^(?P<base>.*?)\s*\(\s*(?P<qty>\d+)\s+for\s+(?P<price>\d+(?:\.\d+)?)\s*\)\s*$",
    re.IGNORECASE,
)


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Render an amount with exactly two decimals, e.g. ``"18.00"``."""
    return str(round_money(value))


def format_amount(value: Decimal) -> str:
    """Render an amount without trailing zeros, e.g. ``5``, ``5.5``, ``12.75``."""
    normalized = value.normalize()
    return format(normalized, "f")


def parse_money(raw: object) -> Decimal | None:
    """Parse a plain numeric amount; returns None for blanks and non-numeric text."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_bulk_pricing(text: str | None, fallback_price: object = None) -> BulkPricingInfo:
    """Extract bulk terms from free text.

    Returns a non-bulk result carrying ``fallback_price`` as the unit price
    when no pattern matches or the match has a zero quantity or price.
    """
    fallback = parse_money(fallback_price)
    if text:
        for pattern in BULK_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            quantity = int(match.group("qty"))
            bulk_price = Decimal(match.group("price"))
            if quantity <= 0 or bulk_price <= 0:
                break
            return BulkPricingInfo(
                is_bulk=True,
                unit_price=round_money(bulk_price / quantity),
                bulk_quantity=quantity,
                bulk_price=bulk_price,
            )
    return BulkPricingInfo(
        is_bulk=False,
        unit_price=round_money(fallback) if fallback is not None else None,
    )


def parse_bulk_price_cell(text: str | None) -> BulkPricingInfo:
    """Bulk terms from a spreadsheet price cell.

    Unlike parse_bulk_pricing() the terms must fill the whole cell, so item
    names such as ``"Max Candy (4 for 5)"`` in a price column are not read as
    prices.
    """
    match = BULK_PRICE_CELL.match(text or "")
    if not match:
        return BulkPricingInfo(is_bulk=False, unit_price=None)
    quantity = int(match.group("qty"))
    bulk_price = Decimal(match.group("price"))
    if quantity <= 0 or bulk_price <= 0:
        return BulkPricingInfo(is_bulk=False, unit_price=None)
    return BulkPricingInfo(
        is_bulk=True,
        unit_price=round_money(bulk_price / quantity),
        bulk_quantity=quantity,
        bulk_price=bulk_price,
    )


def extract_bulk_suffix(item_name: str) -> BulkNameParts | None:
    """Split ``"V Fresh (4 for 5)"`` into its base name, quantity and bulk price."""
    match = BULK_NAME_SUFFIX.match(item_name or "")
    if not match:
        return None
    base_name = match.group("base").strip()
    quantity = int(match.group("qty"))
    if not base_name or quantity <= 0:
        return None
    return BulkNameParts(
        base_name=base_name,
        quantity=quantity,
        bulk_price=Decimal(match.group("price")),
    )


def compose_bulk_item(base_name: str, quantity: int, bulk_price: Decimal) -> tuple[str, str]:
    """Build the display name and stored unit price for bulk terms entered in a form.

    Returns ``(display_name, unit_price)`` such as ``("V Fresh (4 for 5)", "1.25")``.
    """
    base = base_name.strip()
    if not base:
        raise ValueError("bulk item needs a base name")
    if quantity <= 0:
        raise ValueError(f"bulk quantity must be positive, got {quantity}")
    if bulk_price <= 0:
        raise ValueError(f"bulk price must be positive, got {bulk_price}")
    display_name = f"{base} ({quantity} for {format_amount(bulk_price)})"
    return display_name, format_money(bulk_price / quantity)


def resolve_item_pricing(record: InventoryRecord) -> BulkPricingInfo:
    """Pricing terms for a stored item: name suffix first, then price text, then the plain price."""
    from_name = parse_bulk_pricing(record.item_name, record.price)
    if from_name.is_bulk:
        return from_name
    return parse_bulk_pricing(record.price, record.price)
