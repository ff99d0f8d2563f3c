"""Relevance search over an inventory snapshot.

Smart mode ranks an item by the best tier its name reaches for the whole
query (exact > prefix > contains, then the same three against the base
name with any ``"(...)"`` annotation removed). Multi-word queries that hit
no tier fall back to requiring every word somewhere in the name, category,
price or stock. Exact mode only accepts a query equal to one whole field.

Ties are always broken by case-insensitive name so results are stable
across calls on the same catalog.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Literal

from tindahan.catalog.config import SearchConfig
from tindahan.domain.inventory import InventoryRecord, MatchType, ScoredMatch

SearchMode = Literal["smart", "exact"]

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_WHITESPACE = re.compile(r"\s+")

SORT_FIELDS = ("itemName", "price", "stock", "category")
_SORT_ALIASES = {"item_name": "itemName", "name": "itemName"}


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip().lower()


def base_name(item_name: str) -> str:
    """``"V Fresh (4 for 5)"`` -> ``"v fresh"``."""
    return normalize_text(_PARENTHETICAL.sub(" ", item_name or ""))


def _fields(item: InventoryRecord) -> tuple[str, str, str, str]:
    return (
        normalize_text(item.item_name),
        normalize_text(item.category),
        str(item.price).strip().lower(),
        str(item.stock),
    )


def _tier_score(item: InventoryRecord, query: str, config: SearchConfig) -> tuple[int, MatchType] | None:
    name = normalize_text(item.item_name)
    if name == query:
        return config.exact_name, "exact_name"
    if name.startswith(query):
        return config.name_prefix, "name_prefix"
    if query in name:
        return config.name_contains, "name_contains"

    base = base_name(item.item_name)
    if base == query:
        return config.base_exact, "base_exact"
    if base.startswith(query):
        return config.base_prefix, "base_prefix"
    if query in base:
        return config.base_contains, "base_contains"
    return None


def _multi_term_score(item: InventoryRecord, terms: Sequence[str], config: SearchConfig) -> int | None:
    """Sum of per-field scores; None unless every term matches some field."""
    name, category, price, stock = _fields(item)
    weighted = (
        (name, config.term_name),
        (category, config.term_category),
        (price, config.term_price),
        (stock, config.term_stock),
    )
    total = 0
    for term in terms:
        term_score = sum(score for value, score in weighted if term in value)
        if term_score == 0:
            return None
        total += term_score
    return total


def _score_item(item: InventoryRecord, query: str, config: SearchConfig) -> ScoredMatch | None:
    tier = _tier_score(item, query, config)
    if tier is not None:
        score, match_type = tier
        return ScoredMatch(item=item, score=score, match_type=match_type)

    terms = query.split(" ")
    if len(terms) < 2:
        return None
    score = _multi_term_score(item, terms, config)
    if score is None:
        return None
    return ScoredMatch(item=item, score=score, match_type="multi_term")


def _name_key(item: InventoryRecord) -> tuple[str, str]:
    return (item.item_name.lower(), item.item_name)


def _rank_key(match: ScoredMatch) -> tuple[int, str, str]:
    return (-match.score, match.item.item_name.lower(), match.item.item_name)


def search_inventory(
    items: Sequence[InventoryRecord],
    query: str,
    mode: SearchMode = "smart",
    config: SearchConfig | None = None,
) -> list[ScoredMatch]:
    """Rank items against a free-text query. Items that do not match are omitted."""
    config = config or SearchConfig()
    normalized = normalize_text(query)
    if not normalized:
        return []

    matches: list[ScoredMatch] = []
    if mode == "exact":
        for item in items:
            if normalized in _fields(item):
                matches.append(ScoredMatch(item=item, score=config.exact_name, match_type="exact_field"))
    elif mode == "smart":
        for item in items:
            match = _score_item(item, normalized, config)
            if match is not None:
                matches.append(match)
    else:
        raise ValueError(f"Unknown search mode: {mode!r}")

    matches.sort(key=_rank_key)
    return matches


def _sort_value(item: InventoryRecord, sort_by: str) -> Any:
    """Comparable value for a sort field, or None when the field is missing."""
    if sort_by == "itemName":
        return item.item_name.lower() or None
    if sort_by == "price":
        value = item.price_value
        return value if isinstance(value, Decimal) and value.is_finite() else None
    if sort_by == "stock":
        return item.stock
    return item.category.lower() or None


def resolve_sort_field(sort_by: str) -> str:
    field_name = _SORT_ALIASES.get(sort_by, sort_by)
    if field_name not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort_by!r} (expected one of {', '.join(SORT_FIELDS)})")
    return field_name


def sort_inventory(
    items: Sequence[InventoryRecord],
    sort_by: str = "itemName",
    descending: bool = False,
) -> list[InventoryRecord]:
    """Sort by one field. Items missing that field always come last."""
    field_name = resolve_sort_field(sort_by)
    present = [item for item in items if _sort_value(item, field_name) is not None]
    missing = [item for item in items if _sort_value(item, field_name) is None]

    present.sort(key=_name_key)
    present.sort(key=lambda item: _sort_value(item, field_name), reverse=descending)
    missing.sort(key=_name_key)
    return present + missing


def filter_inventory(
    items: Sequence[InventoryRecord],
    query: str | None = None,
    mode: SearchMode = "smart",
    sort_by: str = "itemName",
    descending: bool = False,
    config: SearchConfig | None = None,
) -> list[InventoryRecord]:
    """Ranked matches when there is a query, otherwise the sorted catalog."""
    if query and query.strip():
        return [match.item for match in search_inventory(items, query, mode, config)]
    return sort_inventory(items, sort_by, descending)
