"""Tunable catalog rules: spreadsheet markers, search tiers, quote thresholds and sales settings.

Rules are built from in-memory TOML layers (packaged defaults first, then
project overrides). Every heuristic number used by the search and quote
algorithms is a named field here so it can be tuned without code changes.

Layer shape::

    [sheet]
    default_category = "General"
    header_markers = ["Product - Items", ...]
    [[sheet.categories]]
    marker = "CIGARETS"
    name = "Cigarettes"

    [search]
    exact_name = 10000

    [quote]
    min_term_coverage = 0.6

    [store]
    currency_symbol = "₱"

    [sales]
    profit_rate = 0.1
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class CategoryMarker:
    """Substring marker that switches the current category while parsing a sheet."""

    marker: str
    name: str


@dataclass(frozen=True)
class SheetRules:
    default_category: str = "General"
    default_stock: int = 100
    route_bulk_price_text: bool = True
    currency_symbols: tuple[str, ...] = ("₱", "$", "PHP")
    header_markers: tuple[str, ...] = ("Product - Items", "Retail Price", "Stocks", "---")
    category_markers: tuple[CategoryMarker, ...] = ()


@dataclass(frozen=True)
class SearchConfig:
    """Scores for interactive search. The six tier scores must be strictly descending."""

    exact_name: int = 10000
    name_prefix: int = 5000
    name_contains: int = 1000
    base_exact: int = 800
    base_prefix: int = 600
    base_contains: int = 400
    term_name: int = 100
    term_category: int = 50
    term_price: int = 25
    term_stock: int = 10

    def __post_init__(self) -> None:
        tiers = [
            self.exact_name,
            self.name_prefix,
            self.name_contains,
            self.base_exact,
            self.base_prefix,
            self.base_contains,
        ]
        if any(higher <= lower for higher, lower in zip(tiers, tiers[1:])):
            raise ValueError(f"search tier scores must be strictly descending, got {tiers}")


@dataclass(frozen=True)
class QuoteConfig:
    """Scoring and disambiguation thresholds for price quotes."""

    exact_score: int = 1000
    contains_score: int = 500
    term_weight: int = 10
    whole_word_bonus: int = 20
    # Fraction of description terms that must appear in an item name.
    min_term_coverage: float = 0.6
    # A top score above this is accepted without looking at the runner-up.
    confident_score: int = 900
    # Otherwise the top score must exceed ratio x runner-up and reach the floor.
    dominance_ratio: float = 2.0
    dominance_floor: int = 50
    max_suggestions: int = 5

    def __post_init__(self) -> None:
        if not 0 < self.min_term_coverage <= 1:
            raise ValueError(f"min_term_coverage must be in (0, 1], got {self.min_term_coverage}")
        if self.max_suggestions < 1:
            raise ValueError("max_suggestions must be at least 1")


@dataclass(frozen=True)
class StoreConfig:
    currency_symbol: str = "₱"
    low_stock_threshold: int = 10
    default_categories: tuple[str, ...] = ("General",)


@dataclass(frozen=True)
class SalesConfig:
    # Share of the day's cash sale booked as profit.
    profit_rate: float = 0.1

    def __post_init__(self) -> None:
        if not 0 <= self.profit_rate <= 1:
            raise ValueError(f"profit_rate must be in [0, 1], got {self.profit_rate}")


@dataclass(frozen=True)
class CatalogRules:
    """All rule sections merged from every configured layer."""

    sheet: SheetRules = field(default_factory=SheetRules)
    search: SearchConfig = field(default_factory=SearchConfig)
    quote: QuoteConfig = field(default_factory=QuoteConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    sales: SalesConfig = field(default_factory=SalesConfig)


def _normalize_strings(raw: Any) -> tuple[str, ...]:
    """Normalize a TOML string-or-list value into a tuple of non-empty strings."""
    if isinstance(raw, str):
        value = raw.strip()
        return (value,) if value else tuple()
    if isinstance(raw, list):
        return tuple(str(v).strip() for v in raw if str(v).strip())
    return tuple()


def _normalize_markers(raw: Any) -> tuple[CategoryMarker, ...]:
    if not isinstance(raw, list):
        return tuple()
    markers: list[CategoryMarker] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        marker = str(entry.get("marker", "")).strip()
        if not marker:
            continue
        name = str(entry.get("name", "")).strip() or marker
        markers.append(CategoryMarker(marker=marker, name=name))
    return tuple(markers)


def _merge_scalars[T](section: T, raw: Any) -> T:
    """Overlay scalar TOML values onto a dataclass section, coercing to the field's type."""
    if not isinstance(raw, Mapping):
        return section
    updates: dict[str, Any] = {}
    for f in fields(section):  # type: ignore[arg-type]
        if f.name not in raw:
            continue
        current = getattr(section, f.name)
        value = raw[f.name]
        if isinstance(current, bool):
            updates[f.name] = bool(value)
        elif isinstance(current, int):
            updates[f.name] = int(value)
        elif isinstance(current, float):
            updates[f.name] = float(value)
        elif isinstance(current, str):
            updates[f.name] = str(value).strip()
    if not updates:
        return section
    return replace(section, **updates)  # type: ignore[type-var]


def build_catalog_rules(configs: Sequence[Mapping[str, Any]] | None = None) -> CatalogRules:
    """Build merged catalog rules from in-memory configs (later layers override earlier ones).

    Category markers accumulate across layers; a later layer that repeats a
    marker replaces its canonical name.
    """
    rules = CatalogRules()
    for config in configs or ():
        sheet_raw = config.get("sheet", {})
        sheet = _merge_scalars(rules.sheet, sheet_raw)
        if isinstance(sheet_raw, Mapping):
            if "header_markers" in sheet_raw:
                sheet = replace(sheet, header_markers=_normalize_strings(sheet_raw["header_markers"]))
            if "currency_symbols" in sheet_raw:
                sheet = replace(sheet, currency_symbols=_normalize_strings(sheet_raw["currency_symbols"]))
            layer_markers = _normalize_markers(sheet_raw.get("categories"))
            if layer_markers:
                by_marker = {m.marker.upper(): m for m in sheet.category_markers}
                for marker in layer_markers:
                    by_marker[marker.marker.upper()] = marker
                sheet = replace(sheet, category_markers=tuple(by_marker.values()))

        store_raw = config.get("store", {})
        store = _merge_scalars(rules.store, store_raw)
        if isinstance(store_raw, Mapping) and "default_categories" in store_raw:
            store = replace(store, default_categories=_normalize_strings(store_raw["default_categories"]))

        rules = CatalogRules(
            sheet=sheet,
            search=_merge_scalars(rules.search, config.get("search")),
            quote=_merge_scalars(rules.quote, config.get("quote")),
            store=store,
            sales=_merge_scalars(rules.sales, config.get("sales")),
        )
    return rules
