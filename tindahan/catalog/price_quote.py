"""Conversational price quotes: ``"7 v fresh"`` -> total price for 7 units.

The resolver prefers asking for clarification over quoting the wrong item.
A candidate must contain enough of the query's words, and the best
candidate is only accepted when it is the sole one, scores very high, or
clearly dominates the runner-up.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from tindahan.catalog.bulk_pricing import resolve_item_pricing, round_money
from tindahan.catalog.config import QuoteConfig
from tindahan.catalog.search import base_name, normalize_text
from tindahan.domain.inventory import BulkPricingInfo, InventoryRecord, ScoredMatch

QuoteStatus = Literal["quoted", "ambiguous", "not_found", "invalid_query"]

QUERY_PATTERN = re.compile(r"^(\d+)\s+(.+)$")
MIN_TERM_LENGTH = 2

USAGE_HINT = 'Please type a quantity followed by an item name, for example "3 nova" or "7 v fresh".'


@dataclass(frozen=True)
class PriceQuote:
    status: QuoteStatus
    message: str
    quantity: int | None = None
    item: InventoryRecord | None = None
    total: Decimal | None = None
    pricing: BulkPricingInfo | None = None
    candidates: list[ScoredMatch] = field(default_factory=list)


def format_currency(amount: Decimal, symbol: str = "₱") -> str:
    return f"{symbol}{round_money(amount):,.2f}"


def parse_quote_query(query: str) -> tuple[int, str] | None:
    """Split ``"<qty> <description>"``; None unless qty is a positive integer."""
    match = QUERY_PATTERN.match((query or "").strip())
    if not match:
        return None
    quantity = int(match.group(1))
    description = normalize_text(match.group(2))
    if quantity <= 0 or not description:
        return None
    return quantity, description


def query_terms(description: str) -> list[str]:
    """Words of two or more characters; the whole description if none qualify."""
    terms = [term for term in description.split() if len(term) >= MIN_TERM_LENGTH]
    return terms or [description]


def term_coverage(terms: Sequence[str], item_name: str) -> float:
    name = normalize_text(item_name)
    found = sum(1 for term in terms if term in name)
    return found / len(terms)


def score_candidate(description: str, terms: Sequence[str], item: InventoryRecord, config: QuoteConfig) -> int | None:
    """Relevance of one item, or None if too few query words appear in its name."""
    if term_coverage(terms, item.item_name) < config.min_term_coverage:
        return None

    name = normalize_text(item.item_name)
    if name == description or base_name(item.item_name) == description:
        return config.exact_score
    if description in name:
        return config.contains_score

    score = 0
    for term in terms:
        if term not in name:
            continue
        score += len(term) * config.term_weight
        if re.search(rf"\b{re.escape(term)}\b", name):
            score += config.whole_word_bonus
    return score


def rank_candidates(
    description: str,
    catalog: Sequence[InventoryRecord],
    config: QuoteConfig,
) -> list[ScoredMatch]:
    terms = query_terms(description)
    candidates: list[ScoredMatch] = []
    for item in catalog:
        score = score_candidate(description, terms, item, config)
        if score is not None:
            candidates.append(ScoredMatch(item=item, score=score, match_type="multi_term"))
    candidates.sort(key=lambda match: (-match.score, match.item.item_name.lower(), match.item.item_name))
    return candidates


def pick_confident_match(candidates: Sequence[ScoredMatch], config: QuoteConfig) -> ScoredMatch | None:
    """The top candidate if it may be quoted without asking, else None."""
    if not candidates:
        return None
    top = candidates[0]
    if len(candidates) == 1 or top.score > config.confident_score:
        return top
    runner_up = candidates[1]
    if top.score > config.dominance_ratio * runner_up.score and top.score > config.dominance_floor:
        return top
    return None


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def price_for_quantity(pricing: BulkPricingInfo, quantity: int) -> Decimal:
    """Total for ``quantity`` units: full bulk packs at the bulk price, the rest at the unit price.

    Raises ValueError when the pricing carries no unit price.
    """
    if pricing.unit_price is None:
        raise ValueError("cannot price an item without a unit price")
    if not pricing.is_bulk or pricing.bulk_quantity is None or pricing.bulk_price is None:
        return round_money(pricing.unit_price * quantity)

    full_packs, remainder = divmod(quantity, pricing.bulk_quantity)
    pack_total = full_packs * pricing.bulk_price
    remainder_total = remainder * pricing.unit_price
    return round_money(pack_total + remainder_total)


def _breakdown(
    bulk_quantity: int, bulk_price: Decimal, unit_price: Decimal, full_packs: int, remainder: int, symbol: str
) -> str:
    parts: list[str] = []
    if full_packs:
        parts.append(
            f"{_plural(full_packs, 'pack')} of {bulk_quantity} = "
            f"{format_currency(full_packs * bulk_price, symbol)}"
        )
    if remainder:
        parts.append(
            f"{_plural(remainder, 'piece')} x {format_currency(unit_price, symbol)} = "
            f"{format_currency(remainder * unit_price, symbol)}"
        )
    return "Breakdown: " + " + ".join(parts)


def resolve_price_quote(
    query: str,
    catalog: Sequence[InventoryRecord],
    config: QuoteConfig | None = None,
    currency_symbol: str = "₱",
) -> PriceQuote:
    """Resolve a ``"<quantity> <item>"`` query against a catalog snapshot."""
    config = config or QuoteConfig()
    parsed = parse_quote_query(query)
    if parsed is None:
        return PriceQuote(status="invalid_query", message=USAGE_HINT)
    quantity, description = parsed

    candidates = rank_candidates(description, catalog, config)
    if not candidates:
        return PriceQuote(
            status="not_found",
            message=f'Sorry, I couldn\'t find any items matching "{description}". Try a different search term.',
            quantity=quantity,
        )

    match = pick_confident_match(candidates, config)
    if match is None:
        shown = candidates[: config.max_suggestions]
        listing = "\n".join(f"• {candidate.item.item_name}" for candidate in shown)
        return PriceQuote(
            status="ambiguous",
            message=f'I found multiple items matching "{description}":\n\n{listing}\n\nPlease be more specific!',
            quantity=quantity,
            candidates=list(shown),
        )

    item = match.item
    pricing = resolve_item_pricing(item)
    if pricing.unit_price is None:
        return PriceQuote(
            status="not_found",
            message=f'"{item.item_name}" has no valid price on record.',
            quantity=quantity,
            item=item,
            candidates=[match],
        )

    total = price_for_quantity(pricing, quantity)
    lines = [f"{quantity} {item.item_name} = {format_currency(total, currency_symbol)}", ""]
    if pricing.is_bulk and pricing.bulk_price is not None and pricing.bulk_quantity is not None:
        full_packs, remainder = divmod(quantity, pricing.bulk_quantity)
        lines.append(
            f"Bulk price: {pricing.bulk_quantity} for {format_currency(pricing.bulk_price, currency_symbol)} "
            f"({format_currency(pricing.unit_price, currency_symbol)} each)"
        )
        lines.append(
            _breakdown(
                pricing.bulk_quantity,
                pricing.bulk_price,
                pricing.unit_price,
                full_packs,
                remainder,
                currency_symbol,
            )
        )
    else:
        lines.append(f"Unit price: {format_currency(pricing.unit_price, currency_symbol)}")
    lines.append(f"Stock available: {item.stock} units")
    if quantity > item.stock:
        lines.append(f"Note: only {_plural(item.stock, 'unit')} in stock.")

    return PriceQuote(
        status="quoted",
        message="\n".join(lines),
        quantity=quantity,
        item=item,
        total=total,
        pricing=pricing,
        candidates=[match],
    )
