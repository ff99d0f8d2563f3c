from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

import pytest
from tindahan.catalog.config import QuoteConfig
from tindahan.catalog.price_quote import (
    USAGE_HINT,
    parse_quote_query,
    price_for_quantity,
    query_terms,
    resolve_price_quote,
)
from tindahan.domain.inventory import BulkPricingInfo, InventoryRecord

ItemFactory = Callable[..., InventoryRecord]


def test_bulk_suffix_quote_with_breakdown(make_item: ItemFactory) -> None:
    catalog = [make_item("V Fresh (4 for 5)", price="1.25")]

    quote = resolve_price_quote("7 v fresh", catalog)

    assert quote.status == "quoted"
    assert quote.total == Decimal("8.75")
    assert quote.message.splitlines()[0] == "7 V Fresh (4 for 5) = ₱8.75"
    assert "Bulk price: 4 for ₱5.00 (₱1.25 each)" in quote.message
    assert "Breakdown: 1 pack of 4 = ₱5.00 + 3 pieces x ₱1.25 = ₱3.75" in quote.message
    assert "Stock available: 100 units" in quote.message


def test_bulk_terms_in_price_text_quote_the_same_total(make_item: ItemFactory) -> None:
    catalog = [make_item("V Fresh", price="4 for 5")]

    quote = resolve_price_quote("7 v fresh", catalog)

    assert quote.status == "quoted"
    assert quote.total == Decimal("8.75")


def test_whole_packs_and_loose_pieces_only(make_item: ItemFactory) -> None:
    catalog = [make_item("V Fresh (4 for 5)", price="1.25")]

    packs = resolve_price_quote("8 v fresh", catalog)
    loose = resolve_price_quote("3 v fresh", catalog)

    assert packs.total == Decimal("10.00")
    assert "Breakdown: 2 packs of 4 = ₱10.00" in packs.message
    assert "pieces" not in packs.message
    assert loose.total == Decimal("3.75")
    assert "Breakdown: 3 pieces x ₱1.25 = ₱3.75" in loose.message


def test_plain_item_uses_unit_price(make_item: ItemFactory) -> None:
    quote = resolve_price_quote("3 nova", [make_item("Nova", price="18.00", stock=2)])

    assert quote.status == "quoted"
    assert quote.total == Decimal("54.00")
    assert "Unit price: ₱18.00" in quote.message
    assert "Note: only 2 units in stock." in quote.message


@pytest.mark.parametrize("query", ["nova", "0 nova", "", "three nova", "-2 nova", "5"])
def test_malformed_queries(make_item: ItemFactory, query: str) -> None:
    quote = resolve_price_quote(query, [make_item("Nova", price="18.00")])

    assert quote.status == "invalid_query"
    assert quote.message == USAGE_HINT


def test_no_candidate_is_not_found(make_item: ItemFactory) -> None:
    quote = resolve_price_quote("2 sardines", [make_item("Nova", price="18.00")])

    assert quote.status == "not_found"
    assert "sardines" in quote.message


def test_low_term_coverage_is_not_a_candidate(make_item: ItemFactory) -> None:
    quote = resolve_price_quote("1 apple banana cherry", [make_item("Apple Pie", price="45.00")])

    assert quote.status == "not_found"


def test_term_coverage_boundary(make_item: ItemFactory) -> None:
    enough = resolve_price_quote("1 alpha bravo charlie delta echo", [make_item("Alpha Bravo Charlie")])
    too_few = resolve_price_quote("1 alpha bravo charlie delta echo", [make_item("Alpha Bravo")])

    assert enough.status == "quoted"
    assert too_few.status == "not_found"


def test_similar_items_ask_for_clarification(make_item: ItemFactory) -> None:
    catalog = [
        make_item("Lucky Me Pancit Canton Original"),
        make_item("Lucky Me Pancit Canton Chilimansi"),
    ]

    quote = resolve_price_quote("1 pancit canton", catalog)

    assert quote.status == "ambiguous"
    assert [match.item.item_name for match in quote.candidates] == [
        "Lucky Me Pancit Canton Chilimansi",
        "Lucky Me Pancit Canton Original",
    ]
    assert "• Lucky Me Pancit Canton Chilimansi" in quote.message
    assert quote.message.endswith("Please be more specific!")


def test_suggestions_are_capped(make_item: ItemFactory) -> None:
    catalog = [make_item(f"Soap {letter}") for letter in "GFEDCBA"]

    quote = resolve_price_quote("1 soap", catalog)

    assert quote.status == "ambiguous"
    assert [match.item.item_name for match in quote.candidates] == ["Soap A", "Soap B", "Soap C", "Soap D", "Soap E"]


def test_exact_name_above_confident_score_is_quoted(make_item: ItemFactory) -> None:
    catalog = [make_item("Nova Cheddar"), make_item("Nova", price="18.00")]

    confident = resolve_price_quote("1 nova", catalog)
    strict = resolve_price_quote("1 nova", catalog, QuoteConfig(confident_score=1000))

    assert confident.status == "quoted"
    assert confident.item is not None and confident.item.item_name == "Nova"
    # 1000 is neither above 1000 nor above 2 x 500.
    assert strict.status == "ambiguous"


@pytest.mark.parametrize(("contains_score", "expected"), [(400, "ambiguous"), (401, "quoted")])
def test_dominance_ratio_boundary(make_item: ItemFactory, contains_score: int, expected: str) -> None:
    # "Milk Drink Choco" scores (5*10+20) + (4*10+20) + (5*10+20) = 200 on word matches.
    catalog = [make_item("Choco Milk Drink 1L"), make_item("Milk Drink Choco")]
    config = QuoteConfig(contains_score=contains_score, confident_score=100_000)

    quote = resolve_price_quote("1 choco milk drink", catalog, config)

    assert quote.status == expected


@pytest.mark.parametrize(("floor", "expected"), [(500, "ambiguous"), (499, "quoted")])
def test_dominance_floor_boundary(make_item: ItemFactory, floor: int, expected: str) -> None:
    catalog = [make_item("Choco Milk Drink 1L"), make_item("Milk Drink Choco")]
    config = QuoteConfig(confident_score=100_000, dominance_floor=floor)

    quote = resolve_price_quote("1 choco milk drink", catalog, config)

    assert quote.status == expected


def test_unpriced_match_is_not_quoted(make_item: ItemFactory) -> None:
    quote = resolve_price_quote("2 nova", [make_item("Nova", price="ask")])

    assert quote.status == "not_found"
    assert "no valid price" in quote.message


def test_query_parsing_helpers() -> None:
    assert parse_quote_query("  7   V  Fresh ") == (7, "v fresh")
    assert parse_quote_query("0 nova") is None
    assert query_terms("v fresh") == ["fresh"]
    assert query_terms("v") == ["v"]


def test_price_for_quantity_mixes_packs_and_loose_pieces() -> None:
    pricing = BulkPricingInfo(is_bulk=True, unit_price=Decimal("1.25"), bulk_quantity=4, bulk_price=Decimal("5"))

    assert price_for_quantity(pricing, 9) == Decimal("11.25")


def test_price_for_quantity_requires_a_unit_price() -> None:
    with pytest.raises(ValueError, match="unit price"):
        price_for_quantity(BulkPricingInfo(is_bulk=False, unit_price=None), 3)
