from __future__ import annotations

from pathlib import Path

import pytest
from tindahan.catalog.config import CategoryMarker, build_catalog_rules
from tindahan.runtime import ProjectPaths, load_catalog_rules, set_project_root


def test_packaged_defaults() -> None:
    rules = load_catalog_rules((str(ProjectPaths().default_catalog_rules),))

    assert rules.sheet.default_stock == 100
    assert CategoryMarker(marker="CIGARETS", name="Cigarettes") in rules.sheet.category_markers
    assert len(rules.sheet.category_markers) == 18
    assert rules.quote.min_term_coverage == 0.6
    assert rules.quote.dominance_ratio == 2.0
    assert rules.search.exact_name == 10000
    assert rules.store.currency_symbol == "₱"
    assert "General" in rules.store.default_categories


def test_project_overrides_layer_on_defaults(tmp_path: Path) -> None:
    config = tmp_path / "config"
    config.mkdir()
    (config / "catalog_rules.toml").write_text(
        """
[sheet]
default_stock = 50

[[sheet.categories]]
marker = "snacks"
name = "Snacks"

[[sheet.categories]]
marker = "RICE"
name = "Grains"

[quote]
min_term_coverage = 0.75
""",
        encoding="utf-8",
    )
    set_project_root(tmp_path)

    rules = load_catalog_rules()

    assert rules.sheet.default_stock == 50
    assert rules.quote.min_term_coverage == 0.75
    assert rules.quote.confident_score == 900
    markers = {marker.marker.upper(): marker.name for marker in rules.sheet.category_markers}
    assert markers["SNACKS"] == "Snacks"
    assert markers["RICE"] == "Grains"
    assert markers["COFFEE"] == "Coffee"


def test_missing_files_give_builtin_defaults(tmp_path: Path) -> None:
    rules = load_catalog_rules((str(tmp_path / "absent.toml"),))

    assert rules == build_catalog_rules()


def test_search_tiers_must_stay_descending() -> None:
    with pytest.raises(ValueError, match="strictly descending"):
        build_catalog_rules([{"search": {"name_prefix": 20000}}])


def test_coverage_must_be_a_fraction() -> None:
    with pytest.raises(ValueError, match="min_term_coverage"):
        build_catalog_rules([{"quote": {"min_term_coverage": 1.5}}])


def test_string_values_are_coerced() -> None:
    rules = build_catalog_rules([{"sheet": {"header_markers": "Item", "route_bulk_price_text": False}}])

    assert rules.sheet.header_markers == ("Item",)
    assert rules.sheet.route_bulk_price_text is False


def test_profit_rate_defaults_and_overrides() -> None:
    assert load_catalog_rules((str(ProjectPaths().default_catalog_rules),)).sales.profit_rate == 0.1
    assert build_catalog_rules([{"sales": {"profit_rate": "0.15"}}]).sales.profit_rate == 0.15

    with pytest.raises(ValueError, match="profit_rate"):
        build_catalog_rules([{"sales": {"profit_rate": 2}}])
