"""Price checker workflow orchestration."""

from __future__ import annotations

from tindahan.catalog.config import CatalogRules
from tindahan.catalog.price_quote import PriceQuote, resolve_price_quote
from tindahan.domain.catalog import CatalogStore
from tindahan.runtime import get_logger, load_catalog_rules

logger = get_logger(__name__)


def run_price_check(store: CatalogStore, query: str, rules: CatalogRules | None = None) -> PriceQuote:
    """Quote ``"<quantity> <item>"`` against the current catalog."""
    rules = rules or load_catalog_rules()
    quote = resolve_price_quote(query, store.list_inventory(), rules.quote, rules.store.currency_symbol)
    logger.debug("Price check %r -> %s", query, quote.status)
    return quote
