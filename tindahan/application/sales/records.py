"""Daily sales workflows: record, correct, delete and summarize a day's figures.

The form carries the three figures the shopkeeper counts (beginning stock
value, purchases, ending stock value); the cash sale, profit and month
label are derived here so stored records never disagree with their inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from tindahan.catalog.bulk_pricing import parse_money
from tindahan.catalog.config import CatalogRules
from tindahan.catalog.sales import available_months, build_sales_draft, filter_sales, sales_totals
from tindahan.domain.catalog import CatalogStore
from tindahan.domain.errors import InvalidRecordError
from tindahan.domain.sales import (
    SALES_CREATE,
    SALES_DELETE,
    SALES_UPDATE,
    DailySales,
    DailySalesDraft,
    SalesTotals,
)
from tindahan.runtime import get_logger, load_catalog_rules

logger = get_logger(__name__)


@dataclass(frozen=True)
class SalesForm:
    """Values of the add/edit daily sales form. Purchases may be left blank."""

    date: str
    beginning: str
    ending: str
    purchases: str = ""
    remarks: str = ""


@dataclass(frozen=True)
class SalesSummary:
    records: list[DailySales]
    totals: SalesTotals
    months: list[str]


def _parse_day(raw: str) -> date:
    text = (raw or "").strip()
    if not text:
        raise InvalidRecordError("Date is required")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise InvalidRecordError(f"Date must look like YYYY-MM-DD (got {raw!r})") from None


def _amount(raw: str, label: str, required: bool) -> Decimal:
    text = (raw or "").replace("₱", "").replace(",", "").strip()
    if not text:
        if required:
            raise InvalidRecordError(f"{label} is required")
        return Decimal("0")
    value = parse_money(text)
    if value is None:
        raise InvalidRecordError(f"{label} must be a number (got {raw!r})")
    if value < 0:
        raise InvalidRecordError(f"{label} cannot be negative")
    return value


def form_to_sales_draft(form: SalesForm, rules: CatalogRules | None = None) -> DailySalesDraft:
    """Validate a form and derive the day's cash sale and profit."""
    rules = rules or load_catalog_rules()
    return build_sales_draft(
        _parse_day(form.date),
        beginning=_amount(form.beginning, "Beginning", required=True),
        purchases=_amount(form.purchases, "Purchases", required=False),
        ending=_amount(form.ending, "Ending", required=True),
        profit_rate=Decimal(str(rules.sales.profit_rate)),
        remarks=form.remarks,
    )


def add_sales_record(
    store: CatalogStore,
    form: SalesForm,
    user_id: str | None = None,
    rules: CatalogRules | None = None,
) -> DailySales:
    draft = form_to_sales_draft(form, rules)
    with store.batch():
        record = store.create_sales_record(draft)
        store.log_activity(
            SALES_CREATE,
            f"Created sales record for {record.date} with sales amount {record.sale_in_cash}",
            user_id,
        )
    logger.info("Recorded sales for %s: %s", record.date, record.sale_in_cash)
    return record


def update_sales_record(
    store: CatalogStore,
    record_id: str,
    form: SalesForm,
    user_id: str | None = None,
    rules: CatalogRules | None = None,
) -> DailySales:
    draft = form_to_sales_draft(form, rules)
    with store.batch():
        record = store.update_sales_record(record_id, draft)
        store.log_activity(SALES_UPDATE, f"Updated sales record for {record.date}", user_id)
    return record


def delete_sales_record(store: CatalogStore, record_id: str, user_id: str | None = None) -> DailySales:
    with store.batch():
        record = store.get_sales_record(record_id)
        store.delete_sales_record(record_id)
        store.log_activity(SALES_DELETE, f"Deleted sales record for {record.date}", user_id)
    return record


def sales_summary(store: CatalogStore, month: str | None = None) -> SalesSummary:
    """Records for ``month`` (or all), their totals, and every month that has records."""
    every_record = store.list_sales()
    records = filter_sales(every_record, month)
    return SalesSummary(records=records, totals=sales_totals(records), months=available_months(every_record))
