"""Daily sales arithmetic, month grouping and export rows.

The shop's ledger computes the day's cash sale as ``ending + purchases -
beginning`` and books a fixed share of it as profit. A negative result
(for example a stock count typed in wrong) is recorded as zero rather
than as a negative sale.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from tindahan.catalog.bulk_pricing import round_money
from tindahan.domain.sales import DailySales, DailySalesDraft, SalesTotals

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

SALES_EXPORT_HEADER = [
    "Date",
    "Beginning",
    "Dedn-Purchase",
    "End",
    "Sale in Cash(SUM(D4+C4-B4))",
    "Profit(E4*0.1)",
    "Remarks",
]

ZERO = Decimal("0.00")


def sales_month(day: date) -> str:
    """Month label used for grouping, e.g. ``"June-2025"``."""
    return f"{MONTH_NAMES[day.month - 1]}-{day.year}"


def _month_key(label: str) -> tuple[int, int]:
    """Sort key for a ``"June-2025"`` label; unknown labels sort first."""
    name, _, year = label.rpartition("-")
    if name not in MONTH_NAMES or not year.isdigit():
        return (0, 0)
    return (int(year), MONTH_NAMES.index(name) + 1)


def compute_sale_in_cash(beginning: Decimal, purchases: Decimal, ending: Decimal) -> Decimal:
    return max(ZERO, round_money(ending + purchases - beginning))


def compute_profit(sale_in_cash: Decimal, profit_rate: Decimal) -> Decimal:
    return max(ZERO, round_money(sale_in_cash * profit_rate))


def build_sales_draft(
    day: date,
    beginning: Decimal,
    purchases: Decimal,
    ending: Decimal,
    profit_rate: Decimal,
    remarks: str = "",
) -> DailySalesDraft:
    """Derive the cash sale, profit and month label for one day's figures."""
    sale_in_cash = compute_sale_in_cash(beginning, purchases, ending)
    return DailySalesDraft(
        date=day.isoformat(),
        month=sales_month(day),
        beginning=round_money(beginning),
        purchases=round_money(purchases),
        ending=round_money(ending),
        sale_in_cash=sale_in_cash,
        profit=compute_profit(sale_in_cash, profit_rate),
        remarks=remarks.strip(),
    )


def newest_first(records: Iterable[DailySales]) -> list[DailySales]:
    return sorted(records, key=lambda record: (record.date, record.created_at or ""), reverse=True)


def filter_sales(records: Iterable[DailySales], month: str | None = None) -> list[DailySales]:
    """Records for one month label (all records when ``month`` is None), newest first."""
    if month:
        records = [record for record in records if record.month == month]
    return newest_first(records)


def sales_totals(records: Iterable[DailySales]) -> SalesTotals:
    total_sales = total_profit = total_purchases = ZERO
    count = 0
    for record in records:
        total_sales += record.sale_in_cash
        total_profit += record.profit
        total_purchases += record.purchases
        count += 1
    return SalesTotals(
        total_sales=round_money(total_sales),
        total_profit=round_money(total_profit),
        total_purchases=round_money(total_purchases),
        record_count=count,
    )


def available_months(records: Iterable[DailySales]) -> list[str]:
    """Distinct month labels, most recent month first."""
    return sorted({record.month for record in records if record.month}, key=_month_key, reverse=True)


def sales_export_rows(records: Sequence[DailySales]) -> list[list[Any]]:
    rows: list[list[Any]] = [list(SALES_EXPORT_HEADER)]
    for record in records:
        rows.append(
            [
                record.date,
                record.beginning,
                record.purchases,
                record.ending,
                record.sale_in_cash,
                record.profit,
                record.remarks,
            ]
        )
    return rows
