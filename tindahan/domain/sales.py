"""Daily sales records kept alongside the inventory catalog.

Each record covers one business day: stock value at opening (``beginning``),
purchases made that day and stock value at closing (``ending``). The cash
sale and profit are derived from those three figures when the record is
saved, so a stored record always carries them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

# Activity log action names
SALES_CREATE = "SALES_CREATE"
SALES_UPDATE = "SALES_UPDATE"
SALES_DELETE = "SALES_DELETE"
SALES_EXPORT = "SALES_EXPORT"


def _decimal(raw: Any) -> Decimal:
    return Decimal(str(raw)) if raw not in (None, "") else Decimal("0.00")


@dataclass(frozen=True)
class DailySalesDraft:
    """A validated day's figures with the derived amounts, not persisted yet."""

    date: str  # ISO date, e.g. "2025-06-14"
    month: str  # e.g. "June-2025"
    beginning: Decimal
    purchases: Decimal
    ending: Decimal
    sale_in_cash: Decimal
    profit: Decimal
    remarks: str = ""


@dataclass(frozen=True)
class DailySales:
    id: str
    date: str
    month: str
    beginning: Decimal
    purchases: Decimal
    ending: Decimal
    sale_in_cash: Decimal
    profit: Decimal
    remarks: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "month": self.month,
            "beginning": str(self.beginning),
            "purchases": str(self.purchases),
            "ending": str(self.ending),
            "saleInCash": str(self.sale_in_cash),
            "profit": str(self.profit),
            "remarks": self.remarks,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DailySales:
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            month=str(data.get("month") or ""),
            beginning=_decimal(data.get("beginning")),
            purchases=_decimal(data.get("purchases")),
            ending=_decimal(data.get("ending")),
            sale_in_cash=_decimal(data.get("saleInCash")),
            profit=_decimal(data.get("profit")),
            remarks=str(data.get("remarks") or ""),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass(frozen=True)
class SalesTotals:
    total_sales: Decimal
    total_profit: Decimal
    total_purchases: Decimal
    record_count: int
