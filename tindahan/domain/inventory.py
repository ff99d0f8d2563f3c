"""Data models for the inventory catalog."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Literal

DEFAULT_CATEGORY = "General"

# Activity log action names
INVENTORY_ADD = "INVENTORY_ADD"
INVENTORY_UPDATE = "INVENTORY_UPDATE"
INVENTORY_DELETE = "INVENTORY_DELETE"
INVENTORY_CLEAR = "INVENTORY_CLEAR"
INVENTORY_UPLOAD = "INVENTORY_UPLOAD"
INVENTORY_EXPORT = "INVENTORY_EXPORT"
CATEGORY_CREATE = "CATEGORY_CREATE"
CATEGORY_UPDATE = "CATEGORY_UPDATE"
CATEGORY_DELETE = "CATEGORY_DELETE"
CATEGORY_CASCADE_UPDATE = "CATEGORY_CASCADE_UPDATE"

MatchType = Literal[
    "exact_name",
    "name_prefix",
    "name_contains",
    "base_exact",
    "base_prefix",
    "base_contains",
    "multi_term",
    "exact_field",
]


@dataclass(frozen=True)
class InventoryDraft:
    """An inventory row that has not been persisted yet."""

    item_name: str
    price: str  # 2-decimal string, e.g. "18.00"
    stock: int = 0
    category: str = DEFAULT_CATEGORY


@dataclass(frozen=True)
class InventoryRecord:
    """A persisted inventory item.

    ``item_name`` may carry a bulk suffix such as ``"V Fresh (4 for 5)"``;
    ``price`` is then the derived unit price.
    """

    id: str
    item_name: str
    price: str
    stock: int = 0
    category: str = DEFAULT_CATEGORY
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def price_value(self) -> Decimal | None:
        try:
            return Decimal(self.price)
        except (ArithmeticError, TypeError, ValueError):
            return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "itemName": self.item_name,
            "price": self.price,
            "stock": self.stock,
            "category": self.category,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InventoryRecord:
        return cls(
            id=str(data["id"]),
            item_name=str(data.get("itemName", "")),
            price=str(data.get("price", "0.00")),
            stock=int(data.get("stock") or 0),
            category=str(data.get("category") or DEFAULT_CATEGORY),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass(frozen=True)
class Category:
    """A named category in the registry. Names are unique and case-sensitive."""

    id: str
    name: str
    description: str = ""
    created_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=str(data.get("description") or ""),
            created_at=data.get("createdAt"),
        )


@dataclass(frozen=True)
class ActivityEntry:
    """One line of the audit trail."""

    id: str
    action: str
    details: str
    user_id: str | None = None
    timestamp: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "action": self.action,
            "details": self.details,
            "userId": self.user_id,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActivityEntry:
        return cls(
            id=str(data["id"]),
            action=str(data["action"]),
            details=str(data.get("details") or ""),
            user_id=data.get("userId"),
            timestamp=data.get("timestamp"),
        )


@dataclass(frozen=True)
class BulkPricingInfo:
    """Derived pricing terms for an item."""

    is_bulk: bool
    unit_price: Decimal | None
    bulk_quantity: int | None = None
    bulk_price: Decimal | None = None


@dataclass(frozen=True)
class BulkNameParts:
    """Pieces recovered from a ``"<base> (<qty> for <price>)"`` item name."""

    base_name: str
    quantity: int
    bulk_price: Decimal


@dataclass(frozen=True)
class ScoredMatch:
    """An item with its relevance score for one query."""

    item: InventoryRecord
    score: int
    match_type: MatchType
