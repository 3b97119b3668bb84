# provide dataclass models
# every entity is frozen: cart lines and orders hold snapshots, never live references

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x400.png?text=Jewelry"
NEW_PRODUCT_IMAGE = "https://via.placeholder.com/400x400.png?text=New"


class PaymentMethod(str, Enum):
    CASH_ON_DELIVERY = "Cash on Delivery"
    SIMULATED_GATEWAY = "Razorpay (simulated)"


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    description: str
    price: str  # kept as entered by the owner; read with parse_price
    stock: int
    image: str

    def to_record(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Product:
        return cls(
            id=int(record["id"]),
            name=str(record["name"]),
            description=str(record.get("description", "none")),
            price=str(record["price"]),
            stock=int(record["stock"]),
            image=str(record.get("image", PLACEHOLDER_IMAGE)),
        )


PRODUCT_FIELDS = tuple(f.name for f in dataclasses.fields(Product))


@dataclass(frozen=True)
class Account:
    id: int  # creation time, epoch milliseconds
    name: str
    email: str
    phone: str
    address: str
    password: str

    def to_record(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Account:
        return cls(
            id=int(record["id"]),
            name=str(record.get("name", "")),
            email=str(record["email"]),
            phone=str(record.get("phone", "")),
            address=str(record.get("address", "")),
            password=str(record["password"]),
        )


@dataclass(frozen=True)
class Order:
    id: int
    user: Account
    items: Tuple[Product, ...]
    total: int
    method: str
    created_at: str  # ISO-8601

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user": self.user.to_record(),
            "items": [p.to_record() for p in self.items],
            "total": self.total,
            "method": self.method,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Order:
        return cls(
            id=int(record["id"]),
            user=Account.from_record(record["user"]),
            items=tuple(Product.from_record(p) for p in record["items"]),
            total=int(record["total"]),
            method=str(record["method"]),
            created_at=str(record["createdAt"]),
        )


def from_records(cls, raw) -> Optional[List]:
    """
    Rebuild a list of entities, or None when `raw` is not a list of valid records.
    Numeric fields stored as text ("3") are converted; anything that does not
    convert makes the whole list invalid.
    """
    if not isinstance(raw, list):
        return None
    try:
        return [cls.from_record(r) for r in raw]
    except (KeyError, TypeError, ValueError, AttributeError):
        return None
