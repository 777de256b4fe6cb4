from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping

Number = int | float

DEFAULT_USER = "System"
RESTOCK_THRESHOLD = 5


class MovementType(str, Enum):
    STOCK_IN = "Stock In"
    STOCK_OUT = "Stock Out"


class StockStatus(str, Enum):
    AVAILABLE = "Available"
    RESTOCK_SOON = "Restock Soon"
    OUT_OF_STOCK = "Out of Stock"


def coerce_number(value: Any) -> Number | None:
    """Return ``value`` as a finite int/float, or None when it is not one.

    Numeric strings are accepted (``"5"`` -> 5). Booleans, blanks, NaN and
    infinities are rejected. Integral floats collapse to int.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Product:
    """A catalog entry. ``stock`` is the base stock, never the effective one."""

    sku: str
    nombre: str = ""
    categoria: str = ""
    stock: Number = 0
    precio: Number = 0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Product:
        # Missing or unparsable fields take their defaults; nothing is inherited.
        return cls(
            sku=clean_text(record.get("sku")),
            nombre=clean_text(record.get("nombre")),
            categoria=clean_text(record.get("categoria")),
            stock=coerce_number(record.get("stock")) or 0,
            precio=coerce_number(record.get("precio")) or 0,
        )

    def to_record(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Movement:
    id: str
    date: str
    product: str
    sku: str
    movement: str
    quantity: Number
    user: str = DEFAULT_USER

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Movement:
        return cls(
            id=clean_text(record.get("id")),
            date=clean_text(record.get("date")),
            product=clean_text(record.get("product")),
            sku=clean_text(record.get("sku")),
            movement=clean_text(record.get("movement")),
            quantity=coerce_number(record.get("quantity")) or 0,
            user=clean_text(record.get("user")) or DEFAULT_USER,
        )

    def to_record(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedProduct(Product):
    """A product annotated with its derived quantity and status."""

    effective_stock: Number = 0
    status: StockStatus = StockStatus.OUT_OF_STOCK
