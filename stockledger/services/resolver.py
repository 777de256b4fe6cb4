"""Effective stock derivation.

A product's on-hand quantity is never stored. It is recomputed on every read
as ``base stock + net signed movement quantity for its SKU``. Everything here
is pure: no storage access, no caching, same output for any movement order.
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Iterable

from stockledger.domain import (
    RESTOCK_THRESHOLD,
    Movement,
    Number,
    Product,
    ResolvedProduct,
    StockStatus,
)
from stockledger.utils.validation import signed_quantity


def _finite_or_zero(value: Number) -> Number:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, int):
        return value
    return value if math.isfinite(value) else 0


def compute_deltas(movements: Iterable[Movement]) -> dict[str, Number]:
    """Net signed quantity per SKU, including SKUs with no product.

    Fractional quantities are summed with ``math.fsum`` so the result does
    not depend on the order of ``movements``.
    """
    terms: dict[str, list[Number]] = defaultdict(list)
    for movement in movements:
        terms[movement.sku].append(signed_quantity(movement))
    return {sku: _exact_sum(values) for sku, values in terms.items()}


def _exact_sum(values: list[Number]) -> Number:
    if any(isinstance(value, float) and not math.isfinite(value) for value in values):
        return 0
    if all(isinstance(value, int) for value in values):
        return sum(values)
    return _finite_or_zero(math.fsum(values))


def classify_status(effective_stock: Number) -> StockStatus:
    if effective_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if effective_stock <= RESTOCK_THRESHOLD:
        return StockStatus.RESTOCK_SOON
    return StockStatus.AVAILABLE


def resolve(products: Iterable[Product], movements: Iterable[Movement]) -> list[ResolvedProduct]:
    """Annotate each catalog product with its effective stock and status.

    Movements whose SKU has no product are counted but never produce an
    output row; they apply as soon as a product with that SKU exists.
    """
    delta = compute_deltas(movements)

    resolved = []
    for product in products:
        effective = _finite_or_zero(product.stock) + delta.get(product.sku, 0)
        resolved.append(
            ResolvedProduct(
                sku=product.sku,
                nombre=product.nombre,
                categoria=product.categoria,
                stock=product.stock,
                precio=product.precio,
                effective_stock=effective,
                status=classify_status(effective),
            )
        )
    return resolved


@dataclass(frozen=True)
class InventorySummary:
    total_products: int
    available: int
    restock_soon: int
    out_of_stock: int
    total_units: Number
    total_value: float


def summarize(resolved: Iterable[ResolvedProduct]) -> InventorySummary:
    """Dashboard figures. Negative stock counts as zero units and zero value."""
    statuses: Counter[StockStatus] = Counter()
    total_units: Number = 0
    total_value = 0.0
    count = 0

    for item in resolved:
        count += 1
        statuses[item.status] += 1
        on_hand = max(item.effective_stock, 0)
        total_units += on_hand
        total_value += float(_finite_or_zero(item.precio)) * on_hand

    return InventorySummary(
        total_products=count,
        available=statuses[StockStatus.AVAILABLE],
        restock_soon=statuses[StockStatus.RESTOCK_SOON],
        out_of_stock=statuses[StockStatus.OUT_OF_STOCK],
        total_units=total_units,
        total_value=round(total_value, 2),
    )
