from __future__ import annotations

from typing import Any

from stockledger.domain import Movement, MovementType, Number, clean_text, coerce_number

MOVEMENT_TYPES = {kind.value for kind in MovementType}


def is_stock_in(movement: str | None) -> bool:
    return movement == MovementType.STOCK_IN.value


def signed_quantity(movement: Movement) -> Number:
    """+quantity for Stock In, -quantity for anything else."""
    quantity = movement.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        return 0
    return quantity if is_stock_in(movement.movement) else -quantity


def validate_movement_fields(
    *,
    product: Any,
    sku: Any,
    movement: Any,
    quantity: Any,
) -> str | None:
    """Return an error message if invalid, else None.

    Shared by movement creation and movement edits.
    """
    if not clean_text(product):
        return "product is required"

    if not clean_text(sku):
        return "sku is required"

    if clean_text(movement) not in MOVEMENT_TYPES:
        return "movement must be 'Stock In' or 'Stock Out'"

    number = coerce_number(quantity)
    if number is None or number <= 0:
        return "quantity must be a positive number"

    return None


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_product_fields(*, sku: Any, stock: Any = None, precio: Any = None) -> str | None:
    """Return an error message if invalid, else None.

    Omitted numbers are fine (they default to 0); present ones must parse.
    Base stock may be negative, price may not.
    """
    if not clean_text(sku):
        return "sku is required"

    if not _is_blank(stock) and coerce_number(stock) is None:
        return "stock must be a number"

    if not _is_blank(precio):
        number = coerce_number(precio)
        if number is None:
            return "precio must be a number"
        if number < 0:
            return "precio must not be negative"

    return None
