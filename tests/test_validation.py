import pytest

from stockledger.domain import Movement, coerce_number
from stockledger.utils.validation import (
    signed_quantity,
    validate_movement_fields,
    validate_product_fields,
)

VALID = {"product": "Bolsa", "sku": "BOL-001", "movement": "Stock In", "quantity": 3}


def test_valid_movement_has_no_error():
    assert validate_movement_fields(**VALID) is None
    assert validate_movement_fields(**{**VALID, "movement": "Stock Out", "quantity": "2.5"}) is None


@pytest.mark.parametrize(
    "override, message",
    [
        ({"product": "  "}, "product is required"),
        ({"sku": None}, "sku is required"),
        ({"movement": "stock in"}, "movement must be"),
        ({"movement": "Transfer"}, "movement must be"),
        ({"quantity": 0}, "quantity must be"),
        ({"quantity": -3}, "quantity must be"),
        ({"quantity": float("nan")}, "quantity must be"),
        ({"quantity": float("inf")}, "quantity must be"),
        ({"quantity": "abc"}, "quantity must be"),
        ({"quantity": True}, "quantity must be"),
        ({"quantity": None}, "quantity must be"),
    ],
)
def test_invalid_movement_fields(override, message):
    error = validate_movement_fields(**{**VALID, **override})
    assert error is not None
    assert message in error


def test_product_rules():
    assert validate_product_fields(sku="A") is None
    assert validate_product_fields(sku="A", stock=-4, precio=0) is None
    assert validate_product_fields(sku="") == "sku is required"
    assert validate_product_fields(sku="A", precio=-1) == "precio must not be negative"
    assert validate_product_fields(sku="A", precio="x") == "precio must be a number"
    assert validate_product_fields(sku="A", stock="many") == "stock must be a number"


def test_signed_quantity():
    stock_in = Movement(id="1", date="", product="p", sku="A", movement="Stock In", quantity=4)
    stock_out = Movement(id="2", date="", product="p", sku="A", movement="Stock Out", quantity=4)
    assert signed_quantity(stock_in) == 4
    assert signed_quantity(stock_out) == -4


def test_coerce_number():
    assert coerce_number("5") == 5
    assert coerce_number(5.0) == 5 and isinstance(coerce_number(5.0), int)
    assert coerce_number(" 2.5 ") == 2.5
    assert coerce_number("") is None
    assert coerce_number(False) is None
    assert coerce_number([1]) is None
