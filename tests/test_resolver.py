import itertools

import pytest

from stockledger.domain import Movement, Product, StockStatus
from stockledger.services.resolver import classify_status, compute_deltas, resolve, summarize


def movement(sku, kind, quantity, movement_id="m"):
    return Movement(
        id=movement_id,
        date="2025-09-29T12:00:00.000Z",
        product=sku,
        sku=sku,
        movement=kind,
        quantity=quantity,
    )


class TestClassification:
    @pytest.mark.parametrize(
        "effective, expected",
        [
            (-3, StockStatus.OUT_OF_STOCK),
            (0, StockStatus.OUT_OF_STOCK),
            (1, StockStatus.RESTOCK_SOON),
            (5, StockStatus.RESTOCK_SOON),
            (6, StockStatus.AVAILABLE),
            (5.5, StockStatus.AVAILABLE),
            (0.5, StockStatus.RESTOCK_SOON),
        ],
    )
    def test_thresholds(self, effective, expected):
        assert classify_status(effective) is expected

    @pytest.mark.parametrize("base, delta", itertools.product(range(-4, 9, 2), range(-6, 7, 3)))
    def test_status_depends_only_on_base_plus_delta(self, base, delta):
        kind = "Stock In" if delta >= 0 else "Stock Out"
        movements = [movement("A", kind, abs(delta))] if delta else []
        [item] = resolve([Product(sku="A", stock=base)], movements)

        total = base + delta
        assert item.effective_stock == total
        if total <= 0:
            assert item.status is StockStatus.OUT_OF_STOCK
        elif total <= 5:
            assert item.status is StockStatus.RESTOCK_SOON
        else:
            assert item.status is StockStatus.AVAILABLE


class TestDeltas:
    def test_signed_sum_per_sku(self):
        movements = [
            movement("A", "Stock In", 10),
            movement("A", "Stock Out", 4),
            movement("B", "Stock Out", 2),
        ]
        assert compute_deltas(movements) == {"A": 6, "B": -2}

    def test_order_independent_and_additive(self):
        m1 = movement("A", "Stock In", 7, "1")
        m2 = movement("A", "Stock Out", 3, "2")
        forward = compute_deltas([m1, m2])
        backward = compute_deltas([m2, m1])
        assert forward == backward
        assert forward["A"] == compute_deltas([m1])["A"] + compute_deltas([m2])["A"]

    def test_fractional_quantities_are_order_independent(self):
        movements = [
            movement("A", "Stock In", 0.1, "1"),
            movement("A", "Stock In", 0.2, "2"),
            movement("A", "Stock In", 0.3, "3"),
        ]
        deltas = {compute_deltas(order)["A"] for order in itertools.permutations(movements)}
        assert deltas == {0.6}

    def test_status_of_fractional_movements_does_not_depend_on_order(self):
        movements = [
            movement("A", "Stock Out", 0.6, "0"),
            movement("A", "Stock In", 0.1, "1"),
            movement("A", "Stock In", 0.2, "2"),
            movement("A", "Stock In", 0.3, "3"),
        ]
        outcomes = set()
        for order in itertools.permutations(movements):
            [item] = resolve([Product(sku="A", stock=0)], list(order))
            outcomes.add((item.effective_stock, item.status))
        assert len(outcomes) == 1

    def test_integer_quantities_stay_integers(self):
        assert compute_deltas([movement("A", "Stock In", 2), movement("A", "Stock In", 3)]) == {"A": 5}
        assert isinstance(compute_deltas([movement("A", "Stock In", 2)])["A"], int)

    def test_non_finite_total_counts_as_zero(self):
        broken = movement("A", "Stock In", float("nan"))
        assert compute_deltas([broken, movement("B", "Stock In", 1)]) == {"A": 0, "B": 1}
        [item] = resolve([Product(sku="A", stock=2)], [broken])
        assert item.effective_stock == 2


class TestResolve:
    def test_stock_out_leaves_three_units(self):
        [item] = resolve([Product(sku="A", stock=10)], [movement("A", "Stock Out", 7)])
        assert item.effective_stock == 3
        assert item.status is StockStatus.RESTOCK_SOON

    def test_other_fields_are_untouched(self):
        product = Product(sku="A", nombre="Bolsa", categoria="BOLSAS", stock=1, precio=990)
        [item] = resolve([product], [])
        assert (item.sku, item.nombre, item.categoria, item.stock, item.precio) == (
            "A",
            "Bolsa",
            "BOLSAS",
            1,
            990,
        )

    def test_orphaned_movements_are_not_listed_but_attach_later(self):
        orphan = movement("Z", "Stock In", 5)
        assert resolve([Product(sku="A", stock=1)], [orphan])[0].sku == "A"
        assert [p.sku for p in resolve([Product(sku="A")], [orphan])] == ["A"]

        [z] = resolve([Product(sku="Z", stock=0)], [orphan])
        assert z.effective_stock == 5

    def test_empty_inputs(self):
        assert resolve([], []) == []
        assert resolve([], [movement("A", "Stock In", 1)]) == []


def test_summary_counts_and_value():
    resolved = resolve(
        [
            Product(sku="A", stock=10, precio=2.5),
            Product(sku="B", stock=3, precio=100),
            Product(sku="C", stock=0, precio=50),
        ],
        [movement("C", "Stock Out", 2)],
    )
    summary = summarize(resolved)
    assert summary.total_products == 3
    assert (summary.available, summary.restock_soon, summary.out_of_stock) == (1, 1, 1)
    assert summary.total_units == 13
    assert summary.total_value == 325.0
