from __future__ import annotations

import logging

from stockledger.domain import Movement, MovementType, coerce_number
from stockledger.errors import ValidationError
from stockledger.services.catalog import ProductCatalog
from stockledger.services.ledger import MovementLedger
from stockledger.services.resolver import resolve

logger = logging.getLogger(__name__)


class StockAdjuster:
    """Bring a product to a counted quantity by recording the difference."""

    def __init__(self, catalog: ProductCatalog, ledger: MovementLedger) -> None:
        self.catalog = catalog
        self.ledger = ledger

    def adjust_to(self, sku: str, target_stock, user: str | None = None) -> Movement | None:
        target = coerce_number(target_stock)
        if target is None or target < 0:
            raise ValidationError("target_stock must be a non-negative number")

        with self.ledger.repository.write_lock():
            product = self.catalog.get(sku)
            [current] = resolve([product], self.ledger.list())
            difference = target - current.effective_stock
            if difference == 0:
                logger.info("Product %s already at %s, no adjustment", sku, target)
                return None

            movement = self.ledger.add(
                {
                    "product": product.nombre or product.sku,
                    "sku": product.sku,
                    "movement": (
                        MovementType.STOCK_IN.value if difference > 0 else MovementType.STOCK_OUT.value
                    ),
                    "quantity": abs(difference),
                    "user": user,
                }
            )

        logger.info(
            "Product %s adjusted from %s to %s", sku, current.effective_stock, target
        )
        return movement
