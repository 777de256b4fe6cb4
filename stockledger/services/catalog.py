from __future__ import annotations

import logging
from typing import Any, Mapping

from stockledger.domain import Product, clean_text
from stockledger.errors import NotFoundError, ValidationError
from stockledger.repositories.base import ProductRepository
from stockledger.utils.validation import validate_product_fields

logger = logging.getLogger(__name__)


class ProductCatalog:
    """Products keyed by SKU.

    Base stock is write-once: it can be given when a SKU is first created and
    is never changed from here afterwards. Every later quantity change is a
    movement in the ledger.
    """

    def __init__(self, repository: ProductRepository) -> None:
        self.repository = repository

    def list(self) -> list[Product]:
        return self.repository.list()

    def get(self, sku: str) -> Product:
        sku = clean_text(sku)
        product = self.repository.get(sku)
        if product is None:
            raise NotFoundError(f"Product {sku} not found")
        return product

    def upsert(self, product: Product | Mapping[str, Any]) -> list[Product]:
        """Create or fully replace the record for ``product.sku``.

        A mapping is read with defaults for every omitted field; nothing is
        carried over from the record being replaced.
        """
        if isinstance(product, Product):
            record: Mapping[str, Any] = product.to_record()
        else:
            record = product

        error = validate_product_fields(
            sku=record.get("sku"), stock=record.get("stock"), precio=record.get("precio")
        )
        if error:
            logger.warning("Rejected product %s: %s", record.get("sku"), error)
            raise ValidationError(error)

        item = Product.from_record(record)
        with self.repository.write_lock():
            self.repository.put(item)
            products = self.repository.list()

        logger.info("Product %s saved", item.sku)
        return products

    def delete(self, sku: str) -> list[Product]:
        """Remove a product. Absent SKUs are a no-op; movements are untouched."""
        sku = clean_text(sku)
        with self.repository.write_lock():
            removed = self.repository.remove(sku)
            products = self.repository.list()

        if removed:
            logger.info("Product %s deleted", sku)
        return products

    def create_or_replace(self, sku: str, fields: Mapping[str, Any]) -> list[Product]:
        """Save ``fields`` under ``sku``, defaults filling the gaps.

        A new SKU takes ``stock`` from ``fields`` (0 when absent). An existing
        SKU keeps its stored base stock whatever ``fields`` says.
        """
        sku = clean_text(sku)
        with self.repository.write_lock():
            existing = self.repository.get(sku)
            record = {**fields, "sku": sku}
            if existing is not None:
                record["stock"] = existing.stock
            return self.upsert(record)

    def edit(self, sku: str, fields: Mapping[str, Any]) -> Product:
        """Partial update: merge the supplied fields over the stored record."""
        sku = clean_text(sku)
        with self.repository.write_lock():
            existing = self.get(sku)
            changes = {
                key: value
                for key, value in fields.items()
                if value is not None and key not in {"sku", "stock"}
            }
            merged = {**existing.to_record(), **changes}
            self.upsert(merged)
            return Product.from_record(merged)
