from __future__ import annotations

from typing import ContextManager, Iterable, Protocol

from stockledger.domain import Movement, Product


class ProductRepository(Protocol):
    """Storage for catalog records, keyed by ``sku``."""

    def list(self) -> list[Product]: ...

    def get(self, sku: str) -> Product | None: ...

    def put(self, product: Product) -> None:
        """Replace the record with the same sku in place, or append."""

    def remove(self, sku: str) -> bool:
        """Delete by sku. Returns False when nothing matched."""

    def replace_all(self, products: Iterable[Product]) -> None: ...

    def write_lock(self) -> ContextManager[None]:
        """Hold while running a read-modify-write cycle."""


class MovementRepository(Protocol):
    """Storage for ledger records, keyed by ``id``."""

    def list(self) -> list[Movement]: ...

    def get(self, movement_id: str) -> Movement | None: ...

    def put(self, movement: Movement) -> None:
        """Replace the record with the same id in place, or insert at the head."""

    def remove(self, movement_id: str) -> bool: ...

    def replace_all(self, movements: Iterable[Movement]) -> None: ...

    def write_lock(self) -> ContextManager[None]: ...
