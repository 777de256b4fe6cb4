from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Lock, RLock
from typing import Iterable, Iterator

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockledger import models
from stockledger.domain import Movement, Product
from stockledger.errors import StorageError

logger = logging.getLogger(__name__)

_registry_lock = Lock()
_url_locks: dict[str, RLock] = {}


def _lock_for(db: Session) -> RLock:
    key = db.get_bind().url.render_as_string(hide_password=False)
    with _registry_lock:
        lock = _url_locks.get(key)
        if lock is None:
            lock = _url_locks[key] = RLock()
        return lock


def _product_from_row(row: models.Product) -> Product:
    return Product.from_record(
        {
            "sku": row.sku,
            "nombre": row.nombre,
            "categoria": row.categoria,
            "stock": row.stock,
            "precio": row.precio,
        }
    )


def _movement_from_row(row: models.Movement) -> Movement:
    return Movement.from_record(
        {
            "id": row.id,
            "date": row.date,
            "product": row.product,
            "sku": row.sku,
            "movement": row.movement,
            "quantity": row.quantity,
            "user": row.user,
        }
    )


class _SqlRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Database write failed: %s", exc)
            raise StorageError("Database write failed") from exc

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Serialize read-then-write cycles against one database in this process.

        Products and movements share the lock. On entry the session's open
        transaction is ended so the reads that follow see every commit made
        before the lock was taken.
        """
        with _lock_for(self.db):
            self._commit()
            yield


class SqlProductRepository(_SqlRepository):
    def list(self) -> list[Product]:
        try:
            rows = self.db.scalars(select(models.Product)).all()
        except SQLAlchemyError as exc:
            raise StorageError("Could not read products") from exc
        return [_product_from_row(row) for row in rows]

    def get(self, sku: str) -> Product | None:
        try:
            row = self.db.get(models.Product, sku)
        except SQLAlchemyError as exc:
            raise StorageError("Could not read products") from exc
        return _product_from_row(row) if row else None

    def put(self, product: Product) -> None:
        self.db.merge(models.Product(**product.to_record()))
        self._commit()

    def remove(self, sku: str) -> bool:
        row = self.db.get(models.Product, sku)
        if row is None:
            return False
        self.db.delete(row)
        self._commit()
        return True

    def replace_all(self, products: Iterable[Product]) -> None:
        self.db.execute(delete(models.Product))
        self.db.expunge_all()
        self.db.add_all(models.Product(**product.to_record()) for product in products)
        self._commit()


class SqlMovementRepository(_SqlRepository):
    def list(self) -> list[Movement]:
        try:
            rows = self.db.scalars(
                select(models.Movement).order_by(models.Movement.date.desc())
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError("Could not read movements") from exc
        return [_movement_from_row(row) for row in rows]

    def get(self, movement_id: str) -> Movement | None:
        try:
            row = self.db.get(models.Movement, movement_id)
        except SQLAlchemyError as exc:
            raise StorageError("Could not read movements") from exc
        return _movement_from_row(row) if row else None

    def put(self, movement: Movement) -> None:
        self.db.merge(models.Movement(**movement.to_record()))
        self._commit()

    def remove(self, movement_id: str) -> bool:
        row = self.db.get(models.Movement, movement_id)
        if row is None:
            return False
        self.db.delete(row)
        self._commit()
        return True

    def replace_all(self, movements: Iterable[Movement]) -> None:
        self.db.execute(delete(models.Movement))
        self.db.expunge_all()
        self.db.add_all(models.Movement(**movement.to_record()) for movement in movements)
        self._commit()
