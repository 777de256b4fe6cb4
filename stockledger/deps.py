"""FastAPI dependencies that pick the storage backend and build the services."""

from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .repositories import (
    JsonMovementRepository,
    JsonProductRepository,
    MovementRepository,
    ProductRepository,
    SqlMovementRepository,
    SqlProductRepository,
)
from .services import MovementLedger, ProductCatalog, StockAdjuster


def get_sql_session() -> Iterator[Session | None]:
    """A database session for the SQL backend, None for the JSON one."""
    if settings.backend != "sql":
        yield None
        return
    yield from get_db()


def get_product_repository(db: Session | None = Depends(get_sql_session)) -> ProductRepository:
    if db is not None:
        return SqlProductRepository(db)
    return JsonProductRepository.at(settings.products_file)


def get_movement_repository(db: Session | None = Depends(get_sql_session)) -> MovementRepository:
    if db is not None:
        return SqlMovementRepository(db)
    return JsonMovementRepository.at(settings.movements_file)


def get_catalog(
    repository: ProductRepository = Depends(get_product_repository),
) -> ProductCatalog:
    return ProductCatalog(repository)


def get_ledger(
    repository: MovementRepository = Depends(get_movement_repository),
) -> MovementLedger:
    return MovementLedger(repository, default_user=settings.default_user)


def get_adjuster(
    catalog: ProductCatalog = Depends(get_catalog),
    ledger: MovementLedger = Depends(get_ledger),
) -> StockAdjuster:
    return StockAdjuster(catalog, ledger)
