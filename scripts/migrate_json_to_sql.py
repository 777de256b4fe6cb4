#!/usr/bin/env python3
"""JSON files -> SQL database migration.

Copies ``productos.json`` and ``movements.json`` into the ``products`` and
``movements`` tables, keeping SKUs, ids and dates exactly as stored. The
destination tables are replaced wholesale.

Env vars (also read from .env):
- STOCKLEDGER_DATA_DIR   directory holding the JSON files (default: ./data)
- DATABASE_URL           destination database

Optional:
- MIGRATE_SCHEMA=1       (default: 1) create tables before copying
- MIGRATE_NORMALIZE=1    (default: 0) rewrite legacy dates before copying
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy.orm import Session

from stockledger import models  # noqa: F401
from stockledger.config import settings
from stockledger.database import Base, SessionLocal, engine
from stockledger.repositories import (
    JsonMovementRepository,
    JsonProductRepository,
    SqlMovementRepository,
    SqlProductRepository,
)
from stockledger.services import MovementLedger

logger = logging.getLogger("migrate_json_to_sql")


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def migrate(data_dir: Path, db: Session, *, normalize: bool = False) -> tuple[int, int]:
    """Copy both collections. Returns (products, movements) copied."""
    source_products = JsonProductRepository.at(data_dir / "productos.json")
    source_movements = JsonMovementRepository.at(data_dir / "movements.json")

    if normalize:
        updated = MovementLedger(source_movements).normalize_dates()
        logger.info("Normalized %d legacy date(s) in the source file", updated)

    products = source_products.list()
    movements = source_movements.list()

    SqlProductRepository(db).replace_all(products)
    SqlMovementRepository(db).replace_all(movements)
    return len(products), len(movements)


def main() -> int:
    data_dir = settings.data_dir
    if not data_dir.exists():
        logger.error("Data directory not found: %s", data_dir)
        return 2

    if _flag("MIGRATE_SCHEMA", "1"):
        Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        product_count, movement_count = migrate(
            data_dir, db, normalize=_flag("MIGRATE_NORMALIZE")
        )

    logger.info("Copied %d product(s) and %d movement(s)", product_count, movement_count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
