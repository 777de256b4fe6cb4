from .base import MovementRepository, ProductRepository
from .json_store import JsonMovementRepository, JsonProductRepository
from .sql import SqlMovementRepository, SqlProductRepository

__all__ = [
    "MovementRepository",
    "ProductRepository",
    "JsonMovementRepository",
    "JsonProductRepository",
    "SqlMovementRepository",
    "SqlProductRepository",
]
