"""
Shared fixtures: JSON repositories in a temporary directory, an in-memory
SQLite session and a TestClient wired to the JSON repositories.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stockledger import models  # noqa: F401
from stockledger.database import Base
from stockledger.deps import get_movement_repository, get_product_repository
from stockledger.main import app
from stockledger.repositories import JsonMovementRepository, JsonProductRepository
from stockledger.services import MovementLedger, ProductCatalog, StockAdjuster


@pytest.fixture
def product_repo(tmp_path):
    return JsonProductRepository.at(tmp_path / "productos.json")


@pytest.fixture
def movement_repo(tmp_path):
    return JsonMovementRepository.at(tmp_path / "movements.json")


@pytest.fixture
def catalog(product_repo):
    return ProductCatalog(product_repo)


@pytest.fixture
def ledger(movement_repo):
    return MovementLedger(movement_repo)


@pytest.fixture
def adjuster(catalog, ledger):
    return StockAdjuster(catalog, ledger)


@pytest.fixture
def db_session():
    """In-memory SQLite database, discarded after each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(product_repo, movement_repo):
    """HTTP client backed by the temporary JSON files."""
    app.dependency_overrides[get_product_repository] = lambda: product_repo
    app.dependency_overrides[get_movement_repository] = lambda: movement_repo

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def movement_draft():
    return {
        "product": "Bolsa Negra Grande",
        "sku": "BOL-001",
        "movement": "Stock In",
        "quantity": 10,
        "user": "Admin",
    }
