"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables on Base.metadata)
from api.helpers import get_price_resolver, get_stock_directory
from database import Base, get_db
from main import app
from services.stock_directory_service import StockDirectory
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    price_cache,
    price_resolver,
    quote_provider,
)


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="stock_directory")
def stock_directory_fixture(quote_provider, tmp_path):
    """A stock directory over the mock provider with a throwaway cache file."""
    return StockDirectory(quote_provider, tmp_path / "stocks.json", max_age_seconds=3600)


@pytest.fixture(name="client")
def client_fixture(db, price_resolver, stock_directory):
    """Create a test client with the test database and a mock quote provider."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_price_resolver] = lambda: price_resolver
    app.dependency_overrides[get_stock_directory] = lambda: stock_directory
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
