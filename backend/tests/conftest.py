"""
Pytest configuration and fixtures for backend tests.
"""

import os

# The app engine is built at import time; keep it off the server database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ronda_api.main import app
from shared.infrastructure.db import get_db
from ronda_api.models import Base, Product, Table, User, Zone


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def seed_zone(db_session):
    """Create the main floor zone."""
    zone = Zone(name="PRINCIPAL", color="#3b82f6", capacity=40, width=800, height=500)
    db_session.add(zone)
    db_session.commit()
    db_session.refresh(zone)
    return zone


@pytest.fixture
def seed_tables(db_session, seed_zone):
    """Create tables 1-4 (capacity 4) in the main zone."""
    tables = [
        Table(number=n, capacity=4, x=n * 120, y=50, zone_id=seed_zone.id, status="LIBRE")
        for n in range(1, 5)
    ]
    db_session.add_all(tables)
    db_session.commit()
    for table in tables:
        db_session.refresh(table)
    return tables


@pytest.fixture
def seed_table(seed_tables):
    return seed_tables[0]


@pytest.fixture
def seed_mozo(db_session):
    """Create a floor waiter."""
    user = User(name="Mozo Juan", email="juan@ronda.com", role="MOZO")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seed_admin(db_session):
    user = User(name="Admin Ronda", email="admin@ronda.com", role="ADMIN")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def seed_products(db_session):
    """Create a 100-cent beer and a 50-cent empanada."""
    beer = Product(name="IPA - Pinta", category="Cervezas", price_cents=100, type="BARRA")
    empanada = Product(name="Empanada de Carne", category="Tapeo", price_cents=50, type="COCINA")
    db_session.add_all([beer, empanada])
    db_session.commit()
    db_session.refresh(beer)
    db_session.refresh(empanada)
    return beer, empanada


@pytest.fixture
def place_order(db_session, seed_mozo, seed_products):
    """Submit an order of two beers and one empanada on the given table."""
    from ronda_api.services.domain import OrderService

    def _place(table_id: int, items=None):
        beer, empanada = seed_products
        items = items or [
            {"product_id": beer.id, "quantity": 2},
            {"product_id": empanada.id, "quantity": 1},
        ]
        return OrderService(db_session).process_order(
            {"table_id": table_id, "mozo_id": seed_mozo.id, "items": items}
        )

    return _place
