"""
Shared fixtures: an in-memory SQLite database injected into the application.
"""

import pytest
from fastapi.testclient import TestClient

from bakery_orders.config import Settings
from bakery_orders.database import Database
from bakery_orders.main import create_app


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def client(database):
    app = create_app(database=database, settings=Settings())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def order_payload():
    return {
        "order_id": "A1",
        "customer_name": "Jo",
        "product_ordered": "Bread",
        "quantity": 2,
        "order_date": "2024-01-01",
    }
