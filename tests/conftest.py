import pytest
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.database import CatalogStore
from catalog.main import create_app


@pytest.fixture
def store():
    """A fresh, empty catalog for every test."""
    return CatalogStore()


@pytest.fixture
def app(store):
    return create_app(store=store, settings=Settings(environment="test", log_level="WARNING"))


@pytest.fixture
def client(app):
    return TestClient(app)


def product_payload(product_id=10, stock=5, category_id=1, **overrides):
    payload = {
        "id": product_id,
        "name": "Hammer",
        "description": "Steel claw hammer",
        "price": 12.5,
        "stockQuantity": stock,
        "categoryId": category_id,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_product():
    return product_payload


@pytest.fixture
def seeded(client):
    """Category 1 "Tools" with product 10 (stock 5) in it."""
    client.post("/categories", json={"id": 1, "name": "Tools"})
    client.post("/products", json=product_payload())
    return client
