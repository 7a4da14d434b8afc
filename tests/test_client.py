# tests/test_client.py
import asyncio

import httpx
import pytest

from catalog_sdk.client import CatalogClient, CatalogClientError


@pytest.fixture
def sdk(client):
    c = CatalogClient(base_url="http://testserver")
    # TestClient speaks the same get/post/put/delete API as requests.Session
    c.session = client
    return c


def test_category_roundtrip(sdk):
    assert sdk.create_category(1, "Tools") == {"id": 1, "name": "Tools"}
    assert sdk.update_category(1, "Hand tools") == {"id": 1, "name": "Hand tools"}
    assert sdk.list_categories() == [{"id": 1, "name": "Hand tools"}]
    assert sdk.delete_category(1) is None
    with pytest.raises(CatalogClientError) as exc:
        sdk.get_category(1)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Category not found"


def test_product_and_stock(sdk):
    sdk.create_category(1, "Tools")
    created = sdk.create_product(10, "Hammer", "claw", 12.5, 5, 1)
    assert created["stockQuantity"] == 5
    assert sdk.add_stock(10, 3)["stockQuantity"] == 8
    assert sdk.reduce_stock(10, 8)["stockQuantity"] == 0
    with pytest.raises(CatalogClientError) as exc:
        sdk.reduce_stock(10, 1)
    assert exc.value.status_code == 400

    replaced = sdk.update_product(10, "Mallet", "rubber", 9.0, 2, 1)
    assert replaced == {"id": 10, "name": "Mallet", "description": "rubber", "price": 9.0,
                        "stockQuantity": 2, "categoryId": 1}
    assert sdk.list_products() == [replaced]
    sdk.delete_product(10)
    assert sdk.list_products() == []


def test_conflict(sdk):
    sdk.create_category(1, "Tools")
    with pytest.raises(CatalogClientError) as exc:
        sdk.create_category(1, "Tools")
    assert exc.value.status_code == 409


def test_health_and_reset(sdk):
    sdk.create_category(1, "Tools")
    assert sdk.health() == {"status": "ok"}
    assert sdk.reset() == {"status": "reset"}
    assert sdk.list_categories() == []


def test_async_stock_calls(sdk, app):
    sdk.create_category(1, "Tools")
    sdk.create_product(10, "Hammer", "", 1.0, 2, 1)

    async def run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
            added = await sdk.add_stock_async(10, 3, client=ac)
            reduced = await sdk.reduce_stock_async(10, 5, client=ac)
            with pytest.raises(CatalogClientError):
                await sdk.reduce_stock_async(10, 1, client=ac)
            return added, reduced

    added, reduced = asyncio.run(run())
    assert added["stockQuantity"] == 5
    assert reduced["stockQuantity"] == 0
