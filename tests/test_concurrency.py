# tests/test_concurrency.py
import asyncio
from concurrent.futures import ThreadPoolExecutor

import httpx

from catalog.database import CatalogStore
from catalog.errors import BadRequest, Conflict
from catalog.models import Category, Product


def _product(product_id, stock=0):
    return Product(id=product_id, name="p", description="", price=1.0, stockQuantity=stock, categoryId=1)


def _try_reduce(store, qty):
    try:
        store.products.reduce_stock(1, qty)
        return True
    except BadRequest:
        return False


def test_threaded_reduce_never_goes_negative():
    store = CatalogStore()
    store.categories.create(Category(id=1, name="Tools"))
    store.products.create(_product(1, stock=20))

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: _try_reduce(store, 1), range(50)))

    assert results.count(True) == 20
    assert store.products.get(1).stockQuantity == 0


def test_threaded_add_and_reduce_balance():
    store = CatalogStore()
    store.categories.create(Category(id=1, name="Tools"))
    store.products.create(_product(1, stock=100))

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(store.products.add_stock, 1, 1) for _ in range(100)]
        futures += [pool.submit(store.products.reduce_stock, 1, 1) for _ in range(100)]
        for f in futures:
            f.result()

    assert store.products.get(1).stockQuantity == 100


def test_duplicate_creates_race():
    store = CatalogStore()
    store.categories.create(Category(id=1, name="Tools"))

    def create(_):
        try:
            store.products.create(_product(7))
            return True
        except Conflict:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(create, range(20)))

    assert results.count(True) == 1
    assert len(store.products.list_all()) == 1


def test_product_creates_race_category_delete():
    store = CatalogStore()
    store.categories.create(Category(id=1, name="Tools"))
    at_delete = []

    def delete_category():
        # snapshot under the category lock, right as the category disappears
        with store.categories.lock:
            store.categories.delete(1)
            at_delete.extend(p.id for p in store.products.list_all())

    def create(pid):
        try:
            store.products.create(_product(pid))
            return pid
        except BadRequest:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(create, pid) for pid in range(15)]
        deleted = pool.submit(delete_category)
        futures += [pool.submit(create, pid) for pid in range(15, 30)]
        # any other exception surfaces here
        created = [f.result(timeout=10) for f in futures]
        deleted.result(timeout=10)

    created = sorted(pid for pid in created if pid is not None)
    stored = store.products.list_all()
    assert sorted(p.id for p in stored) == created
    assert all(p.categoryId == 1 for p in stored)
    # nothing was written once the category was gone
    assert sorted(at_delete) == created
    assert not store.categories.exists(1)


async def _reduce(ac):
    return await ac.post("/products/1/reduce-stock", json={"quantityToAdd": 1})


def test_concurrent_http_last_item(client, app):
    client.post("/categories", json={"id": 1, "name": "Tools"})
    client.post("/products", json={"id": 1, "name": "last", "description": "", "price": 10.0,
                                   "stockQuantity": 1, "categoryId": 1})

    async def run():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            return await asyncio.gather(_reduce(ac), _reduce(ac))

    statuses = sorted(r.status_code for r in asyncio.run(run()))
    # one buyer gets the last unit, the other is rejected
    assert statuses == [200, 400]
    assert client.get("/products/1").json()["stockQuantity"] == 0
