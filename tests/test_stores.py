# tests/test_stores.py
import pytest

from catalog.database import CatalogStore
from catalog.errors import BadRequest, Conflict, NotFound
from catalog.models import Category, Product


def make(product_id=10, stock=5, category_id=1):
    return Product(id=product_id, name="Hammer", description="", price=1.0,
                   stockQuantity=stock, categoryId=category_id)


@pytest.fixture
def catalog():
    store = CatalogStore()
    store.categories.create(Category(id=1, name="Tools"))
    return store


def test_returned_records_are_copies(catalog):
    created = catalog.categories.create(Category(id=2, name="Paint"))
    created.name = "changed"
    catalog.categories.list_all()[0].name = "changed too"
    assert [c.name for c in catalog.categories.list_all()] == ["Tools", "Paint"]


def test_exists_tracks_deletes(catalog):
    assert catalog.categories.exists(1)
    catalog.categories.delete(1)
    assert not catalog.categories.exists(1)
    with pytest.raises(NotFound):
        catalog.categories.delete(1)


def test_update_overrides_id(catalog):
    updated = catalog.categories.update(1, Category(id=5, name="Hand tools"))
    assert updated == Category(id=1, name="Hand tools")
    with pytest.raises(NotFound):
        catalog.categories.get(5)


def test_product_validation_order(catalog):
    catalog.products.create(make())
    with pytest.raises(Conflict):
        catalog.products.create(make(stock=-1, category_id=9))
    with pytest.raises(BadRequest, match="CategoryId does not exist"):
        catalog.products.create(make(product_id=11, stock=-1, category_id=9))
    with pytest.raises(BadRequest, match="Stock quantity cannot be negative"):
        catalog.products.create(make(product_id=11, stock=-1))
    assert [p.id for p in catalog.products.list_all()] == [10]


def test_update_missing_checked_first(catalog):
    with pytest.raises(NotFound):
        catalog.products.update(10, make(stock=-1, category_id=9))


def test_stock_patch_touches_only_stock(catalog):
    catalog.products.create(make())
    after = catalog.products.add_stock(10, 7)
    assert after == make(stock=12)
    after = catalog.products.reduce_stock(10, 12)
    assert after == make(stock=0)


def test_reduce_below_zero_rejected_in_full(catalog):
    catalog.products.create(make(stock=3))
    with pytest.raises(BadRequest):
        catalog.products.reduce_stock(10, 4)
    assert catalog.products.get(10).stockQuantity == 3


def test_errors_carry_status_codes():
    assert BadRequest().status_code == 400
    assert NotFound().status_code == 404
    assert Conflict("dup").to_dict() == {"detail": "dup"}


def test_independent_instances():
    a, b = CatalogStore(), CatalogStore()
    a.categories.create(Category(id=1, name="Tools"))
    assert b.categories.list_all() == []


def test_reset(catalog):
    catalog.products.create(make())
    catalog.reset()
    assert catalog.categories.list_all() == []
    assert catalog.products.list_all() == []
