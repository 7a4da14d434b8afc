# catalog/database.py
import threading
from typing import List

from loguru import logger

from .errors import BadRequest, Conflict, NotFound
from .models import Category, Product

# This file holds the in-memory catalog stores and their locks.
# Records live in plain lists so listing keeps insertion order; lookups
# scan by id. Every public method returns copies, never stored instances.


class CategoryStore:
    def __init__(self):
        self._items: List[Category] = []
        # reentrant: ProductStore holds it while calling exists()
        self.lock = threading.RLock()

    def _index_of(self, category_id: int) -> int:
        for i, c in enumerate(self._items):
            if c.id == category_id:
                return i
        return -1

    def list_all(self) -> List[Category]:
        with self.lock:
            return [c.model_copy() for c in self._items]

    def get(self, category_id: int) -> Category:
        with self.lock:
            idx = self._index_of(category_id)
            if idx == -1:
                raise NotFound("Category not found")
            return self._items[idx].model_copy()

    def exists(self, category_id: int) -> bool:
        with self.lock:
            return self._index_of(category_id) != -1

    def create(self, category: Category) -> Category:
        with self.lock:
            if self._index_of(category.id) != -1:
                raise Conflict("Category with this ID already exists")
            stored = category.model_copy()
            self._items.append(stored)
        logger.info("Created category {}", stored.id)
        return stored.model_copy()

    def update(self, category_id: int, new_data: Category) -> Category:
        with self.lock:
            idx = self._index_of(category_id)
            if idx == -1:
                raise NotFound("Category not found")
            # full replace; only the id survives from the path
            stored = new_data.model_copy(update={"id": category_id})
            self._items[idx] = stored
        logger.info("Updated category {}", category_id)
        return stored.model_copy()

    def delete(self, category_id: int) -> None:
        # Products that still reference this category are left as they are.
        with self.lock:
            idx = self._index_of(category_id)
            if idx == -1:
                raise NotFound("Category not found")
            del self._items[idx]
        logger.info("Deleted category {}", category_id)

    def clear(self):
        with self.lock:
            self._items.clear()


class ProductStore:
    def __init__(self, categories: CategoryStore):
        self._categories = categories
        self._items: List[Product] = []
        self.lock = threading.RLock()

    def _index_of(self, product_id: int) -> int:
        for i, p in enumerate(self._items):
            if p.id == product_id:
                return i
        return -1

    def _require(self, product_id: int) -> int:
        idx = self._index_of(product_id)
        if idx == -1:
            raise NotFound("Product not found")
        return idx

    def _check_fields(self, product: Product):
        if not self._categories.exists(product.categoryId):
            raise BadRequest("CategoryId does not exist")
        if product.stockQuantity < 0:
            raise BadRequest("Stock quantity cannot be negative")

    def list_all(self) -> List[Product]:
        with self.lock:
            return [p.model_copy() for p in self._items]

    def get(self, product_id: int) -> Product:
        with self.lock:
            return self._items[self._require(product_id)].model_copy()

    def create(self, product: Product) -> Product:
        # Lock order is always categories -> products. Holding the category
        # lock keeps the referenced category alive until the write is done.
        with self._categories.lock, self.lock:
            if self._index_of(product.id) != -1:
                raise Conflict("Product with this ID already exists")
            self._check_fields(product)
            stored = product.model_copy()
            self._items.append(stored)
        logger.info("Created product {} in category {}", stored.id, stored.categoryId)
        return stored.model_copy()

    def update(self, product_id: int, new_data: Product) -> Product:
        with self._categories.lock, self.lock:
            idx = self._require(product_id)
            self._check_fields(new_data)
            stored = new_data.model_copy(update={"id": product_id})
            self._items[idx] = stored
        logger.info("Updated product {}", product_id)
        return stored.model_copy()

    def delete(self, product_id: int) -> None:
        with self.lock:
            del self._items[self._require(product_id)]
        logger.info("Deleted product {}", product_id)

    def add_stock(self, product_id: int, quantity_to_add: int) -> Product:
        with self.lock:
            idx = self._require(product_id)
            if quantity_to_add < 0:
                raise BadRequest("Quantity to add must be non-negative")
            old = self._items[idx]
            updated = old.model_copy(update={"stockQuantity": old.stockQuantity + quantity_to_add})
            self._items[idx] = updated
        logger.info("Product {} stock {} -> {}", product_id, old.stockQuantity, updated.stockQuantity)
        return updated.model_copy()

    def reduce_stock(self, product_id: int, quantity_to_reduce: int) -> Product:
        with self.lock:
            idx = self._require(product_id)
            if quantity_to_reduce < 0:
                raise BadRequest("Quantity to reduce must be non-negative")
            old = self._items[idx]
            new_stock = old.stockQuantity - quantity_to_reduce
            if new_stock < 0:
                raise BadRequest("Stock quantity cannot be negative")
            updated = old.model_copy(update={"stockQuantity": new_stock})
            self._items[idx] = updated
        logger.info("Product {} stock {} -> {}", product_id, old.stockQuantity, updated.stockQuantity)
        return updated.model_copy()

    def clear(self):
        with self.lock:
            self._items.clear()


class CatalogStore:
    """Both stores wired together; one instance per running app."""

    def __init__(self):
        self.categories = CategoryStore()
        self.products = ProductStore(self.categories)

    def reset(self):
        with self.categories.lock, self.products.lock:
            self.products.clear()
            self.categories.clear()
        logger.info("Catalog reset")
