# catalog_sdk/client.py
from typing import Any, Dict, Optional

import httpx
import requests
from rich import print


class CatalogClientError(Exception):
    """Raised for any non-2xx answer from the catalog service."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def _detail(r) -> Any:
    try:
        return r.json().get("detail", r.text)
    except (ValueError, AttributeError):
        return r.text


def _check(r):
    if r.status_code >= 400:
        raise CatalogClientError(r.status_code, _detail(r))
    if r.status_code == 204:
        return None
    return r.json()


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:8085", api_key: Optional[str] = None, timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout
        self.headers: Dict[str, str] = {}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"
            self.session.headers.update(self.headers)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def health(self):
        return _check(self.session.get(self._url("/health"), timeout=self.timeout))

    def reset(self):
        return _check(self.session.post(self._url("/reset"), timeout=self.timeout))

    # Categories
    def list_categories(self):
        return _check(self.session.get(self._url("/categories"), timeout=self.timeout))

    def get_category(self, category_id: int):
        return _check(self.session.get(self._url(f"/categories/{category_id}"), timeout=self.timeout))

    def create_category(self, category_id: int, name: str):
        r = self.session.post(self._url("/categories"), json={"id": category_id, "name": name}, timeout=self.timeout)
        return _check(r)

    def update_category(self, category_id: int, name: str):
        # the server keeps the path id whatever the body says
        r = self.session.put(self._url(f"/categories/{category_id}"), json={"id": category_id, "name": name},
                             timeout=self.timeout)
        return _check(r)

    def delete_category(self, category_id: int):
        return _check(self.session.delete(self._url(f"/categories/{category_id}"), timeout=self.timeout))

    # Products
    def list_products(self):
        return _check(self.session.get(self._url("/products"), timeout=self.timeout))

    def get_product(self, product_id: int):
        return _check(self.session.get(self._url(f"/products/{product_id}"), timeout=self.timeout))

    def create_product(self, product_id: int, name: str, description: str, price: float,
                       stock_quantity: int, category_id: int):
        payload = {
            "id": product_id, "name": name, "description": description, "price": price,
            "stockQuantity": stock_quantity, "categoryId": category_id,
        }
        return _check(self.session.post(self._url("/products"), json=payload, timeout=self.timeout))

    def update_product(self, product_id: int, name: str, description: str, price: float,
                       stock_quantity: int, category_id: int):
        # full replace: every field has to be sent
        payload = {
            "id": product_id, "name": name, "description": description, "price": price,
            "stockQuantity": stock_quantity, "categoryId": category_id,
        }
        return _check(self.session.put(self._url(f"/products/{product_id}"), json=payload, timeout=self.timeout))

    def delete_product(self, product_id: int):
        return _check(self.session.delete(self._url(f"/products/{product_id}"), timeout=self.timeout))

    # Stock
    def add_stock(self, product_id: int, quantity: int):
        r = self.session.post(self._url(f"/products/{product_id}/add-stock"), json={"quantityToAdd": quantity},
                              timeout=self.timeout)
        return _check(r)

    def reduce_stock(self, product_id: int, quantity: int):
        # reduce-stock reuses the quantityToAdd field name
        r = self.session.post(self._url(f"/products/{product_id}/reduce-stock"), json={"quantityToAdd": quantity},
                              timeout=self.timeout)
        return _check(r)

    # Async stock calls (used by the concurrent demo)
    async def add_stock_async(self, product_id: int, quantity: int, client: Optional[httpx.AsyncClient] = None):
        return await self._stock_async("add-stock", product_id, quantity, client)

    async def reduce_stock_async(self, product_id: int, quantity: int, client: Optional[httpx.AsyncClient] = None):
        return await self._stock_async("reduce-stock", product_id, quantity, client)

    async def _stock_async(self, action: str, product_id: int, quantity: int,
                           client: Optional[httpx.AsyncClient] = None):
        path = f"/products/{product_id}/{action}"
        payload = {"quantityToAdd": quantity}
        if client is not None:
            return _check(await client.post(path, json=payload))
        async with httpx.AsyncClient(base_url=self.base_url, headers=self.headers, timeout=self.timeout) as ac:
            return _check(await ac.post(path, json=payload))


if __name__ == "__main__":
    import argparse

    from catalog.config import get_settings

    parser = argparse.ArgumentParser(description="Catalog service CLI")
    parser.add_argument("--base-url", default=get_settings().base_url, help="Catalog service URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Category commands
    # ---------------------------
    subparsers.add_parser("list-categories", help="List all categories")

    gc = subparsers.add_parser("get-category", help="Get a category by its ID")
    gc.add_argument("--id", type=int, required=True)

    cc = subparsers.add_parser("create-category", help="Create a category")
    cc.add_argument("--id", type=int, required=True)
    cc.add_argument("--name", required=True)

    uc = subparsers.add_parser("update-category", help="Rename a category")
    uc.add_argument("--id", type=int, required=True)
    uc.add_argument("--name", required=True)

    dc = subparsers.add_parser("delete-category", help="Delete a category")
    dc.add_argument("--id", type=int, required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--id", type=int, required=True)

    for name, help_text in (("create-product", "Create a product"), ("update-product", "Replace a product")):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--id", type=int, required=True)
        p.add_argument("--name", required=True)
        p.add_argument("--description", default="")
        p.add_argument("--price", type=float, required=True)
        p.add_argument("--stock", type=int, required=True, help="Stock quantity")
        p.add_argument("--category-id", type=int, required=True)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--id", type=int, required=True)

    # ---------------------------
    # Stock commands
    # ---------------------------
    ad = subparsers.add_parser("add-stock", help="Add stock to a product")
    ad.add_argument("--id", type=int, required=True)
    ad.add_argument("--qty", type=int, required=True)

    rd = subparsers.add_parser("reduce-stock", help="Reduce stock of a product")
    rd.add_argument("--id", type=int, required=True)
    rd.add_argument("--qty", type=int, required=True)

    subparsers.add_parser("reset", help="Clear the whole catalog")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = CatalogClient(base_url=args.base_url)

    commands = {
        "list-categories": lambda: c.list_categories(),
        "get-category": lambda: c.get_category(args.id),
        "create-category": lambda: c.create_category(args.id, args.name),
        "update-category": lambda: c.update_category(args.id, args.name),
        "delete-category": lambda: c.delete_category(args.id),
        "list-products": lambda: c.list_products(),
        "get-product": lambda: c.get_product(args.id),
        "create-product": lambda: c.create_product(args.id, args.name, args.description, args.price,
                                                   args.stock, args.category_id),
        "update-product": lambda: c.update_product(args.id, args.name, args.description, args.price,
                                                   args.stock, args.category_id),
        "delete-product": lambda: c.delete_product(args.id),
        "add-stock": lambda: c.add_stock(args.id, args.qty),
        "reduce-stock": lambda: c.reduce_stock(args.id, args.qty),
        "reset": lambda: c.reset(),
    }
    try:
        print(commands[args.command]())
    except CatalogClientError as e:
        print(f"Error: {e}")
        raise SystemExit(1)
