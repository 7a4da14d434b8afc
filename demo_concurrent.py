import asyncio

import httpx

from catalog.config import get_settings
from catalog_sdk.client import CatalogClient, CatalogClientError


async def simulate_reduce(client, ac, worker, product_id, qty):
    try:
        product = await client.reduce_stock_async(product_id, qty, client=ac)
        print(f"✅ worker {worker} took {qty} (stock now {product['stockQuantity']})")
        return True
    except CatalogClientError as e:
        print(f"❌ worker {worker} rejected: {e.detail}")
        return False


async def main():
    c = CatalogClient(base_url=get_settings().base_url)
    c.reset()

    c.create_category(1, "Electronics")
    product = c.create_product(1, "Gaming Laptop", "Last units", 1500.0, 5, 1)
    print(f"\n🖥️  Created product: {product}")

    # Ten workers each try to take one unit from a stock of five
    print("\n⚡ Simulating concurrent reduce-stock calls...")
    async with httpx.AsyncClient(base_url=c.base_url, timeout=c.timeout) as ac:
        results = await asyncio.gather(*(simulate_reduce(c, ac, i, 1, 1) for i in range(10)))

    print(f"\n{sum(results)} succeeded, {len(results) - sum(results)} rejected")
    print("📦 Final product state:", c.get_product(1))


if __name__ == "__main__":
    asyncio.run(main())
