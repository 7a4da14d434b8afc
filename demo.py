#!/usr/bin/env python
from catalog.config import get_settings
from catalog_sdk.client import CatalogClient, CatalogClientError


def main():
    c = CatalogClient(base_url=get_settings().base_url)

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting catalog...")
    c.reset()

    # -----------------------------
    # Category and product
    # -----------------------------
    print("\nCreating category and product...")
    print(c.create_category(1, "Tools"))
    print(c.create_product(10, "Hammer", "Steel claw hammer", 12.5, 5, 1))

    # -----------------------------
    # Stock changes
    # -----------------------------
    print("\nReducing stock by 10 (only 5 in stock)...")
    try:
        c.reduce_stock(10, 10)
    except CatalogClientError as e:
        print(f"Rejected: {e}")
    print(c.get_product(10))

    print("\nAdding 3...")
    print(c.add_stock(10, 3))

    print("\nReducing by 8...")
    print(c.reduce_stock(10, 8))

    # -----------------------------
    # Category delete does not touch products
    # -----------------------------
    print("\nDeleting category 1...")
    c.delete_category(1)
    print("Categories:", c.list_categories())
    print("Products:", c.list_products())

    print("\nCreating a product in the deleted category...")
    try:
        c.create_product(11, "Saw", "Hand saw", 20.0, 1, 1)
    except CatalogClientError as e:
        print(f"Rejected: {e}")


if __name__ == "__main__":
    main()
