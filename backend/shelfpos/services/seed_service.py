# Overview: Demo data for a fresh store; used by the startup flag and the `system seed` command.

from __future__ import annotations

import logging
from datetime import timedelta

from ..money import round_money
from ..storage import StorageAdapter
from ..time_utils import to_db_timestamp, utcnow

logger = logging.getLogger(__name__)

DEMO_CATEGORIES = [
    {"name": "Electronics", "description": "Electronic devices and gadgets", "color": "#3B82F6"},
    {"name": "Accessories", "description": "Computer accessories", "color": "#10B981"},
    {"name": "Office", "description": "Desk and office supplies", "color": "#F59E0B"},
]

# category is the index into DEMO_CATEGORIES
DEMO_PRODUCTS = [
    {"name": "Wireless Mouse", "description": "Ergonomic wireless mouse", "sku": "WM-001",
     "price": 29.99, "cost": 15.0, "quantity": 45, "min_quantity": 10, "category": 0},
    {"name": "Mechanical Keyboard", "description": "RGB mechanical keyboard", "sku": "KB-002",
     "price": 89.99, "cost": 45.0, "quantity": 23, "min_quantity": 5, "category": 0},
    {"name": "USB-C Hub", "description": "7-in-1 USB-C hub", "sku": "HUB-003",
     "price": 49.99, "cost": 22.0, "quantity": 67, "min_quantity": 15, "category": 0},
    {"name": "Monitor Stand", "description": "Adjustable aluminum stand", "sku": "MS-004",
     "price": 39.99, "cost": 18.0, "quantity": 34, "min_quantity": 8, "category": 1},
    {"name": "Webcam HD", "description": "1080p HD webcam", "sku": "WC-005",
     "price": 59.99, "cost": 28.0, "quantity": 8, "min_quantity": 10, "category": 0},
    {"name": "Laptop Sleeve", "description": "15-inch neoprene sleeve", "sku": "LS-006",
     "price": 19.99, "cost": 7.5, "quantity": 3, "min_quantity": 5, "category": 1},
    {"name": "Desk Lamp", "description": "LED desk lamp with dimmer", "sku": "DL-007",
     "price": 34.99, "cost": 14.0, "quantity": 19, "min_quantity": 4, "category": 2},
]

# (days ago, payment method, [(product index, quantity), ...])
DEMO_SALES = [
    (12, "Cash", [(0, 2), (3, 1)]),
    (9, "Card", [(1, 1)]),
    (6, "Mobile", [(2, 3), (6, 1)]),
    (4, "Card", [(4, 1), (0, 1)]),
    (2, None, [(5, 2)]),
    (1, "Cash", [(1, 1), (2, 1), (0, 1)]),
    (0, "Card", [(6, 2)]),
]


def has_products(adapter: StorageAdapter) -> bool:
    row = adapter.select_one("SELECT COUNT(*) AS count FROM products")
    return bool(row and row["count"])


def seed_demo_data(adapter: StorageAdapter, force: bool = False) -> bool:
    """
    Insert the demo catalog and a couple of weeks of sales.

    Skips (returns False) when products already exist, unless force=True;
    a forced seed over active demo SKUs fails on the SKU index.
    Sales are inserted as history: stock levels are taken as-is, not decremented.
    """
    if has_products(adapter) and not force:
        logger.info("Store already has data, skipping seed")
        return False

    now = utcnow()
    created = to_db_timestamp(now - timedelta(days=30))

    with adapter.transaction():
        category_ids = []
        for category in DEMO_CATEGORIES:
            existing = adapter.select_one("SELECT id FROM categories WHERE name = $1", [category["name"]])
            if existing:
                category_ids.append(existing["id"])
                continue
            result = adapter.execute(
                "INSERT INTO categories (name, description, color, created_at) VALUES ($1, $2, $3, $4)",
                [category["name"], category["description"], category["color"], created],
            )
            category_ids.append(result.last_insert_id)

        product_ids = []
        prices = []
        for product in DEMO_PRODUCTS:
            result = adapter.execute(
                """
                INSERT INTO products
                    (name, description, sku, price, cost, quantity, min_quantity, category_id, created_at, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $9)
                """,
                [
                    product["name"],
                    product["description"],
                    product["sku"],
                    product["price"],
                    product["cost"],
                    product["quantity"],
                    product["min_quantity"],
                    category_ids[product["category"]],
                    created,
                ],
            )
            product_ids.append(result.last_insert_id)
            prices.append(product["price"])

        for days_ago, payment_method, lines in DEMO_SALES:
            subtotals = [round_money(prices[index] * qty) for index, qty in lines]
            sale_id = adapter.execute(
                "INSERT INTO sales (total_amount, payment_method, notes, created_at) VALUES ($1, $2, $3, $4)",
                [
                    round_money(sum(subtotals)),
                    payment_method,
                    None,
                    to_db_timestamp(now - timedelta(days=days_ago)),
                ],
            ).last_insert_id
            for (index, qty), subtotal in zip(lines, subtotals):
                adapter.execute(
                    """
                    INSERT INTO sale_items (sale_id, product_id, quantity, unit_price, subtotal)
                    VALUES ($1, $2, $3, $4, $5)
                    """,
                    [sale_id, product_ids[index], qty, prices[index], subtotal],
                )

    logger.info(
        "Seeded %d categories, %d products, %d sales",
        len(DEMO_CATEGORIES), len(DEMO_PRODUCTS), len(DEMO_SALES),
    )
    return True
