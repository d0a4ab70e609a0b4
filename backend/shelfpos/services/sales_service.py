"""
Sales Service - immediate, single-step sale processing

A sale is written in one pass: header, line items with a price snapshot, and
a stock decrement per line. Stock is never checked, so quantities may go
negative. Everything runs in one transaction; a missing product aborts the
whole sale before anything is committed.
"""

from __future__ import annotations

import logging

from ..money import round_money
from ..storage import StorageAdapter
from ..time_utils import db_now, range_bound
from .product_service import get_product

logger = logging.getLogger(__name__)


class SaleError(Exception):
    """Raised for sale operation errors."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


def _sale_items(adapter: StorageAdapter, sale_id: int) -> list[dict]:
    return adapter.select(
        """
        SELECT si.*, p.name AS product_name
        FROM sale_items si
        LEFT JOIN products p ON si.product_id = p.id
        WHERE si.sale_id = $1
        ORDER BY si.id
        """,
        [sale_id],
    )


def create_sale(adapter: StorageAdapter, data: dict) -> dict:
    """
    Record a sale and decrement stock for each line.

    Args:
        data: {"items": [{"product_id", "quantity"}], "payment_method"?, "notes"?}

    Returns:
        The sale row with "items", each carrying the product name at sale time.

    Raises:
        SaleError: a product_id does not resolve to an active product
    """
    items = data.get("items") or []

    with adapter.transaction():
        lines = []
        for item in items:
            product = get_product(adapter, item["product_id"])
            if product is None:
                raise SaleError(
                    f"Product {item['product_id']} not found",
                    details={"product_id": item["product_id"]},
                )

            unit_price = product["price"]
            lines.append({
                "product_id": product["id"],
                "product_name": product["name"],
                "quantity": item["quantity"],
                "unit_price": unit_price,
                "subtotal": round_money(unit_price * item["quantity"]),
            })

        total_amount = round_money(sum(line["subtotal"] for line in lines))
        ts = db_now()

        sale_id = adapter.execute(
            "INSERT INTO sales (total_amount, payment_method, notes, created_at) VALUES ($1, $2, $3, $4)",
            [total_amount, data.get("payment_method") or None, data.get("notes") or None, ts],
        ).last_insert_id

        sale_items = []
        for line in lines:
            item_id = adapter.execute(
                """
                INSERT INTO sale_items (sale_id, product_id, quantity, unit_price, subtotal)
                VALUES ($1, $2, $3, $4, $5)
                """,
                [sale_id, line["product_id"], line["quantity"], line["unit_price"], line["subtotal"]],
            ).last_insert_id

            adapter.execute(
                "UPDATE products SET quantity = quantity - $1, updated_at = $2 WHERE id = $3",
                [line["quantity"], ts, line["product_id"]],
            )

            sale_items.append({"id": item_id, "sale_id": sale_id, **line})

        sale = adapter.select_one("SELECT * FROM sales WHERE id = $1", [sale_id])

    logger.info("Created sale %s: %d items, total %.2f", sale_id, len(sale_items), total_amount)
    return {**sale, "items": sale_items}


def get_sale(adapter: StorageAdapter, sale_id: int) -> dict | None:
    sale = adapter.select_one("SELECT * FROM sales WHERE id = $1", [sale_id])
    if sale is None:
        return None
    return {**sale, "items": _sale_items(adapter, sale_id)}


def list_sales(adapter: StorageAdapter) -> list[dict]:
    return adapter.select("SELECT * FROM sales ORDER BY created_at DESC, id DESC")


def list_sales_in_range(adapter: StorageAdapter, start, end) -> list[dict]:
    """Sales with start <= created_at <= end, newest first."""
    return adapter.select(
        """
        SELECT * FROM sales
        WHERE created_at >= $1 AND created_at <= $2
        ORDER BY created_at DESC, id DESC
        """,
        [range_bound(start), range_bound(end, end=True)],
    )


def delete_sale(adapter: StorageAdapter, sale_id: int) -> bool:
    """
    Hard-delete a sale and its line items.

    Consumed stock is NOT returned to the products.
    """
    with adapter.transaction():
        adapter.execute("DELETE FROM sale_items WHERE sale_id = $1", [sale_id])
        result = adapter.execute("DELETE FROM sales WHERE id = $1", [sale_id])

    if result.rows_affected:
        logger.info("Deleted sale %s", sale_id)
    return result.rows_affected > 0
