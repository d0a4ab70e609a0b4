# backend/shelfpos/services/product_service.py
"""
Products Service

Every read filters on deleted_at IS NULL. A soft-deleted product is invisible
here but stays in the table so past sale_items keep resolving, and its SKU is
free for reuse (uniqueness is enforced on active rows only).
"""
from __future__ import annotations

import logging

from ..storage import StorageAdapter
from ..time_utils import db_now
from ..validation import ValidationError

logger = logging.getLogger(__name__)

PRODUCT_MUTABLE_FIELDS = (
    "name",
    "description",
    "sku",
    "price",
    "cost",
    "quantity",
    "min_quantity",
    "category_id",
)

_SELECT_ACTIVE = """
    SELECT p.*, c.name AS category_name
    FROM products p
    LEFT JOIN categories c ON p.category_id = c.id
    WHERE p.deleted_at IS NULL
"""


def list_products(adapter: StorageAdapter) -> list[dict]:
    return adapter.select(_SELECT_ACTIVE + " ORDER BY p.name, p.id")


def get_product(adapter: StorageAdapter, product_id: int) -> dict | None:
    return adapter.select_one(_SELECT_ACTIVE + " AND p.id = $1", [product_id])


def search_products(adapter: StorageAdapter, text: str) -> list[dict]:
    """
    Case-insensitive substring match on name, SKU or category name.

    % and _ in the search text match literally.
    """
    needle = (text or "").strip().lower()
    needle = needle.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{needle}%"
    return adapter.select(
        _SELECT_ACTIVE
        + r"""
          AND (LOWER(p.name) LIKE $1 ESCAPE '\'
               OR LOWER(p.sku) LIKE $1 ESCAPE '\'
               OR LOWER(c.name) LIKE $1 ESCAPE '\')
        ORDER BY p.name, p.id
        """,
        [pattern],
    )


def list_products_by_category(adapter: StorageAdapter, category_id: int) -> list[dict]:
    return adapter.select(
        _SELECT_ACTIVE + " AND p.category_id = $1 ORDER BY p.name, p.id",
        [category_id],
    )


def list_low_stock(adapter: StorageAdapter) -> list[dict]:
    """Reorder candidates: at or below their threshold, emptiest first."""
    return adapter.select(
        _SELECT_ACTIVE + " AND p.quantity <= p.min_quantity ORDER BY p.quantity ASC, p.name"
    )


def create_product(adapter: StorageAdapter, data: dict) -> dict:
    """
    Insert a product.

    Required: name, price, cost, quantity, min_quantity.
    Optional: description, sku, category_id.

    Raises:
        KeyError: a required field is missing
        IntegrityError: the SKU is already used by an active product, or
            category_id does not reference a category
    """
    ts = db_now()
    result = adapter.execute(
        """
        INSERT INTO products
            (name, description, sku, price, cost, quantity, min_quantity, category_id, created_at, updated_at)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $9)
        """,
        [
            data["name"],
            data.get("description"),
            data.get("sku"),
            data["price"],
            data["cost"],
            data["quantity"],
            data["min_quantity"],
            data.get("category_id"),
            ts,
        ],
    )
    product = get_product(adapter, result.last_insert_id)
    if product is None:
        raise RuntimeError("Failed to create product")
    return product


def update_product(adapter: StorageAdapter, product_id: int, patch: dict) -> dict | None:
    """
    Apply the fields present in `patch` and refresh updated_at.

    An empty patch touches nothing, updated_at included.
    """
    assignments: list[str] = []
    values: list = []
    for field in PRODUCT_MUTABLE_FIELDS:
        if field in patch:
            values.append(patch[field])
            assignments.append(f"{field} = ${len(values)}")

    if not assignments:
        return get_product(adapter, product_id)

    values.append(db_now())
    assignments.append(f"updated_at = ${len(values)}")
    values.append(product_id)

    adapter.execute(
        f"UPDATE products SET {', '.join(assignments)} WHERE id = ${len(values)} AND deleted_at IS NULL",
        values,
    )
    return get_product(adapter, product_id)


def delete_product(adapter: StorageAdapter, product_id: int) -> bool:
    """
    Soft-delete a product.

    Returns:
        True if an active product was deleted, False if not found or already deleted
    """
    result = adapter.execute(
        "UPDATE products SET deleted_at = $1 WHERE id = $2 AND deleted_at IS NULL",
        [db_now(), product_id],
    )
    if result.rows_affected:
        logger.info("Soft-deleted product %s", product_id)
    return result.rows_affected > 0


def adjust_quantity(adapter: StorageAdapter, product_id: int, delta: int) -> dict | None:
    """Add a signed delta to stock. No floor: the result may be negative."""
    result = adapter.execute(
        """
        UPDATE products SET quantity = quantity + $1, updated_at = $2
        WHERE id = $3 AND deleted_at IS NULL
        """,
        [delta, db_now(), product_id],
    )
    if not result.rows_affected:
        return None
    return get_product(adapter, product_id)


def restock(
    adapter: StorageAdapter,
    product_id: int,
    quantity: int,
    new_cost: float | None = None,
) -> dict | None:
    """
    Receive stock, optionally overwriting the unit cost.

    Raises:
        ValidationError: quantity is not positive
    """
    if quantity is None or quantity <= 0:
        raise ValidationError("quantity must be > 0 for restock")

    if get_product(adapter, product_id) is None:
        return None

    if new_cost is not None:
        adapter.execute(
            """
            UPDATE products SET quantity = quantity + $1, cost = $2, updated_at = $3
            WHERE id = $4
            """,
            [quantity, new_cost, db_now(), product_id],
        )
    else:
        adapter.execute(
            "UPDATE products SET quantity = quantity + $1, updated_at = $2 WHERE id = $3",
            [quantity, db_now(), product_id],
        )

    logger.info("Restocked product %s by %s", product_id, quantity)
    return get_product(adapter, product_id)
