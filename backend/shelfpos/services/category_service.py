# Overview: Service-layer operations for categories; encapsulates business logic and database work.

from __future__ import annotations

import logging

from ..storage import StorageAdapter
from ..time_utils import db_now

logger = logging.getLogger(__name__)

CATEGORY_MUTABLE_FIELDS = ("name", "description", "color")


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def list_categories(adapter: StorageAdapter) -> list[dict]:
    return adapter.select("SELECT * FROM categories ORDER BY name, id")


def get_category(adapter: StorageAdapter, category_id: int) -> dict | None:
    return adapter.select_one("SELECT * FROM categories WHERE id = $1", [category_id])


def create_category(adapter: StorageAdapter, data: dict) -> dict:
    """
    Insert a category and return the stored row.

    Raises the store's IntegrityError when the name is already taken.
    """
    result = adapter.execute(
        "INSERT INTO categories (name, description, color, created_at) VALUES ($1, $2, $3, $4)",
        [
            data["name"],
            _blank_to_none(data.get("description")),
            _blank_to_none(data.get("color")),
            db_now(),
        ],
    )
    category = get_category(adapter, result.last_insert_id)
    if category is None:
        raise RuntimeError("Failed to create category")
    return category


def update_category(adapter: StorageAdapter, category_id: int, patch: dict) -> dict | None:
    """Write only the fields present in `patch`; an empty patch is a read."""
    assignments: list[str] = []
    values: list = []
    for field in CATEGORY_MUTABLE_FIELDS:
        if field in patch:
            values.append(patch[field])
            assignments.append(f"{field} = ${len(values)}")

    if not assignments:
        return get_category(adapter, category_id)

    values.append(category_id)
    adapter.execute(
        f"UPDATE categories SET {', '.join(assignments)} WHERE id = ${len(values)}",
        values,
    )
    return get_category(adapter, category_id)


def delete_category(adapter: StorageAdapter, category_id: int) -> bool:
    """Detach products from the category, then remove it."""
    with adapter.transaction():
        detached = adapter.execute(
            "UPDATE products SET category_id = NULL WHERE category_id = $1",
            [category_id],
        )
        result = adapter.execute("DELETE FROM categories WHERE id = $1", [category_id])

    if result.rows_affected:
        logger.info("Deleted category %s (%s products detached)", category_id, detached.rows_affected)
    return result.rows_affected > 0
