from __future__ import annotations

from ..extensions import db


class Category(db.Model):
    """Product grouping. Deleting one orphans its products rather than removing them."""
    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)
    # Display color, e.g. "#3B82F6"
    color = db.Column(db.String(16), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Category id={self.id} name={self.name!r}>"


class Product(db.Model):
    """
    Product master data.

    SOFT DELETE:
    deleted_at is a tombstone. Every standard read filters on
    deleted_at IS NULL; historical sale_items keep pointing at the row.

    SKU uniqueness only applies to active rows (partial unique index), so a
    deleted product's SKU can be reused by a new product without rewriting it.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index(
            "uq_products_sku_active",
            "sku",
            unique=True,
            sqlite_where=db.text("deleted_at IS NULL"),
            postgresql_where=db.text("deleted_at IS NULL"),
        ),
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    sku = db.Column(db.String(64), nullable=True)

    price = db.Column(db.Float, nullable=False, default=0, server_default="0")
    cost = db.Column(db.Float, nullable=False, default=0, server_default="0")

    # Signed: sales never block on stock, so this may go negative
    quantity = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    # Reorder threshold
    min_quantity = db.Column(db.Integer, nullable=False, default=0, server_default="0")

    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    deleted_at = db.Column(db.DateTime, nullable=True)

    category = db.relationship("Category", backref=db.backref("products", lazy=True))

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r}>"
