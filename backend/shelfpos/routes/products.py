# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/shelfpos/routes/products.py
"""
Product management routes.

Deleted products answer 404 everywhere: the service layer only ever sees
active rows.
"""
import math

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ..models import Product
from ..services import product_service, reporting_service
from ..storage import get_adapter
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "description", "sku", "price", "cost",
        "quantity", "min_quantity", "category_id",
    },
    required_on_create={"name", "price", "cost", "quantity", "min_quantity"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _conflict():
    return jsonify({"error": "SKU already in use or category does not exist"}), 409


def _not_found():
    return jsonify({"error": "Product not found"}), 404


@products_bp.get("")
def list_products_route():
    """
    List active products.

    Query params:
    - q: str (optional) - case-insensitive match on name, SKU or category name
    - category_id: int (optional) - restrict to one category
    """
    q = request.args.get("q")
    category_id = request.args.get("category_id", type=int)
    adapter = get_adapter()

    if q:
        products = product_service.search_products(adapter, q)
    elif category_id is not None:
        products = product_service.list_products_by_category(adapter, category_id)
    else:
        products = product_service.list_products(adapter)

    return jsonify({"items": products, "count": len(products)}), 200


@products_bp.get("/low-stock")
def low_stock_route():
    products = product_service.list_low_stock(get_adapter())
    return jsonify({"items": products, "count": len(products)}), 200


@products_bp.get("/<int:product_id>")
def get_product_route(product_id: int):
    product = product_service.get_product(get_adapter(), product_id)
    if product is None:
        return _not_found()
    return jsonify(product), 200


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        created = product_service.create_product(get_adapter(), patch)
    except IntegrityError:
        return _conflict()

    return jsonify(created), 201


@products_bp.put("/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        updated = product_service.update_product(get_adapter(), product_id, patch)
    except IntegrityError:
        return _conflict()

    if updated is None:
        return _not_found()
    return jsonify(updated), 200


@products_bp.delete("/<int:product_id>")
def delete_product_route(product_id: int):
    if not product_service.delete_product(get_adapter(), product_id):
        return _not_found()
    return jsonify({"ok": True}), 200


@products_bp.post("/<int:product_id>/adjust")
def adjust_quantity_route(product_id: int):
    """Body: {"delta": int} - signed, stock may go negative."""
    payload = request.get_json(silent=True) or {}
    delta = payload.get("delta")
    if isinstance(delta, bool) or not isinstance(delta, int):
        return jsonify({"error": "delta must be an integer"}), 400

    product = product_service.adjust_quantity(get_adapter(), product_id, delta)
    if product is None:
        return _not_found()
    return jsonify(product), 200


@products_bp.post("/<int:product_id>/restock")
def restock_route(product_id: int):
    """Body: {"quantity": int > 0, "cost": number (optional)}"""
    payload = request.get_json(silent=True) or {}
    quantity = payload.get("quantity")
    cost = payload.get("cost")

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return jsonify({"error": "quantity must be an integer"}), 400
    if cost is not None:
        if isinstance(cost, bool) or not isinstance(cost, (int, float)) or not math.isfinite(cost) or cost < 0:
            return jsonify({"error": "cost must be a finite number >= 0"}), 400
        cost = float(cost)

    try:
        product = product_service.restock(get_adapter(), product_id, quantity, new_cost=cost)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to restock product")
        return jsonify({"error": "Internal server error"}), 500

    if product is None:
        return _not_found()
    return jsonify(product), 200


@products_bp.get("/<int:product_id>/history")
def product_history_route(product_id: int):
    history = reporting_service.product_sales_history(get_adapter(), product_id)
    if history is None:
        return _not_found()
    return jsonify(history), 200
