# Overview: Flask API routes for category operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from ..models import Category
from ..services import category_service
from ..storage import get_adapter
from ..validation import ModelValidationPolicy, ValidationError, validate_payload

CATEGORY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "color"},
    required_on_create={"name"},
)

categories_bp = Blueprint("categories", __name__, url_prefix="/api/categories")


@categories_bp.get("")
def list_categories_route():
    categories = category_service.list_categories(get_adapter())
    return jsonify({"items": categories, "count": len(categories)}), 200


@categories_bp.get("/<int:category_id>")
def get_category_route(category_id: int):
    category = category_service.get_category(get_adapter(), category_id)
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category), 200


@categories_bp.post("")
def create_category_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=False)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        created = category_service.create_category(get_adapter(), patch)
    except IntegrityError:
        return jsonify({"error": "Category name already exists"}), 409

    return jsonify(created), 201


@categories_bp.put("/<int:category_id>")
def update_category_route(category_id: int):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Category, payload=payload, policy=CATEGORY_POLICY, partial=True)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        updated = category_service.update_category(get_adapter(), category_id, patch)
    except IntegrityError:
        return jsonify({"error": "Category name already exists"}), 409

    if updated is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(updated), 200


@categories_bp.delete("/<int:category_id>")
def delete_category_route(category_id: int):
    try:
        deleted = category_service.delete_category(get_adapter(), category_id)
    except Exception:
        current_app.logger.exception("Failed to delete category")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Category not found"}), 404
    return jsonify({"ok": True}), 200
