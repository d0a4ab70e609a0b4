# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..services import sales_service
from ..services.sales_service import SaleError
from ..storage import get_adapter
from ..validation import ValidationError, validate_sale_payload


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.post("")
def create_sale_route():
    """
    Record a sale.

    Body: {"items": [{"product_id": 1, "quantity": 2}], "payment_method": "Cash", "notes": "..."}
    """
    try:
        data = validate_sale_payload(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        sale = sales_service.create_sale(get_adapter(), data)
        return jsonify({"sale": sale}), 201

    except SaleError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("")
def list_sales_route():
    """
    List sales, newest first.

    Query params:
    - start, end: ISO-8601 (optional) - inclusive window; both required to filter
    """
    start = request.args.get("start")
    end = request.args.get("end")
    adapter = get_adapter()

    try:
        if start and end:
            sales = sales_service.list_sales_in_range(adapter, start, end)
        else:
            sales = sales_service.list_sales(adapter)
    except ValueError:
        return jsonify({"error": "start and end must be ISO-8601 dates"}), 400

    return jsonify({"items": sales, "count": len(sales)}), 200


@sales_bp.get("/<int:sale_id>")
def get_sale_route(sale_id: int):
    sale = sales_service.get_sale(get_adapter(), sale_id)
    if sale is None:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"sale": sale}), 200


@sales_bp.delete("/<int:sale_id>")
def delete_sale_route(sale_id: int):
    """Hard delete. Stock consumed by the sale is not restored."""
    try:
        deleted = sales_service.delete_sale(get_adapter(), sale_id)
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return jsonify({"error": "Internal server error"}), 500

    if not deleted:
        return jsonify({"error": "Sale not found"}), 404
    return jsonify({"ok": True}), 200
