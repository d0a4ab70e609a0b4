from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from ..services import reporting_service
from ..storage import get_adapter
from ..time_utils import trailing_range


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _range_args(default_days: int | None = None):
    """
    Report window from the query string.

    start/end take precedence; otherwise days=N means the trailing N days;
    otherwise default_days, or all-time when that is None.
    """
    start = request.args.get("start")
    end = request.args.get("end")
    if start and end:
        return start, end

    days = request.args.get("days", default_days, type=int)
    if days is None:
        return None, None
    return trailing_range(days)


def _bad_range():
    return jsonify({"error": "start and end must be ISO-8601 dates"}), 400


@reports_bp.get("/sales")
def sales_report():
    start, end = _range_args(current_app.config["REPORT_DEFAULT_DAYS"])
    try:
        report = reporting_service.sales_report(get_adapter(), start, end)
    except ValueError:
        return _bad_range()
    return jsonify(report), 200


@reports_bp.get("/today")
def todays_sales():
    return jsonify(reporting_service.todays_sales(get_adapter())), 200


@reports_bp.get("/inventory-value")
def inventory_value():
    return jsonify(reporting_service.inventory_value(get_adapter())), 200


@reports_bp.get("/top-products")
def top_products():
    limit = request.args.get("limit", current_app.config["TOP_SELLERS_DEFAULT_LIMIT"], type=int)
    if limit is None or limit <= 0:
        return jsonify({"error": "limit must be a positive integer"}), 400

    start, end = _range_args()
    try:
        rows = reporting_service.top_selling_products(get_adapter(), limit, start, end)
    except ValueError:
        return _bad_range()
    return jsonify({"items": rows, "count": len(rows)}), 200


@reports_bp.get("/payment-methods")
def payment_methods():
    start, end = _range_args()
    try:
        rows = reporting_service.sales_by_payment_method(get_adapter(), start, end)
    except ValueError:
        return _bad_range()
    return jsonify({"items": rows, "count": len(rows)}), 200


@reports_bp.get("/profit")
def profit():
    start, end = _range_args()
    try:
        report = reporting_service.profit_report(get_adapter(), start, end)
    except ValueError:
        return _bad_range()
    return jsonify(report), 200


@reports_bp.get("/average-sale")
def average_sale():
    start, end = _range_args()
    try:
        report = reporting_service.average_sale_value(get_adapter(), start, end)
    except ValueError:
        return _bad_range()
    return jsonify(report), 200


@reports_bp.get("/dashboard")
def dashboard():
    days = request.args.get("days", current_app.config["DASHBOARD_DEFAULT_DAYS"], type=int)
    if days is None or days <= 0:
        return jsonify({"error": "days must be a positive integer"}), 400
    return jsonify(reporting_service.dashboard_summary(get_adapter(), days)), 200
