# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

from __future__ import annotations

from ..money import round_money
from ..storage import StorageAdapter
from ..time_utils import Bound, local_day_bounds, resolve_range, trailing_range
from .product_service import get_product, list_low_stock

NOT_SPECIFIED_PAYMENT = "Not specified"


def _where(column: str, start: Bound, end: Bound, params: list) -> str:
    """
    WHERE clause restricting `column` to [start, end], appending the bound
    values to `params`. Empty when either bound is missing (all-time).
    """
    bounds = resolve_range(start, end)
    if bounds is None:
        return ""
    params.extend(bounds)
    return f"WHERE {column} >= ${len(params) - 1} AND {column} <= ${len(params)}"


def sales_report(adapter: StorageAdapter, start: Bound, end: Bound) -> dict:
    params: list = []
    where = _where("s.created_at", start, end, params)

    summary = adapter.select_one(
        f"""
        SELECT COUNT(*) AS total_sales, COALESCE(SUM(s.total_amount), 0) AS total_revenue
        FROM sales s
        {where}
        """,
        params,
    )
    items = adapter.select_one(
        f"""
        SELECT COALESCE(SUM(si.quantity), 0) AS items_sold
        FROM sale_items si
        JOIN sales s ON si.sale_id = s.id
        {where}
        """,
        params,
    )
    by_day = adapter.select(
        f"""
        SELECT DATE(s.created_at) AS date, SUM(s.total_amount) AS total, COUNT(*) AS count
        FROM sales s
        {where}
        GROUP BY DATE(s.created_at)
        ORDER BY date
        """,
        params,
    )

    return {
        "total_sales": int(summary["total_sales"] or 0),
        "total_revenue": round_money(summary["total_revenue"]),
        "items_sold": int(items["items_sold"] or 0),
        "sales_by_day": [
            {
                "date": str(row["date"]),
                "total": round_money(row["total"]),
                "count": int(row["count"]),
            }
            for row in by_day
        ],
    }


def todays_sales(adapter: StorageAdapter) -> dict:
    """Count and revenue for the current local calendar day."""
    row = adapter.select_one(
        """
        SELECT COUNT(*) AS count, COALESCE(SUM(total_amount), 0) AS total
        FROM sales
        WHERE created_at >= $1 AND created_at <= $2
        """,
        list(local_day_bounds()),
    )
    return {"count": int(row["count"] or 0), "total": round_money(row["total"])}


def inventory_value(adapter: StorageAdapter) -> dict:
    """
    Cost-basis and retail valuation of stock on hand.

    Scans the whole products table, soft-deleted rows included.
    """
    row = adapter.select_one(
        """
        SELECT
            COALESCE(SUM(cost * quantity), 0) AS total_cost,
            COALESCE(SUM(price * quantity), 0) AS total_retail
        FROM products
        """
    )
    return {
        "total_cost": round_money(row["total_cost"]),
        "total_retail": round_money(row["total_retail"]),
    }


def top_selling_products(
    adapter: StorageAdapter,
    limit: int = 10,
    start: Bound = None,
    end: Bound = None,
) -> list[dict]:
    params: list = []
    where = _where("s.created_at", start, end, params)
    params.append(limit)

    rows = adapter.select(
        f"""
        SELECT
            p.id AS product_id,
            p.name AS product_name,
            COALESCE(SUM(si.quantity), 0) AS total_quantity,
            COALESCE(SUM(si.subtotal), 0) AS total_revenue
        FROM products p
        JOIN sale_items si ON si.product_id = p.id
        JOIN sales s ON si.sale_id = s.id
        {where}
        GROUP BY p.id, p.name
        HAVING COALESCE(SUM(si.quantity), 0) > 0
        ORDER BY total_quantity DESC, p.id
        LIMIT ${len(params)}
        """,
        params,
    )
    return [
        {
            "product_id": row["product_id"],
            "product_name": row["product_name"],
            "total_quantity": int(row["total_quantity"]),
            "total_revenue": round_money(row["total_revenue"]),
        }
        for row in rows
    ]


def sales_by_payment_method(adapter: StorageAdapter, start: Bound = None, end: Bound = None) -> list[dict]:
    params: list = [NOT_SPECIFIED_PAYMENT]
    where = _where("created_at", start, end, params)

    rows = adapter.select(
        f"""
        SELECT
            COALESCE(payment_method, $1) AS payment_method,
            COUNT(*) AS count,
            COALESCE(SUM(total_amount), 0) AS total
        FROM sales
        {where}
        GROUP BY COALESCE(payment_method, $1)
        ORDER BY total DESC
        """,
        params,
    )
    return [
        {
            "payment_method": row["payment_method"],
            "count": int(row["count"]),
            "total": round_money(row["total"]),
        }
        for row in rows
    ]


def profit_report(adapter: StorageAdapter, start: Bound = None, end: Bound = None) -> dict:
    """
    Revenue, cost and profit per product.

    Cost uses each product's cost at report time, not at sale time.
    """
    params: list = []
    where = _where("s.created_at", start, end, params)

    rows = adapter.select(
        f"""
        SELECT
            p.id AS product_id,
            p.name AS product_name,
            COALESCE(SUM(si.quantity), 0) AS quantity_sold,
            COALESCE(SUM(si.subtotal), 0) AS revenue,
            COALESCE(SUM(si.quantity * p.cost), 0) AS cost,
            COALESCE(SUM(si.subtotal - (si.quantity * p.cost)), 0) AS profit
        FROM products p
        JOIN sale_items si ON si.product_id = p.id
        JOIN sales s ON si.sale_id = s.id
        {where}
        GROUP BY p.id, p.name
        HAVING COALESCE(SUM(si.quantity), 0) > 0
        ORDER BY profit DESC, p.id
        """,
        params,
    )

    by_product = [
        {
            "product_id": row["product_id"],
            "product_name": row["product_name"],
            "quantity_sold": int(row["quantity_sold"]),
            "revenue": round_money(row["revenue"]),
            "cost": round_money(row["cost"]),
            "profit": round_money(row["profit"]),
        }
        for row in rows
    ]

    total_revenue = round_money(sum(p["revenue"] for p in by_product))
    total_cost = round_money(sum(p["cost"] for p in by_product))
    gross_profit = round_money(total_revenue - total_cost)
    profit_margin = (gross_profit / total_revenue * 100.0) if total_revenue > 0 else 0.0

    return {
        "total_revenue": total_revenue,
        "total_cost": total_cost,
        "gross_profit": gross_profit,
        "profit_margin": profit_margin,
        "by_product": by_product,
    }


def average_sale_value(adapter: StorageAdapter, start: Bound = None, end: Bound = None) -> dict:
    params: list = []
    where = _where("created_at", start, end, params)

    row = adapter.select_one(
        f"""
        SELECT
            COALESCE(AVG(total_amount), 0) AS average,
            COUNT(*) AS count,
            COALESCE(SUM(total_amount), 0) AS total
        FROM sales
        {where}
        """,
        params,
    )
    return {
        "average": round_money(row["average"]),
        "count": int(row["count"] or 0),
        "total": round_money(row["total"]),
    }


def product_sales_history(adapter: StorageAdapter, product_id: int) -> dict | None:
    """Every sale line for an active product, newest first, with totals."""
    product = get_product(adapter, product_id)
    if product is None:
        return None

    sales = adapter.select(
        """
        SELECT
            si.sale_id,
            s.created_at AS date,
            si.quantity,
            si.unit_price,
            si.subtotal
        FROM sale_items si
        JOIN sales s ON si.sale_id = s.id
        WHERE si.product_id = $1
        ORDER BY s.created_at DESC, si.id DESC
        """,
        [product_id],
    )

    return {
        "product_id": product["id"],
        "product_name": product["name"],
        "sales": sales,
        "total_quantity": sum(int(s["quantity"]) for s in sales),
        "total_revenue": round_money(sum(s["subtotal"] for s in sales)),
    }


def dashboard_summary(adapter: StorageAdapter, days: int = 7) -> dict:
    """Landing-screen figures: today, stock valuation, reorder count, trailing sales."""
    start, end = trailing_range(days)
    return {
        "today": todays_sales(adapter),
        "inventory_value": inventory_value(adapter),
        "low_stock_count": len(list_low_stock(adapter)),
        "days": days,
        "sales_report": sales_report(adapter, start, end),
    }
