# backend/shelfpos/routes/system.py
"""
System health endpoint.

Reports database connectivity and row counts for deployment debugging.
"""

import time
from flask import Blueprint, current_app

from ..storage import get_adapter

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        row = get_adapter().select_one(
            """
            SELECT
                (SELECT COUNT(*) FROM categories) AS categories,
                (SELECT COUNT(*) FROM products WHERE deleted_at IS NULL) AS products,
                (SELECT COUNT(*) FROM sales) AS sales
            """
        )
        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": row,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return {"status": database["status"], "database": database}, status_code
