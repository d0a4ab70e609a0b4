# backend/shelfpos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/shelfpos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///shelfpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Populate demo catalog/sales on startup when the products table is empty
    SEED_DEMO_DATA = os.environ.get("SEED_DEMO_DATA", "false").lower() == "true"

    TOP_SELLERS_DEFAULT_LIMIT = int(os.environ.get("TOP_SELLERS_DEFAULT_LIMIT", "10"))
    REPORT_DEFAULT_DAYS = int(os.environ.get("REPORT_DEFAULT_DAYS", "30"))
    DASHBOARD_DEFAULT_DAYS = int(os.environ.get("DASHBOARD_DEFAULT_DAYS", "7"))
