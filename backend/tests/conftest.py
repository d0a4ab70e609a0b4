"""
Pytest fixtures for shelfpos backend tests.

Provides an in-memory database, a storage adapter, a small seeded catalog,
and a test client.
"""

import pytest

from shelfpos import create_app
from shelfpos.extensions import db
from shelfpos.services import category_service, product_service
from shelfpos.storage import StorageAdapter


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SEED_DEMO_DATA': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def adapter(db_session):
    return StorageAdapter(db_session)


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seeded(adapter):
    """
    Two categories and five products.

    Only the webcam starts at or below its reorder threshold.
    """
    electronics = category_service.create_category(
        adapter, {"name": "Electronics", "description": "Electronic devices", "color": "#3B82F6"}
    )
    accessories = category_service.create_category(
        adapter, {"name": "Accessories", "description": "Computer accessories", "color": "#10B981"}
    )

    def product(name, sku, price, cost, quantity, min_quantity, category):
        return product_service.create_product(adapter, {
            "name": name,
            "sku": sku,
            "price": price,
            "cost": cost,
            "quantity": quantity,
            "min_quantity": min_quantity,
            "category_id": category["id"],
        })

    return {
        "electronics": electronics,
        "accessories": accessories,
        "mouse": product("Wireless Mouse", "WM-001", 29.99, 15.0, 45, 10, electronics),
        "keyboard": product("Mechanical Keyboard", "KB-002", 89.99, 45.0, 23, 5, electronics),
        "hub": product("USB-C Hub", "HUB-003", 49.99, 22.0, 67, 15, electronics),
        "stand": product("Monitor Stand", "MS-004", 39.99, 18.0, 34, 8, accessories),
        "webcam": product("Webcam HD", "WC-005", 59.99, 28.0, 8, 10, electronics),
    }
