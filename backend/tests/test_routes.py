"""
HTTP-level tests: status codes, payload validation and JSON shapes.
"""


def test_health(client, seeded):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "healthy"
    assert body["database"]["details"] == {"categories": 2, "products": 5, "sales": 0}


# ---------------------------------------------------------------------------
# categories
# ---------------------------------------------------------------------------

def test_category_crud(client):
    resp = client.post("/api/categories", json={"name": "Office", "color": "#F59E0B"})
    assert resp.status_code == 201
    category_id = resp.get_json()["id"]

    resp = client.put(f"/api/categories/{category_id}", json={"description": "Desk supplies"})
    assert resp.status_code == 200
    assert resp.get_json()["description"] == "Desk supplies"

    resp = client.get("/api/categories")
    assert resp.get_json()["count"] == 1

    assert client.delete(f"/api/categories/{category_id}").status_code == 200
    assert client.get(f"/api/categories/{category_id}").status_code == 404


def test_create_category_requires_name(client):
    resp = client.post("/api/categories", json={"color": "#000000"})
    assert resp.status_code == 400
    assert "name" in resp.get_json()["error"]


def test_duplicate_category_is_conflict(client, seeded):
    resp = client.post("/api/categories", json={"name": "Electronics"})
    assert resp.status_code == 409


def test_delete_missing_category(client):
    assert client.delete("/api/categories/9999").status_code == 404


# ---------------------------------------------------------------------------
# products
# ---------------------------------------------------------------------------

def test_create_product(client, seeded):
    resp = client.post("/api/products", json={
        "name": "Desk Lamp",
        "sku": "DL-007",
        "price": "34.99",
        "cost": 14,
        "quantity": 19,
        "min_quantity": 4,
        "category_id": seeded["accessories"]["id"],
    })

    assert resp.status_code == 201
    product = resp.get_json()
    assert product["price"] == 34.99
    assert product["cost"] == 14.0
    assert product["category_name"] == "Accessories"


def test_create_product_validation_errors(client):
    base = {"name": "Lamp", "price": 10, "cost": 5, "quantity": 1, "min_quantity": 0}

    assert client.post("/api/products", json={"name": "Lamp"}).status_code == 400
    assert client.post("/api/products", json={**base, "price": -1}).status_code == 400
    assert client.post("/api/products", json={**base, "quantity": 1.5}).status_code == 400
    assert client.post("/api/products", json={**base, "min_quantity": -1}).status_code == 400
    assert client.post("/api/products", json={**base, "name": "  "}).status_code == 400
    assert client.post("/api/products", json={**base, "deleted_at": "now"}).status_code == 400


def test_create_product_duplicate_sku_is_conflict(client, seeded):
    resp = client.post("/api/products", json={
        "name": "Another Mouse", "sku": "WM-001", "price": 10, "cost": 5, "quantity": 1, "min_quantity": 0,
    })
    assert resp.status_code == 409


def test_list_products_filters(client, seeded):
    assert client.get("/api/products").get_json()["count"] == 5

    by_query = client.get("/api/products?q=hub").get_json()
    assert [p["sku"] for p in by_query["items"]] == ["HUB-003"]

    by_category = client.get(f"/api/products?category_id={seeded['accessories']['id']}").get_json()
    assert [p["name"] for p in by_category["items"]] == ["Monitor Stand"]


def test_low_stock_route(client, seeded):
    body = client.get("/api/products/low-stock").get_json()
    assert [p["name"] for p in body["items"]] == ["Webcam HD"]


def test_update_and_delete_product(client, seeded):
    product_id = seeded["stand"]["id"]

    resp = client.put(f"/api/products/{product_id}", json={"price": 44.99})
    assert resp.status_code == 200
    assert resp.get_json()["price"] == 44.99

    assert client.delete(f"/api/products/{product_id}").status_code == 200
    assert client.get(f"/api/products/{product_id}").status_code == 404
    assert client.delete(f"/api/products/{product_id}").status_code == 404
    assert client.put(f"/api/products/{product_id}", json={"price": 1}).status_code == 404


def test_adjust_and_restock(client, seeded):
    product_id = seeded["webcam"]["id"]

    resp = client.post(f"/api/products/{product_id}/adjust", json={"delta": -3})
    assert resp.status_code == 200
    assert resp.get_json()["quantity"] == 5

    assert client.post(f"/api/products/{product_id}/adjust", json={"delta": "3"}).status_code == 400

    resp = client.post(f"/api/products/{product_id}/restock", json={"quantity": 10, "cost": 25})
    assert resp.status_code == 200
    assert resp.get_json()["quantity"] == 15
    assert resp.get_json()["cost"] == 25.0

    assert client.post(f"/api/products/{product_id}/restock", json={"quantity": 0}).status_code == 400
    assert client.post("/api/products/9999/restock", json={"quantity": 1}).status_code == 404


# ---------------------------------------------------------------------------
# sales
# ---------------------------------------------------------------------------

def test_create_and_fetch_sale(client, seeded):
    resp = client.post("/api/sales", json={
        "items": [{"product_id": seeded["mouse"]["id"], "quantity": 2}],
        "payment_method": "Card",
    })
    assert resp.status_code == 201
    sale = resp.get_json()["sale"]
    assert sale["total_amount"] == 59.98
    assert sale["items"][0]["product_name"] == "Wireless Mouse"

    fetched = client.get(f"/api/sales/{sale['id']}").get_json()["sale"]
    assert fetched["items"][0]["quantity"] == 2

    listing = client.get("/api/sales").get_json()
    assert listing["count"] == 1

    history = client.get(f"/api/products/{seeded['mouse']['id']}/history").get_json()
    assert history["total_quantity"] == 2


def test_create_sale_validation(client, seeded):
    assert client.post("/api/sales", json={"items": []}).status_code == 400
    assert client.post("/api/sales", json={"items": [{"product_id": 1}]}).status_code == 400
    resp = client.post("/api/sales", json={
        "items": [{"product_id": seeded["mouse"]["id"], "quantity": 0}],
    })
    assert resp.status_code == 400


def test_create_sale_unknown_product(client, seeded):
    resp = client.post("/api/sales", json={"items": [{"product_id": 9999, "quantity": 1}]})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Product 9999 not found"
    assert body["details"] == {"product_id": 9999}


def test_list_sales_bad_range(client):
    assert client.get("/api/sales?start=soon&end=later").status_code == 400


def test_delete_sale(client, seeded):
    sale = client.post("/api/sales", json={
        "items": [{"product_id": seeded["hub"]["id"], "quantity": 1}],
    }).get_json()["sale"]

    assert client.delete(f"/api/sales/{sale['id']}").status_code == 200
    assert client.get(f"/api/sales/{sale['id']}").status_code == 404
    assert client.delete(f"/api/sales/{sale['id']}").status_code == 404


# ---------------------------------------------------------------------------
# reports
# ---------------------------------------------------------------------------

def test_report_endpoints(client, seeded):
    client.post("/api/sales", json={
        "items": [{"product_id": seeded["keyboard"]["id"], "quantity": 1}],
        "payment_method": "Cash",
    })

    sales = client.get("/api/reports/sales").get_json()
    assert sales["total_sales"] == 1

    assert client.get("/api/reports/today").get_json()["count"] == 1
    assert client.get("/api/reports/inventory-value").status_code == 200

    top = client.get("/api/reports/top-products?limit=5").get_json()
    assert top["items"][0]["product_name"] == "Mechanical Keyboard"

    methods = client.get("/api/reports/payment-methods").get_json()
    assert methods["items"][0]["payment_method"] == "Cash"

    profit = client.get("/api/reports/profit").get_json()
    assert profit["gross_profit"] == 44.99

    average = client.get("/api/reports/average-sale").get_json()
    assert average["average"] == 89.99

    dashboard = client.get("/api/reports/dashboard").get_json()
    assert dashboard["days"] == 7
    assert dashboard["low_stock_count"] == 1


def test_report_parameter_errors(client):
    assert client.get("/api/reports/top-products?limit=0").status_code == 400
    assert client.get("/api/reports/sales?start=bad&end=worse").status_code == 400
    assert client.get("/api/reports/dashboard?days=-1").status_code == 400


def test_report_explicit_range(client, seeded):
    client.post("/api/sales", json={"items": [{"product_id": seeded["hub"]["id"], "quantity": 1}]})

    body = client.get("/api/reports/sales?start=2001-01-01&end=2001-01-31").get_json()
    assert body["total_sales"] == 0


def test_non_finite_money_is_rejected(client, seeded):
    base = {"name": "Lamp", "price": 10, "cost": 5, "quantity": 1, "min_quantity": 0}

    for bad in (float("nan"), "nan", float("inf"), "-Infinity"):
        resp = client.post("/api/products", json={**base, "price": bad})
        assert resp.status_code == 400, bad
        assert "finite" in resp.get_json()["error"]

    resp = client.put(f"/api/products/{seeded['mouse']['id']}", json={"cost": "nan"})
    assert resp.status_code == 400

    resp = client.post(f"/api/products/{seeded['mouse']['id']}/restock", json={"quantity": 1, "cost": float("nan")})
    assert resp.status_code == 400
    assert client.get(f"/api/products/{seeded['mouse']['id']}").get_json()["quantity"] == 45
