from datetime import datetime, timedelta

import pytest

from shelfpos.services import product_service, reporting_service, sales_service
from shelfpos.time_utils import local_day_bounds, trailing_range, utcnow


@pytest.fixture
def sales(adapter, seeded):
    """Three sales today: two paid, one with no payment method."""
    def sell(lines, payment_method):
        return sales_service.create_sale(adapter, {
            "items": [{"product_id": seeded[key]["id"], "quantity": q} for key, q in lines],
            "payment_method": payment_method,
        })

    return [
        sell([("mouse", 2), ("keyboard", 1)], "Card"),   # 149.97
        sell([("hub", 1)], "Cash"),                      # 49.99
        sell([("mouse", 1)], None),                      # 29.99
    ]


def test_sales_report_all_time(adapter, sales):
    report = reporting_service.sales_report(adapter, None, None)

    assert report["total_sales"] == 3
    assert report["total_revenue"] == pytest.approx(229.95)
    assert report["items_sold"] == 5
    assert report["sales_by_day"] == [
        {"date": utcnow().date().isoformat(), "total": pytest.approx(229.95), "count": 3},
    ]


def test_sales_report_one_sided_range_is_all_time(adapter, sales):
    report = reporting_service.sales_report(adapter, "2001-01-01", None)
    assert report["total_sales"] == 3


def test_sales_report_outside_range_is_empty(adapter, sales):
    report = reporting_service.sales_report(adapter, "2001-01-01", "2001-01-31")

    assert report == {"total_sales": 0, "total_revenue": 0.0, "items_sold": 0, "sales_by_day": []}


def test_sales_report_trailing_window(adapter, sales):
    start, end = trailing_range(7)
    assert reporting_service.sales_report(adapter, start, end)["total_sales"] == 3


def test_todays_sales(adapter, sales):
    today = reporting_service.todays_sales(adapter)

    assert today["count"] == 3
    assert today["total"] == pytest.approx(229.95)


def test_inventory_value_counts_soft_deleted_rows(adapter, seeded):
    before = reporting_service.inventory_value(adapter)
    assert before["total_cost"] == pytest.approx(4020.0)
    assert before["total_retail"] == pytest.approx(8608.23)

    product_service.delete_product(adapter, seeded["hub"]["id"])

    assert reporting_service.inventory_value(adapter) == before


def test_inventory_value_of_empty_store(adapter):
    assert reporting_service.inventory_value(adapter) == {"total_cost": 0.0, "total_retail": 0.0}


def test_top_selling_products_ordered_by_quantity(adapter, seeded, sales):
    top = reporting_service.top_selling_products(adapter, limit=10)

    assert [row["product_name"] for row in top] == ["Wireless Mouse", "Mechanical Keyboard", "USB-C Hub"]
    assert top[0]["total_quantity"] == 3
    assert top[0]["total_revenue"] == pytest.approx(89.97)


def test_top_selling_products_respects_limit(adapter, sales):
    top = reporting_service.top_selling_products(adapter, limit=1)
    assert [row["product_name"] for row in top] == ["Wireless Mouse"]


def test_top_selling_products_in_empty_range(adapter, sales):
    assert reporting_service.top_selling_products(adapter, 10, "2001-01-01", "2001-01-02") == []


def test_sales_by_payment_method_labels_missing_method(adapter, sales):
    rows = reporting_service.sales_by_payment_method(adapter)

    assert rows == [
        {"payment_method": "Card", "count": 1, "total": pytest.approx(149.97)},
        {"payment_method": "Cash", "count": 1, "total": pytest.approx(49.99)},
        {"payment_method": reporting_service.NOT_SPECIFIED_PAYMENT, "count": 1, "total": pytest.approx(29.99)},
    ]


def test_profit_report(adapter, sales):
    report = reporting_service.profit_report(adapter)

    # mouse: 89.97 - 45.00, keyboard: 89.99 - 45.00, hub: 49.99 - 22.00
    assert report["total_revenue"] == pytest.approx(229.95)
    assert report["total_cost"] == pytest.approx(112.0)
    assert report["gross_profit"] == pytest.approx(117.95)
    # gross_profit / total_revenue * 100, not rounded
    assert report["profit_margin"] == pytest.approx(117.95 / 229.95 * 100)
    assert report["profit_margin"] != round(report["profit_margin"], 2)

    by_product = {row["product_name"]: row for row in report["by_product"]}
    assert by_product["Wireless Mouse"]["quantity_sold"] == 3
    assert by_product["Wireless Mouse"]["profit"] == pytest.approx(44.97)
    assert [row["product_name"] for row in report["by_product"]][0] == "Mechanical Keyboard"


def test_profit_report_uses_current_cost(adapter, seeded, sales):
    product_service.update_product(adapter, seeded["hub"]["id"], {"cost": 40.0})

    by_product = {row["product_name"]: row for row in reporting_service.profit_report(adapter)["by_product"]}
    assert by_product["USB-C Hub"]["cost"] == pytest.approx(40.0)
    assert by_product["USB-C Hub"]["profit"] == pytest.approx(9.99)


def test_profit_report_without_sales(adapter, seeded):
    report = reporting_service.profit_report(adapter)

    assert report["total_revenue"] == 0.0
    assert report["profit_margin"] == 0.0
    assert report["by_product"] == []


def test_average_sale_value(adapter, sales):
    report = reporting_service.average_sale_value(adapter)

    assert report["count"] == 3
    assert report["total"] == pytest.approx(229.95)
    assert report["average"] == pytest.approx(76.65)


def test_average_sale_value_without_sales(adapter):
    assert reporting_service.average_sale_value(adapter) == {"average": 0.0, "count": 0, "total": 0.0}


def test_product_sales_history(adapter, seeded, sales):
    history = reporting_service.product_sales_history(adapter, seeded["mouse"]["id"])

    assert history["product_name"] == "Wireless Mouse"
    assert history["total_quantity"] == 3
    assert history["total_revenue"] == pytest.approx(89.97)
    # newest first
    assert [line["sale_id"] for line in history["sales"]] == [sales[2]["id"], sales[0]["id"]]


def test_product_sales_history_for_deleted_product(adapter, seeded, sales):
    product_service.delete_product(adapter, seeded["mouse"]["id"])
    assert reporting_service.product_sales_history(adapter, seeded["mouse"]["id"]) is None


def test_dashboard_summary(adapter, sales):
    summary = reporting_service.dashboard_summary(adapter, days=7)

    assert summary["days"] == 7
    assert summary["today"]["count"] == 3
    assert summary["low_stock_count"] == 1
    assert summary["sales_report"]["total_sales"] == 3
    assert summary["inventory_value"] == reporting_service.inventory_value(adapter)


def test_local_day_bounds_cover_one_day():
    start, end = local_day_bounds(datetime(2024, 3, 1, 15, 30))

    start_dt = datetime.strptime(start, "%Y-%m-%d %H:%M:%S.%f")
    end_dt = datetime.strptime(end, "%Y-%m-%d %H:%M:%S.%f")
    assert end_dt - start_dt == timedelta(days=1) - timedelta(microseconds=1)
