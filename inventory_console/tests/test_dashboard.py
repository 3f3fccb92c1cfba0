"""Тесты сводки дашборда."""

from datetime import date

from constants import TRANSACTION_FILTER_ALL
from dashboard import count_by_type, filter_transactions, load_dashboard, low_stock

TRANSACTIONS = [
    {"id": 1, "transactionType": "PURCHASE"},
    {"id": 2, "transactionType": "SALE"},
    {"id": 3, "transactionType": "SALE"},
    {"id": 4, "transactionType": "RETURN"},
    {"id": 5, "transactionType": "SALE"},
    {"id": 6, "transactionType": "PURCHASE"},
]


def test_filter_all_keeps_everything():
    assert filter_transactions(TRANSACTIONS, TRANSACTION_FILTER_ALL) == TRANSACTIONS


def test_filter_by_type():
    assert [t["id"] for t in filter_transactions(TRANSACTIONS, "SALE")] == [2, 3, 5]
    assert filter_transactions(TRANSACTIONS, "UNKNOWN") == []


def test_count_by_type():
    assert count_by_type(TRANSACTIONS) == {"PURCHASE": 2, "SALE": 3, "RETURN": 1}
    assert count_by_type([]) == {}


def test_low_stock_threshold_is_exclusive():
    products = [{"id": 1, "stockQuantity": 9}, {"id": 2, "stockQuantity": 10}, {"id": 3}]
    assert [p["id"] for p in low_stock(products, 10)] == [1, 3]


def test_load_dashboard(logged_in, adapter):
    products = [{"id": 1, "stockQuantity": 2}, {"id": 2, "stockQuantity": 50}]
    adapter.add("GET", "/api/products/all", {"status": 200, "products": products})
    adapter.add("GET", "/api/categories/all", {"status": 200, "categories": [{"id": 1}]})
    adapter.add("GET", "/api/suppliers/all", {"status": 200, "suppliers": [{"id": 1}, {"id": 2}]})
    adapter.add("GET", "/api/transactions/all", {"status": 200, "transactions": TRANSACTIONS})
    adapter.add("GET", "/api/transactions/by-month-year", {"status": 200, "transactions": TRANSACTIONS[:2]})

    stats = load_dashboard(logged_in, today=date(2024, 3, 15), threshold=10)

    assert stats.total_products == 2
    assert stats.total_categories == 1
    assert stats.total_suppliers == 2
    assert stats.total_transactions == 6
    assert [p["id"] for p in stats.low_stock_products] == [1]
    assert [t["id"] for t in stats.recent_transactions] == [1, 2, 3, 4, 5]
    assert stats.monthly_by_type == {"PURCHASE": 1, "SALE": 1}
    assert stats.errors == []
    assert "month=3" in adapter.last.url and "year=2024" in adapter.last.url


def test_load_dashboard_collects_errors(logged_in, adapter):
    adapter.add("GET", "/api/products/all", {"status": 500, "message": "Database down"}, status=500)
    adapter.add("GET", "/api/categories/all", {"status": 200, "categories": []})
    adapter.add("GET", "/api/suppliers/all", {"status": 200, "suppliers": []})
    adapter.add("GET", "/api/transactions/all", {"status": 200, "transactions": []})

    stats = load_dashboard(logged_in, today=date(2024, 3, 15))

    assert stats.total_products == 0
    assert "Database down" in stats.errors
    # маршрута by-month-year нет: адаптер отвечает 404
    assert len(stats.errors) == 2
