"""Сводка для главной страницы: счётчики, товары с низким остатком, транзакции."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from api_client import APIClient
from config import app_config
from constants import TRANSACTION_FILTER_ALL
from core.envelope import ApiResponse
from core.fanout import fan_out

logger = logging.getLogger(__name__)

Record = Mapping[str, Any]


@dataclass
class DashboardStats:
    total_products: int = 0
    total_categories: int = 0
    total_suppliers: int = 0
    total_transactions: int = 0
    low_stock_products: List[Record] = field(default_factory=list)
    recent_transactions: List[Record] = field(default_factory=list)
    monthly_by_type: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)


def _records(result: ApiResponse) -> List[Record]:
    if result.success and isinstance(result.data, list):
        return result.data
    return []


def filter_transactions(transactions: Sequence[Record], transaction_type: str) -> List[Record]:
    """Отфильтровать транзакции по типу; ALL пропускает все."""
    if transaction_type == TRANSACTION_FILTER_ALL:
        return list(transactions)
    return [t for t in transactions if t.get("transactionType") == transaction_type]


def count_by_type(transactions: Sequence[Record]) -> Dict[str, int]:
    """Количество транзакций каждого типа в порядке первого появления."""
    return dict(Counter(t.get("transactionType") for t in transactions))


def low_stock(products: Sequence[Record], threshold: int) -> List[Record]:
    return [p for p in products if (p.get("stockQuantity") or 0) < threshold]


def load_dashboard(
    client: APIClient,
    today: Optional[date] = None,
    threshold: int = app_config.low_stock_threshold,
) -> DashboardStats:
    """
    Загрузить данные для дашборда.

    Четыре списка запрашиваются параллельно, затем транзакции за текущий месяц.
    Неуспешные ответы не прерывают загрузку: их сообщения попадают в errors.
    """
    today = today or date.today()
    report = fan_out(
        [
            client.get_all_products,
            client.get_all_categories,
            client.get_all_suppliers,
            client.get_all_transactions,
        ],
        max_workers=app_config.fanout_max_workers,
    )
    products_res, categories_res, suppliers_res, transactions_res = report.results
    monthly_res = client.get_transactions_by_month_year(today.month, today.year)

    products = _records(products_res)
    transactions = _records(transactions_res)

    stats = DashboardStats(
        total_products=len(products),
        total_categories=len(_records(categories_res)),
        total_suppliers=len(_records(suppliers_res)),
        total_transactions=len(transactions),
        low_stock_products=low_stock(products, threshold),
        recent_transactions=transactions[: app_config.recent_transactions_limit],
        monthly_by_type=count_by_type(_records(monthly_res)),
        errors=report.failure_messages + ([] if monthly_res.success else [monthly_res.message]),
    )
    if stats.errors:
        logger.warning(f"Dashboard loaded with {len(stats.errors)} error(s)")
    return stats
