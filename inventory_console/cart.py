"""
Корзина для экранов покупки и продажи.

Все операции чистые: принимают кортеж строк и возвращают новый,
исходный кортеж не меняется.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from api_client import APIClient
from constants import (
    MSG_CART_EMPTY,
    MSG_CUSTOMER_REQUIRED,
    MSG_INVALID_LINE,
    MSG_NOT_ENOUGH_STOCK,
    MSG_PRODUCT_NOT_FOUND,
    MSG_SUPPLIER_REQUIRED,
)
from core.envelope import ApiResponse
from core.exceptions import CartError
from core.fanout import DEFAULT_MAX_WORKERS, FanOutReport, fan_out
from schemas import TransactionRequest

logger = logging.getLogger(__name__)

Product = Mapping[str, Any]


@dataclass(frozen=True)
class CartLine:
    """Строка корзины: товар, количество и цена за единицу."""

    product: Product
    quantity: int
    unit_price: float

    @property
    def product_id(self) -> int:
        return self.product["id"]

    @property
    def total_price(self) -> float:
        return self.quantity * self.unit_price


Cart = Tuple[CartLine, ...]


def find_product(products: Sequence[Product], product_id: Optional[int]) -> Optional[Product]:
    for product in products:
        if product.get("id") == product_id:
            return product
    return None


def _find_line(lines: Cart, product_id: int) -> Optional[CartLine]:
    for line in lines:
        if line.product_id == product_id:
            return line
    return None


def _check_stock(product: Product, requested: int) -> None:
    available = product.get("stockQuantity") or 0
    if requested > available:
        raise CartError(MSG_NOT_ENOUGH_STOCK.format(available=available, requested=requested))


def add_line(
    lines: Cart,
    product: Optional[Product],
    quantity: int,
    unit_price: float,
    check_stock: bool = False,
) -> Cart:
    """
    Добавить товар в корзину.

    Повторный выбор того же товара суммирует количество, цена за единицу
    остаётся от первой строки.

    Raises:
        CartError: Товар не выбран, количество/цена не положительные,
            или (при check_stock) на складе меньше, чем запрошено
    """
    if product is None:
        raise CartError(MSG_PRODUCT_NOT_FOUND)
    if quantity <= 0 or unit_price <= 0:
        raise CartError(MSG_INVALID_LINE)

    existing = _find_line(lines, product["id"])
    if check_stock:
        _check_stock(product, quantity + (existing.quantity if existing else 0))

    if existing is None:
        return lines + (CartLine(product=product, quantity=quantity, unit_price=unit_price),)

    return tuple(
        replace(line, quantity=line.quantity + quantity) if line is existing else line
        for line in lines
    )


def remove_line(lines: Cart, product_id: int) -> Cart:
    return tuple(line for line in lines if line.product_id != product_id)


def update_quantity(lines: Cart, product_id: int, quantity: int, check_stock: bool = False) -> Cart:
    """Изменить количество; ноль или меньше удаляет строку."""
    if quantity <= 0:
        return remove_line(lines, product_id)

    line = _find_line(lines, product_id)
    if line is None:
        return lines
    if check_stock:
        available = line.product.get("stockQuantity") or 0
        if quantity > available:
            raise CartError(f"Not enough stock. Available: {available}")

    return tuple(replace(item, quantity=quantity) if item is line else item for item in lines)


def update_price(lines: Cart, product_id: int, unit_price: float) -> Cart:
    """Изменить цену за единицу; отрицательная цена игнорируется."""
    if unit_price < 0:
        return lines
    return tuple(
        replace(line, unit_price=unit_price) if line.product_id == product_id else line
        for line in lines
    )


def total_amount(lines: Cart) -> float:
    return sum((line.total_price for line in lines), 0.0)


def total_items(lines: Cart) -> int:
    return sum(line.quantity for line in lines)


def available_stock(lines: Cart, product: Product) -> int:
    """Остаток на складе с учётом того, что уже лежит в корзине."""
    line = _find_line(lines, product["id"])
    return (product.get("stockQuantity") or 0) - (line.quantity if line else 0)


def _submit(
    lines: Cart,
    create: Callable[[TransactionRequest], ApiResponse],
    build: Callable[[CartLine], TransactionRequest],
    max_workers: int,
) -> FanOutReport:
    payloads = [build(line) for line in lines]
    calls: List[Callable[[], ApiResponse]] = [
        (lambda payload=payload: create(payload)) for payload in payloads
    ]
    return fan_out(calls, max_workers=max_workers)


def submit_sale(
    client: APIClient,
    lines: Cart,
    customer_name: str,
    description: str = "",
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> FanOutReport:
    """
    Создать по одной транзакции продажи на строку корзины.

    Вызовы независимы: часть может не пройти, откат не выполняется.

    Raises:
        CartError: Пустая корзина или не указан покупатель
    """
    if not lines:
        raise CartError(MSG_CART_EMPTY)
    if not customer_name.strip():
        raise CartError(MSG_CUSTOMER_REQUIRED)

    def build(line: CartLine) -> TransactionRequest:
        return TransactionRequest(
            product_id=line.product_id,
            quantity=line.quantity,
            description=description or f"Sale of {line.product.get('name')} to {customer_name.strip()}",
        )

    logger.info(f"Submitting sale of {len(lines)} line(s) for {customer_name.strip()}")
    return _submit(lines, client.create_sale_transaction, build, max_workers)


def submit_purchase(
    client: APIClient,
    lines: Cart,
    supplier_id: Optional[int],
    description: str = "",
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> FanOutReport:
    """
    Создать по одной транзакции закупки на строку корзины.

    Raises:
        CartError: Пустая корзина или не выбран поставщик
    """
    if not lines:
        raise CartError(MSG_CART_EMPTY)
    if not supplier_id:
        raise CartError(MSG_SUPPLIER_REQUIRED)

    def build(line: CartLine) -> TransactionRequest:
        return TransactionRequest(
            product_id=line.product_id,
            quantity=line.quantity,
            supplier_id=supplier_id,
            description=description or f"Purchase of {line.product.get('name')} from supplier",
        )

    logger.info(f"Submitting purchase of {len(lines)} line(s) from supplier {supplier_id}")
    return _submit(lines, client.create_purchase_transaction, build, max_workers)
