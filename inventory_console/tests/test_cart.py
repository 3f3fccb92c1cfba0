"""Тесты корзины покупки/продажи."""

import pytest

from cart import (
    add_line,
    available_stock,
    find_product,
    remove_line,
    total_amount,
    total_items,
    update_price,
    update_quantity,
)
from core.exceptions import CartError

WIDGET = {"id": 1, "name": "Widget", "price": 10.0, "stockQuantity": 5}
GADGET = {"id": 2, "name": "Gadget", "price": 4.0, "stockQuantity": 0}


def test_add_line_appends_new_product():
    lines = add_line((), WIDGET, 2, 10.0)

    assert len(lines) == 1
    assert lines[0].product_id == 1
    assert lines[0].total_price == 20.0


def test_add_line_does_not_mutate_input():
    before = add_line((), WIDGET, 1, 10.0)
    add_line(before, WIDGET, 1, 10.0)

    assert before[0].quantity == 1


def test_same_product_merges_and_keeps_first_price():
    lines = add_line((), WIDGET, 2, 10.0)
    lines = add_line(lines, WIDGET, 3, 99.0)

    assert len(lines) == 1
    assert lines[0].quantity == 5
    assert lines[0].unit_price == 10.0
    assert lines[0].total_price == 50.0


@pytest.mark.parametrize("quantity, price", [(0, 10.0), (-1, 10.0), (1, 0.0), (1, -5.0)])
def test_add_line_rejects_invalid_line(quantity, price):
    with pytest.raises(CartError):
        add_line((), WIDGET, quantity, price)


def test_add_line_requires_product():
    with pytest.raises(CartError):
        add_line((), None, 1, 1.0)


def test_stock_check_counts_existing_quantity():
    lines = add_line((), WIDGET, 4, 10.0, check_stock=True)

    with pytest.raises(CartError) as exc_info:
        add_line(lines, WIDGET, 2, 10.0, check_stock=True)

    assert exc_info.value.message == "Not enough stock. Available: 5, Requested: 6"


def test_purchase_cart_ignores_stock():
    lines = add_line((), GADGET, 100, 4.0)
    assert lines[0].quantity == 100


def test_update_quantity_to_zero_removes_line():
    lines = add_line((), WIDGET, 2, 10.0)
    assert update_quantity(lines, 1, 0) == ()


def test_update_quantity_respects_stock():
    lines = add_line((), WIDGET, 2, 10.0)

    with pytest.raises(CartError, match="Not enough stock. Available: 5"):
        update_quantity(lines, 1, 6, check_stock=True)

    assert update_quantity(lines, 1, 5, check_stock=True)[0].quantity == 5


def test_update_quantity_unknown_product_is_noop():
    lines = add_line((), WIDGET, 2, 10.0)
    assert update_quantity(lines, 99, 3) == lines


def test_update_price_ignores_negative():
    lines = add_line((), WIDGET, 2, 10.0)

    assert update_price(lines, 1, -1.0) == lines
    assert update_price(lines, 1, 12.5)[0].total_price == 25.0


def test_remove_line():
    lines = add_line(add_line((), WIDGET, 1, 10.0), GADGET, 1, 4.0)
    assert [line.product_id for line in remove_line(lines, 1)] == [2]


def test_totals():
    lines = add_line(add_line((), WIDGET, 2, 10.0), GADGET, 3, 4.0)

    assert total_items(lines) == 5
    assert total_amount(lines) == 32.0
    assert total_amount(()) == 0.0


def test_available_stock_subtracts_cart():
    lines = add_line((), WIDGET, 3, 10.0)

    assert available_stock(lines, WIDGET) == 2
    assert available_stock((), WIDGET) == 5


def test_find_product():
    assert find_product([WIDGET, GADGET], 2) is GADGET
    assert find_product([WIDGET], 42) is None
