"""Тесты схем запросов."""

import pytest
from pydantic import ValidationError

from constants import MIN_PASSWORD_LENGTH
from core.auth import validate_password
from schemas import ProductForm, RegisterRequest, SupplierPayload, TransactionRequest, UserUpdate


def test_register_request_payload_uses_camel_case():
    request = RegisterRequest(
        name=" Ann ",
        email="ann@corp.io",
        password="secret1",
        phone_number="123",
    )
    assert request.to_payload() == {
        "name": "Ann",
        "email": "ann@corp.io",
        "password": "secret1",
        "phoneNumber": "123",
        "role": "MANAGER",
    }


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "12345"},
        {"name": "   "},
        {"phone_number": ""},
    ],
)
def test_register_request_validation(overrides):
    fields = {"name": "Ann", "email": "ann@corp.io", "password": "secret1", "phone_number": "123"}
    fields.update(overrides)
    with pytest.raises(ValidationError):
        RegisterRequest(**fields)


@pytest.mark.parametrize("length", [MIN_PASSWORD_LENGTH - 1, MIN_PASSWORD_LENGTH])
def test_register_request_and_form_check_share_password_minimum(length):
    password = "x" * length
    fields = {"name": "Ann", "email": "ann@corp.io", "password": password, "phone_number": "123"}

    try:
        RegisterRequest(**fields)
    except ValidationError:
        schema_accepts = False
    else:
        schema_accepts = True

    assert schema_accepts is (validate_password(password) is None)
    assert schema_accepts is (length >= MIN_PASSWORD_LENGTH)


def test_product_form_multipart_fields():
    form = ProductForm(name="Widget", price=9.5, stock_quantity=3, category_id=2, product_id=7)

    assert form.to_multipart_fields() == {
        "name": (None, "Widget"),
        "sku": (None, ""),
        "description": (None, ""),
        "price": (None, "9.5"),
        "stockQuantity": (None, "3"),
        "categoryId": (None, "2"),
        "productId": (None, "7"),
    }


@pytest.mark.parametrize("price, stock", [(0, 1), (-1, 1), (1, -1)])
def test_product_form_rejects_invalid_numbers(price, stock):
    with pytest.raises(ValidationError):
        ProductForm(name="Widget", price=price, stock_quantity=stock, category_id=1)


def test_transaction_request_omits_empty_fields():
    assert TransactionRequest(product_id=1, quantity=2).to_payload() == {"productId": 1, "quantity": 2}


def test_transaction_request_requires_positive_quantity():
    with pytest.raises(ValidationError):
        TransactionRequest(product_id=1, quantity=0)


def test_user_update_is_partial():
    assert UserUpdate(password="secret1").to_payload() == {"password": "secret1"}
    assert UserUpdate.model_validate({"phoneNumber": "1"}).to_payload() == {"phoneNumber": "1"}


def test_supplier_payload_defaults():
    assert SupplierPayload(name="ACME").to_payload() == {
        "name": "ACME",
        "email": "",
        "phone": "",
        "address": "",
    }
