"""
Схемы исходящих запросов к backend.

Имена полей в Python - snake_case, в JSON - camelCase (через alias).
"""

import re
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from constants import MIN_PASSWORD_LENGTH, ROLE_MANAGER

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"


class RequestModel(BaseModel):
    """Базовая схема: populate по имени поля, сериализация по alias."""

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class LoginRequest(RequestModel):
    """Схема для входа пользователя"""

    email: str
    password: str


class RegisterRequest(RequestModel):
    """
    Схема для регистрации нового пользователя.

    Attributes:
        name: Имя пользователя
        email: Email
        password: Пароль (минимум 6 символов)
        phone_number: Телефон
        role: Роль (по умолчанию MANAGER)
    """

    name: str
    email: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    phone_number: str = Field(..., alias="phoneNumber")
    role: str = ROLE_MANAGER

    @field_validator("name", "phone_number")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Простая валидация email через регулярное выражение"""
        v = v.strip()
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError("Invalid email format")
        return v


class UserUpdate(RequestModel):
    """Частичное обновление профиля: какие поля применить, решает backend."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")


class CategoryPayload(RequestModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class SupplierPayload(RequestModel):
    name: str = Field(..., min_length=1)
    email: str = ""
    phone: str = ""
    address: str = ""


class ProductForm(RequestModel):
    """Поля multipart формы создания/обновления товара."""

    name: str = Field(..., min_length=1)
    sku: str = ""
    description: str = ""
    price: float = Field(..., gt=0)
    stock_quantity: int = Field(..., ge=0, alias="stockQuantity")
    category_id: int = Field(..., alias="categoryId")
    product_id: Optional[int] = Field(default=None, alias="productId")

    def to_multipart_fields(self) -> Dict[str, Tuple[None, str]]:
        """
        Поля формы в формате files= для requests.

        Передаём их как файлы без имени, чтобы запрос всегда уходил
        как multipart/form-data, даже без изображения.
        """
        return {key: (None, str(value)) for key, value in self.to_payload().items()}


class ImageUpload(BaseModel):
    """Изображение товара для multipart запроса."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class TransactionRequest(RequestModel):
    """Покупка, продажа или возврат одной позиции."""

    product_id: int = Field(..., alias="productId")
    quantity: int = Field(..., gt=0)
    supplier_id: Optional[int] = Field(default=None, alias="supplierId")
    description: Optional[str] = None
