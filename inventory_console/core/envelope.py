"""
Нормализация ответов backend в единый ApiResponse.

Backend заворачивает ответы в конверт {status, message, ...payload},
но payload лежит под разными ключами в зависимости от эндпоинта.
Порядок извлечения зафиксирован в PAYLOAD_EXTRACTION_RULES и является
контрактом с backend: менять его можно только вместе с версией.
"""

import logging
from typing import Any, Dict, NamedTuple, Optional, Tuple

import requests
from pydantic import BaseModel, ConfigDict, Field

from constants import (
    HTTP_INTERNAL_SERVER_ERROR,
    MSG_DEFAULT_SUCCESS,
    MSG_NETWORK_ERROR,
)

logger = logging.getLogger(__name__)

ENVELOPE_CONTRACT_VERSION = "1"


class PayloadRule(NamedTuple):
    """Правило извлечения payload: ключ конверта и ресурс, который под ним лежит."""

    key: str
    resource: str


PAYLOAD_EXTRACTION_RULES: Tuple[PayloadRule, ...] = (
    PayloadRule("products", "product list"),
    PayloadRule("product", "single product"),
    PayloadRule("categories", "category list"),
    PayloadRule("suppliers", "supplier list"),
    PayloadRule("transactions", "transaction list"),
    PayloadRule("data", "generic payload"),
)


class ApiResponse(BaseModel):
    """Единый результат любого вызова APIClient."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    data: Any = None
    status_code: int = Field(alias="statusCode")

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @classmethod
    def network_error(cls) -> "ApiResponse":
        """Результат для запроса, на который не пришло ответа."""
        return cls(
            success=False,
            message=MSG_NETWORK_ERROR,
            data=None,
            status_code=HTTP_INTERNAL_SERVER_ERROR,
        )


def is_success_status(status: int) -> bool:
    return 200 <= status < 300


def parse_body(response: requests.Response) -> Any:
    """JSON тело ответа, иначе текст, иначе None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def extract_envelope(body: Any) -> Optional[Dict[str, Any]]:
    """Вернуть тело, если это конверт backend (объект с числовым status)."""
    if not isinstance(body, dict):
        return None
    status = body.get("status")
    if isinstance(status, bool) or not isinstance(status, int):
        return None
    return body


def extract_payload(envelope: Dict[str, Any]) -> Any:
    """
    Достать payload из конверта.

    Ответ логина (с token) превращается в {token, user}; остальные
    разворачиваются по первому найденному ключу из PAYLOAD_EXTRACTION_RULES,
    а если ни одного нет - возвращается весь конверт.
    """
    token = envelope.get("token")
    if token:
        return {
            "token": token,
            "user": {
                "role": envelope.get("role") or "",
                "email": envelope.get("email") or "",
                "name": envelope.get("name") or "",
                "id": envelope.get("id") or 0,
            },
        }

    for rule in PAYLOAD_EXTRACTION_RULES:
        if envelope.get(rule.key) is not None:
            return envelope[rule.key]
    return envelope


def normalize_response(response: requests.Response) -> ApiResponse:
    """
    Привести ответ backend к ApiResponse.

    Args:
        response: HTTP ответ (успешный или с кодом ошибки)

    Returns:
        ApiResponse со статусом конверта, если он есть, иначе транспортным
    """
    body = parse_body(response)
    envelope = extract_envelope(body)

    if envelope is not None:
        status = envelope["status"]
        return ApiResponse(
            success=is_success_status(status),
            message=envelope.get("message") or MSG_DEFAULT_SUCCESS,
            data=extract_payload(envelope),
            status_code=status,
        )

    logger.debug(f"Response from {response.url} has no envelope, using HTTP status")
    return ApiResponse(
        success=is_success_status(response.status_code),
        message=response.reason or MSG_DEFAULT_SUCCESS,
        data=body,
        status_code=response.status_code,
    )
