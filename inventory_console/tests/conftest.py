"""Общие фикстуры: сессия в памяти и фейковый HTTP адаптер для APIClient."""

import io
import json
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple
from unittest.mock import Mock
from urllib.parse import urlparse

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from api_client import APIClient
from core.crypto import TokenCipher
from core.session import SessionStore
from core.storage import MemoryStorage

BASE_URL = "http://api.test/api"
SECRET_KEY = "inventorySecretKey"

Handler = Callable[[requests.PreparedRequest], requests.Response]


def make_response(
    request: requests.PreparedRequest,
    status: int = 200,
    body: Any = None,
    reason: Optional[str] = None,
) -> requests.Response:
    """Собрать requests.Response: dict/list - как JSON, str - как текст."""
    response = requests.Response()
    response.status_code = status
    response.reason = reason if reason is not None else ("OK" if status < 400 else "Error")
    response.url = request.url
    response.request = request
    response.encoding = "utf-8"

    if body is None:
        response._content = b""
        response.headers = CaseInsensitiveDict()
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
        response.headers = CaseInsensitiveDict({"Content-Type": "text/plain"})
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    response.raw = io.BytesIO(response._content)
    return response


class FakeAdapter(BaseAdapter):
    """
    Транспорт requests без сети.

    Маршруты задаются как (метод, путь) -> ответ или обработчик.
    Все отправленные запросы сохраняются в sent.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.sent: List[requests.PreparedRequest] = []
        self._lock = threading.Lock()

    def add(
        self,
        method: str,
        path: str,
        body: Any = None,
        status: int = 200,
        reason: Optional[str] = None,
    ) -> None:
        self.routes[(method, path)] = lambda request: make_response(request, status, body, reason)

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def add_error(self, method: str, path: str, error: Exception) -> None:
        def raise_error(request: requests.PreparedRequest) -> requests.Response:
            raise error

        self.routes[(method, path)] = raise_error

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        with self._lock:
            self.sent.append(request)
        path = urlparse(request.url).path
        handler = self.routes.get((request.method, path))
        if handler is None:
            return make_response(request, 404, {"status": 404, "message": f"No route for {path}"})
        return handler(request)

    def close(self) -> None:
        pass

    @property
    def last(self) -> requests.PreparedRequest:
        return self.sent[-1]


# ==================== Fixtures ====================

@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cipher():
    return TokenCipher(SECRET_KEY)


@pytest.fixture
def navigator():
    """Навигатор на страницу входа (проверяем только факт вызова)"""
    return Mock()


@pytest.fixture
def session(storage, cipher, navigator):
    return SessionStore(storage=storage, cipher=cipher, navigator=navigator)


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def client(session, adapter):
    api_client = APIClient(session, base_url=BASE_URL, timeout=5)
    api_client.http.mount("http://", adapter)
    return api_client


@pytest.fixture
def logged_in(client, session):
    """Клиент с сохранённым токеном и ролью ADMIN"""
    session.set_token("jwt-token")
    session.set_role("ADMIN")
    return client


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response
