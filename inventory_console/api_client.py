"""Централизованный API клиент для взаимодействия с backend инвентаря."""

import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import requests
from requests.auth import AuthBase

from config import app_config
from constants import (
    ENDPOINT_AUTH_LOGIN,
    ENDPOINT_AUTH_REGISTER,
    ENDPOINT_CATEGORIES,
    ENDPOINT_PRODUCTS,
    ENDPOINT_SUPPLIERS,
    ENDPOINT_TRANSACTIONS,
    ENDPOINT_USERS_CURRENT,
    ENDPOINT_USERS_UPDATE,
    HTTP_UNAUTHORIZED,
)
from core.envelope import ApiResponse, extract_envelope, normalize_response, parse_body
from core.session import SessionStore
from schemas import (
    CategoryPayload,
    ImageUpload,
    LoginRequest,
    ProductForm,
    RegisterRequest,
    RequestModel,
    SupplierPayload,
    TransactionRequest,
    UserUpdate,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=RequestModel)


class BearerAuth(AuthBase):
    """Добавляет токен текущей сессии в каждый исходящий запрос."""

    def __init__(self, session: SessionStore) -> None:
        self.session = session

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        token = self.session.get_token()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request


def _as_model(model_cls: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    if isinstance(data, model_cls):
        return data
    return model_cls.model_validate(data)


class APIClient:
    """Клиент для взаимодействия с REST backend инвентаря."""

    def __init__(
        self,
        session: SessionStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Инициализация API клиента.

        Args:
            session: Сессия, из которой берётся токен и которая очищается при 401
            base_url: Базовый URL API (по умолчанию из конфигурации)
            timeout: Таймаут запросов в секундах
        """
        self.session = session
        self.base_url = (base_url or app_config.api_url).rstrip("/")
        self.timeout = timeout or app_config.api_timeout

        self.http = requests.Session()
        self.http.headers["Accept"] = "application/json"
        self.http.auth = BearerAuth(session)
        self.http.hooks["response"].append(self._handle_unauthorized)

    def _handle_unauthorized(self, response: requests.Response, *args: Any, **kwargs: Any) -> requests.Response:
        """
        Hook ответа: при 401 сессия очищается до возврата результата.

        clear() может прервать выполнение переходом на страницу входа,
        поэтому тело читается и соединение закрывается до него.
        """
        status = response.status_code
        if status != HTTP_UNAUTHORIZED:
            envelope = extract_envelope(parse_body(response))
            status = envelope["status"] if envelope else status

        if status == HTTP_UNAUTHORIZED:
            logger.warning(f"Unauthorized response from {response.url}, clearing session")
            response.content
            response.close()
            self.session.clear()
        return response

    def _request(self, method: str, path: str, **kwargs: Any) -> ApiResponse:
        """
        Выполнить запрос и нормализовать ответ.

        Ошибки backend возвращаются как ApiResponse(success=False);
        при отсутствии ответа синтезируется сетевая ошибка со статусом 500.
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            if e.response is not None:
                return normalize_response(e.response)
            logger.error(f"{method} {url} failed: {e}")
            return ApiResponse.network_error()

        result = normalize_response(response)
        if not result.success:
            logger.warning(f"{method} {url} -> {result.status_code}: {result.message}")
        return result

    # ============ AUTHENTICATION ============

    def login(self, email: str, password: str) -> ApiResponse:
        """
        Вход пользователя.

        При успехе токен (и роль, если backend её вернул) сохраняются в сессии.
        """
        payload = LoginRequest(email=email, password=password).to_payload()
        result = self._request("POST", ENDPOINT_AUTH_LOGIN, json=payload)

        data = result.data if isinstance(result.data, dict) else {}
        token = data.get("token")
        if result.success and token:
            self.session.set_token(token)
            role = (data.get("user") or {}).get("role")
            if role:
                self.session.set_role(role)
            logger.info(f"Login successful, token length: {len(token)}")
        return result

    def register(self, user: Union[RegisterRequest, Mapping[str, Any]]) -> ApiResponse:
        payload = _as_model(RegisterRequest, user).to_payload()
        return self._request("POST", ENDPOINT_AUTH_REGISTER, json=payload)

    def get_current_user(self) -> ApiResponse:
        return self._request("GET", ENDPOINT_USERS_CURRENT)

    def update_user(self, user_id: int, **fields: Any) -> ApiResponse:
        """
        Обновить профиль.

        Args:
            user_id: ID пользователя
            **fields: name, email, password, phone_number (или phoneNumber)
        """
        payload = UserUpdate.model_validate(fields).to_payload()
        return self._request("PUT", f"{ENDPOINT_USERS_UPDATE}/{user_id}", json=payload)

    # ============ SESSION ============

    def logout(self) -> None:
        self.session.clear()

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated()

    def get_role(self) -> Optional[str]:
        return self.session.get_role()

    def is_admin(self) -> bool:
        return self.session.is_admin()

    # ============ PRODUCTS ============

    def get_all_products(self) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_PRODUCTS}/all")

    def get_product_by_id(self, product_id: int) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_PRODUCTS}/{product_id}")

    def create_product(
        self,
        form: Union[ProductForm, Mapping[str, Any]],
        image: Optional[ImageUpload] = None,
    ) -> ApiResponse:
        files = self._product_files(_as_model(ProductForm, form), image)
        return self._request("POST", f"{ENDPOINT_PRODUCTS}/add", files=files)

    def update_product(
        self,
        form: Union[ProductForm, Mapping[str, Any]],
        image: Optional[ImageUpload] = None,
    ) -> ApiResponse:
        """Обновить товар: productId передаётся внутри формы."""
        product = _as_model(ProductForm, form)
        if product.product_id is None:
            raise ValueError("update_product requires product_id in the form")
        files = self._product_files(product, image)
        return self._request("PUT", f"{ENDPOINT_PRODUCTS}/update", files=files)

    def delete_product(self, product_id: int) -> ApiResponse:
        return self._request("DELETE", f"{ENDPOINT_PRODUCTS}/delete/{product_id}")

    @staticmethod
    def _product_files(form: ProductForm, image: Optional[ImageUpload]) -> Dict[str, Any]:
        files: Dict[str, Any] = dict(form.to_multipart_fields())
        if image is not None:
            files["imageFile"] = (image.filename, image.content, image.content_type)
        return files

    # ============ CATEGORIES ============

    def get_all_categories(self) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_CATEGORIES}/all")

    def get_category_by_id(self, category_id: int) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_CATEGORIES}/{category_id}")

    def create_category(self, category: Union[CategoryPayload, Mapping[str, Any]]) -> ApiResponse:
        payload = _as_model(CategoryPayload, category).to_payload()
        return self._request("POST", f"{ENDPOINT_CATEGORIES}/add", json=payload)

    def update_category(
        self,
        category_id: int,
        category: Union[CategoryPayload, Mapping[str, Any]],
    ) -> ApiResponse:
        payload = _as_model(CategoryPayload, category).to_payload()
        return self._request("PUT", f"{ENDPOINT_CATEGORIES}/update/{category_id}", json=payload)

    def delete_category(self, category_id: int) -> ApiResponse:
        return self._request("DELETE", f"{ENDPOINT_CATEGORIES}/delete/{category_id}")

    # ============ SUPPLIERS ============

    def get_all_suppliers(self) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_SUPPLIERS}/all")

    def get_supplier_by_id(self, supplier_id: int) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_SUPPLIERS}/{supplier_id}")

    def create_supplier(self, supplier: Union[SupplierPayload, Mapping[str, Any]]) -> ApiResponse:
        payload = _as_model(SupplierPayload, supplier).to_payload()
        return self._request("POST", f"{ENDPOINT_SUPPLIERS}/add", json=payload)

    def update_supplier(
        self,
        supplier_id: int,
        supplier: Union[SupplierPayload, Mapping[str, Any]],
    ) -> ApiResponse:
        payload = _as_model(SupplierPayload, supplier).to_payload()
        return self._request("PUT", f"{ENDPOINT_SUPPLIERS}/update/{supplier_id}", json=payload)

    def delete_supplier(self, supplier_id: int) -> ApiResponse:
        return self._request("DELETE", f"{ENDPOINT_SUPPLIERS}/delete/{supplier_id}")

    # ============ TRANSACTIONS ============

    def get_all_transactions(
        self,
        page: int = 0,
        size: int = app_config.transactions_page_size,
        search_text: Optional[str] = None,
    ) -> ApiResponse:
        """
        Получение списка транзакций.

        Args:
            page: Номер страницы (с нуля)
            size: Размер страницы
            search_text: Строка поиска (опционально)
        """
        params: Dict[str, Any] = {"page": page, "size": size}
        if search_text:
            params["searchText"] = search_text
        return self._request("GET", f"{ENDPOINT_TRANSACTIONS}/all", params=params)

    def get_transactions_by_month_year(self, month: int, year: int) -> ApiResponse:
        params = {"month": month, "year": year}
        return self._request("GET", f"{ENDPOINT_TRANSACTIONS}/by-month-year", params=params)

    def get_transaction_by_id(self, transaction_id: int) -> ApiResponse:
        return self._request("GET", f"{ENDPOINT_TRANSACTIONS}/{transaction_id}")

    def create_purchase_transaction(
        self,
        transaction: Union[TransactionRequest, Mapping[str, Any]],
    ) -> ApiResponse:
        payload = _as_model(TransactionRequest, transaction).to_payload()
        return self._request("POST", f"{ENDPOINT_TRANSACTIONS}/purchase", json=payload)

    def create_sale_transaction(
        self,
        transaction: Union[TransactionRequest, Mapping[str, Any]],
    ) -> ApiResponse:
        payload = _as_model(TransactionRequest, transaction).to_payload()
        return self._request("POST", f"{ENDPOINT_TRANSACTIONS}/sell", json=payload)

    def create_return_transaction(
        self,
        transaction: Union[TransactionRequest, Mapping[str, Any]],
    ) -> ApiResponse:
        payload = _as_model(TransactionRequest, transaction).to_payload()
        return self._request("POST", f"{ENDPOINT_TRANSACTIONS}/return", json=payload)
