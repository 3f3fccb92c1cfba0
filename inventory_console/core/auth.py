"""Утилиты для аутентификации и валидации."""

import logging
import time
from typing import Any, Dict, Optional, Tuple

import streamlit as st

from api_client import APIClient
from config import app_config
from constants import (
    MAX_STORAGE_LOAD_ATTEMPTS,
    MIN_PASSWORD_LENGTH,
    MSG_ADMIN_REQUIRED,
    PAGE_LOGIN,
    SESSION_API_CLIENT,
    SESSION_STORAGE_LOAD_ATTEMPTS,
    SESSION_STORAGE_LOADED,
    SESSION_STORAGE_MIRROR,
    SESSION_USER_CHECKED,
    SESSION_USER_INFO,
    STORAGE_LOAD_RETRY_DELAY,
)
from core.crypto import TokenCipher
from core.envelope import ApiResponse
from core.exceptions import UserProfileUnavailableError
from core.session import LoginRedirect, SessionStore, clear_session_state, init_session_state
from core.storage import BrowserStorage

logger = logging.getLogger(__name__)


def validate_password(password: str, min_length: int = MIN_PASSWORD_LENGTH) -> Optional[str]:
    """
    Валидация пароля.

    Returns:
        Сообщение об ошибке или None если всё ок
    """
    if len(password) < min_length:
        return f"Password must be at least {min_length} characters long"
    return None


def sign_in(client: APIClient, email: str, password: str) -> Tuple[ApiResponse, Optional[Dict[str, Any]]]:
    """
    Вход и получение пользователя.

    Пользователь берётся из ответа логина. Если в нём нет роли, запрашивается
    /users/current; если и это не удалось, сессия удаляется и выбрасывается
    UserProfileUnavailableError - роль по умолчанию не назначается.

    Returns:
        (результат логина, пользователь или None если логин не удался)

    Raises:
        UserProfileUnavailableError: Логин прошёл, но роль пользователя неизвестна
    """
    result = client.login(email, password)
    if not result.success:
        return result, None

    data = result.data if isinstance(result.data, dict) else {}
    user = dict(data.get("user") or {})
    if user.get("role"):
        return result, user

    logger.info("Login response has no role, fetching current user")
    current = client.get_current_user()
    if current.success and isinstance(current.data, dict) and current.data.get("role"):
        client.session.set_role(current.data["role"])
        return result, current.data

    logger.warning(f"Could not load user profile after login: {current.status_code} {current.message}")
    client.session.discard()
    raise UserProfileUnavailableError(current.message, status_code=current.status_code)


def fetch_current_user(client: APIClient) -> Optional[Dict[str, Any]]:
    """
    Получить пользователя для сохранённого токена.

    При неуспешном ответе сессия очищается (с переходом на страницу входа).
    """
    if not client.is_authenticated():
        return None

    result = client.get_current_user()
    if result.success and isinstance(result.data, dict):
        if result.data.get("role"):
            client.session.set_role(result.data["role"])
        return result.data

    logger.warning(f"Stored token rejected: {result.status_code} {result.message}")
    if client.is_authenticated():
        client.logout()
    return None


def ensure_storage_loaded() -> BrowserStorage:
    """
    Синхронизировать localStorage с session state. Вызывается один раз за рендер страницы.

    Пока браузер не вернул сохранённую сессию, страница перезапускается
    несколько раз; затем продолжаем без неё. Отложенные записи
    (вход, выход, 401 в рабочем потоке) уходят в браузер здесь же.
    """
    storage = BrowserStorage.from_session_state()

    if not st.session_state.get(SESSION_STORAGE_LOADED):
        if storage.load():
            st.session_state[SESSION_STORAGE_LOADED] = True
        else:
            attempts = st.session_state.get(SESSION_STORAGE_LOAD_ATTEMPTS, 0)
            if attempts < MAX_STORAGE_LOAD_ATTEMPTS:
                st.session_state[SESSION_STORAGE_LOAD_ATTEMPTS] = attempts + 1
                logger.info(f"[STORAGE] Not loaded yet, retry {attempts + 1}/{MAX_STORAGE_LOAD_ATTEMPTS}")
                time.sleep(STORAGE_LOAD_RETRY_DELAY)
                st.rerun()

            logger.info("[STORAGE] Max attempts reached, continuing without stored session")
            st.session_state[SESSION_STORAGE_LOADED] = True

    storage.flush()
    return storage


def get_api_client() -> APIClient:
    """
    Получить API клиент текущей сессии Streamlit.

    Клиент и его SessionStore создаются один раз на сессию браузера.
    На каждом вызове выполняется отложенный переход на страницу входа.

    Returns:
        Настроенный API клиент
    """
    storage = BrowserStorage.from_session_state()
    redirect = LoginRedirect(st.session_state[SESSION_STORAGE_MIRROR])

    if SESSION_API_CLIENT not in st.session_state:
        session = SessionStore(
            storage=storage,
            cipher=TokenCipher(app_config.validate().storage_secret_key),
            navigator=redirect,
        )
        st.session_state[SESSION_API_CLIENT] = APIClient(session)
        logger.info(f"API client created for {app_config.api_url}")

    redirect.consume()
    return st.session_state[SESSION_API_CLIENT]


def restore_user(client: APIClient) -> Optional[Dict[str, Any]]:
    """Загрузить пользователя в session state один раз за сессию."""
    if not st.session_state.get(SESSION_USER_CHECKED):
        st.session_state[SESSION_USER_INFO] = fetch_current_user(client)
        st.session_state[SESSION_USER_CHECKED] = True
    return st.session_state.get(SESSION_USER_INFO)


def require_authentication() -> APIClient:
    """
    Требует авторизацию, иначе перенаправляет на страницу входа.

    Returns:
        API клиент авторизованного пользователя
    """
    init_session_state()
    client = get_api_client()
    ensure_storage_loaded()

    if not client.is_authenticated():
        st.switch_page(PAGE_LOGIN)

    restore_user(client)
    return client


def require_admin(client: APIClient) -> bool:
    """Показывает предупреждение, если у пользователя нет роли ADMIN."""
    if client.is_admin():
        return True
    st.warning(MSG_ADMIN_REQUIRED)
    return False


def logout() -> None:
    """Выход из системы и очистка session state."""
    logger.info("User logged out")
    client = get_api_client()
    clear_session_state()
    client.logout()
