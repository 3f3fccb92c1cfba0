"""Сессия пользователя: токен и роль в зашифрованном виде + session state Streamlit."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, MutableMapping, Optional

import streamlit as st
from streamlit.runtime.scriptrunner import get_script_run_ctx

from constants import (
    LOCALSTORAGE_AUTH_TOKEN_KEY,
    LOCALSTORAGE_USER_ROLE_KEY,
    PAGE_LOGIN,
    ROLE_ADMIN,
    SESSION_EDIT_PRODUCT_ID,
    SESSION_FLASH_MESSAGE,
    SESSION_PENDING_REDIRECT,
    SESSION_PURCHASE_CART,
    SESSION_SALE_CART,
    SESSION_USER_CHECKED,
    SESSION_USER_INFO,
)
from core.crypto import TokenCipher
from core.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Состояние сессии: других промежуточных состояний нет."""

    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionStore:
    """
    Хранилище токена и роли.

    Создаётся явно и передаётся в APIClient, поэтому в одном процессе
    может жить несколько независимых сессий.

    Args:
        storage: Key/value хранилище (localStorage браузера или память)
        cipher: Шифр для значений в хранилище
        navigator: Вызывается после clear() для перехода на страницу входа
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        cipher: TokenCipher,
        navigator: Callable[[], None],
    ) -> None:
        self._storage = storage
        self._cipher = cipher
        self._navigator = navigator

    def set_token(self, token: str) -> None:
        self._write(LOCALSTORAGE_AUTH_TOKEN_KEY, token)

    def get_token(self) -> Optional[str]:
        return self._read(LOCALSTORAGE_AUTH_TOKEN_KEY)

    def set_role(self, role: str) -> None:
        self._write(LOCALSTORAGE_USER_ROLE_KEY, role)

    def get_role(self) -> Optional[str]:
        return self._read(LOCALSTORAGE_USER_ROLE_KEY)

    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def is_admin(self) -> bool:
        return self.get_role() == ROLE_ADMIN

    @property
    def state(self) -> SessionState:
        if self.is_authenticated():
            return SessionState.AUTHENTICATED
        return SessionState.ANONYMOUS

    def discard(self) -> None:
        """Удалить токен и роль без перехода на страницу входа."""
        self._storage.remove_item(LOCALSTORAGE_AUTH_TOKEN_KEY)
        self._storage.remove_item(LOCALSTORAGE_USER_ROLE_KEY)

    def clear(self) -> None:
        """Удалить токен и роль и перейти на страницу входа."""
        logger.info("Clearing session and redirecting to login")
        self.discard()
        self._navigator()

    def _write(self, key: str, value: str) -> None:
        self._storage.set_item(key, self._cipher.encrypt(value))

    def _read(self, key: str) -> Optional[str]:
        ciphertext = self._storage.get_item(key)
        if not ciphertext:
            return None
        return self._cipher.decrypt(ciphertext) or None


class LoginRedirect:
    """
    Навигатор для SessionStore внутри Streamlit.

    В потоке скрипта сразу переключает страницу. Из рабочих потоков
    (fan-out) только ставит флаг, который обрабатывает consume().
    """

    def __init__(self, flags: MutableMapping[str, Any], page: str = PAGE_LOGIN) -> None:
        self._flags = flags
        self._page = page

    def __call__(self) -> None:
        if get_script_run_ctx(suppress_warning=True) is None:
            self._flags[SESSION_PENDING_REDIRECT] = True
            return
        self._flags.pop(SESSION_PENDING_REDIRECT, None)
        st.switch_page(self._page)

    def consume(self) -> None:
        """Выполнить отложенный переход, если он был запрошен."""
        if self._flags.pop(SESSION_PENDING_REDIRECT, False):
            st.switch_page(self._page)


def init_session_state() -> None:
    """Инициализация session state с значениями по умолчанию."""
    defaults: Dict[str, Any] = {
        SESSION_USER_INFO: None,
        SESSION_USER_CHECKED: False,
        SESSION_PURCHASE_CART: (),
        SESSION_SALE_CART: (),
        SESSION_EDIT_PRODUCT_ID: None,
        SESSION_FLASH_MESSAGE: None,
    }

    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def clear_session_state() -> None:
    """Очистка session state (logout)."""
    logger.info("Clearing session state")

    st.session_state[SESSION_USER_INFO] = None
    st.session_state[SESSION_USER_CHECKED] = False
    st.session_state[SESSION_PURCHASE_CART] = ()
    st.session_state[SESSION_SALE_CART] = ()
    st.session_state[SESSION_EDIT_PRODUCT_ID] = None
    st.session_state[SESSION_FLASH_MESSAGE] = None
