"""Key/value хранилища для сессии: в памяти и localStorage браузера."""

import json
import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple

import streamlit as st
from streamlit_js_eval import streamlit_js_eval

from constants import (
    LOCALSTORAGE_AUTH_TOKEN_KEY,
    LOCALSTORAGE_USER_ROLE_KEY,
    SESSION_STORAGE_MIRROR,
)

logger = logging.getLogger(__name__)

PERSISTED_KEYS: Tuple[str, ...] = (LOCALSTORAGE_AUTH_TOKEN_KEY, LOCALSTORAGE_USER_ROLE_KEY)

STORAGE_LOAD_COMPONENT_KEY = "storage_load"
STORAGE_WRITE_COMPONENT_KEY = "storage_write"
WRITE_ACK = "ok"

# JSON.stringify даёт строку и для пустого localStorage: None означает "браузер ещё не ответил"
LOAD_EXPRESSION = (
    f"JSON.stringify(Object.fromEntries({json.dumps(list(PERSISTED_KEYS))}"
    ".map((key) => [key, localStorage.getItem(key)])))"
)


class KeyValueStorage:
    """Интерфейс хранилища в стиле window.localStorage."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """Хранилище в памяти процесса (тесты, скрипты)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class BrowserStorage(KeyValueStorage):
    """
    localStorage браузера через компонент streamlit_js_eval.

    Значения зеркалируются в st.session_state: чтения идут из зеркала,
    а записи копятся в очереди и уходят в браузер пачкой на flush().
    Пачка остаётся в отправке, пока браузер не подтвердит выполнение,
    поэтому перезапуск скрипта до ответа компонента её не теряет.

    Компонент с фиксированным key можно отрисовать только один раз
    за рендер, поэтому load() и flush() вызываются из одного места
    (core.auth.ensure_storage_loaded).
    """

    def __init__(self, state: MutableMapping[str, Any]) -> None:
        state.setdefault("items", {})
        state.setdefault("pending", [])
        state.setdefault("in_flight", [])
        state.setdefault("batch", 0)
        self._state = state
        self._mirror: MutableMapping[str, str] = state["items"]

    @classmethod
    def from_session_state(cls) -> "BrowserStorage":
        """Создать хранилище, привязанное к текущей сессии Streamlit."""
        if SESSION_STORAGE_MIRROR not in st.session_state:
            st.session_state[SESSION_STORAGE_MIRROR] = {}
        return cls(st.session_state[SESSION_STORAGE_MIRROR])

    def get_item(self, key: str) -> Optional[str]:
        return self._mirror.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._mirror[key] = value
        self._state["pending"].append(f"localStorage.setItem({json.dumps(key)}, {json.dumps(value)});")
        logger.info(f"[STORAGE] Saved '{key}', length: {len(value)}")

    def remove_item(self, key: str) -> None:
        self._mirror.pop(key, None)
        self._state["pending"].append(f"localStorage.removeItem({json.dumps(key)});")
        logger.info(f"[STORAGE] Removed '{key}'")

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._state["pending"] or self._state["in_flight"])

    def load(self) -> bool:
        """
        Прочитать сохранённые значения из localStorage в зеркало.

        Компонент отвечает асинхронно: на первом рендере он возвращает None,
        а получив значение из браузера, сам перезапускает скрипт.

        Returns:
            True если браузер ответил (даже если сохранённой сессии нет)
        """
        raw = streamlit_js_eval(js_expressions=LOAD_EXPRESSION, key=STORAGE_LOAD_COMPONENT_KEY)
        if raw is None:
            logger.info("[STORAGE] Waiting for localStorage values")
            return False

        values = raw
        if isinstance(raw, str):
            try:
                values = json.loads(raw)
            except ValueError:
                logger.warning("[STORAGE] Component returned malformed payload, ignoring stored session")
                return True
        if not isinstance(values, dict):
            logger.warning(f"[STORAGE] Unexpected component payload: {type(values).__name__}")
            return True

        for key in PERSISTED_KEYS:
            value = values.get(key)
            # Запись, сделанная в этой сессии до ответа браузера, новее сохранённой
            if value and key not in self._mirror:
                self._mirror[key] = value
        logger.info(f"[STORAGE] Loaded {len(self._mirror)} item(s) from localStorage")
        return True

    def flush(self) -> bool:
        """
        Отправить отложенные записи в localStorage (только из потока Streamlit).

        Returns:
            True если все записи подтверждены браузером
        """
        pending = self._state["pending"]
        if not self._state["in_flight"]:
            if not pending:
                return True
            # Рабочие потоки могут дописывать в очередь во время переноса
            count = len(pending)
            self._state["in_flight"] = pending[:count]
            del pending[:count]
            self._state["batch"] += 1

        script = "\n".join(self._state["in_flight"] + [f"{json.dumps(WRITE_ACK)};"])
        ack = streamlit_js_eval(
            js_expressions=script,
            key=f"{STORAGE_WRITE_COMPONENT_KEY}_{self._state['batch']}",
        )
        if ack is None:
            logger.debug(f"[STORAGE] Batch {self._state['batch']} sent, waiting for browser")
            return False

        logger.info(f"[STORAGE] Batch {self._state['batch']} written ({len(self._state['in_flight'])} statement(s))")
        self._state["in_flight"] = []
        return not pending
