"""Модуль core: сессия, хранилище, нормализация ответов и fan-out запросов.

core.auth (Streamlit-обвязка над APIClient) импортируется напрямую.
"""

from core.crypto import TokenCipher
from core.envelope import ApiResponse, normalize_response
from core.exceptions import (
    CartError,
    ConfigurationError,
    ConsoleError,
    UserProfileUnavailableError,
)
from core.fanout import FanOutReport, fan_out
from core.session import SessionState, SessionStore
from core.storage import BrowserStorage, KeyValueStorage, MemoryStorage

__all__ = [
    # crypto
    "TokenCipher",
    # envelope
    "ApiResponse",
    "normalize_response",
    # exceptions
    "CartError",
    "ConfigurationError",
    "ConsoleError",
    "UserProfileUnavailableError",
    # fanout
    "FanOutReport",
    "fan_out",
    # session
    "SessionState",
    "SessionStore",
    # storage
    "BrowserStorage",
    "KeyValueStorage",
    "MemoryStorage",
]
