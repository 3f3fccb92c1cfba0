"""
Исключения консоли.

Ожидаемые ошибки backend (валидация, 404, 401) сюда не попадают:
APIClient возвращает их как ApiResponse(success=False).
"""

from typing import Any, Dict, Optional


class ConsoleError(Exception):
    """Базовое исключение консоли"""

    error_code: str = "CONSOLE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация исключения в словарь (для логов)"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ConsoleError):
    """Некорректная конфигурация клиента"""

    error_code = "CONFIGURATION_ERROR"


class CartError(ConsoleError):
    """Недопустимая операция с корзиной (сообщение показывается пользователю)"""

    error_code = "CART_ERROR"


class UserProfileUnavailableError(ConsoleError):
    """Вход выполнен, но профиль пользователя (роль) получить не удалось"""

    error_code = "USER_PROFILE_UNAVAILABLE"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code
