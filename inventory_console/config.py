"""Конфигурация приложения."""

import os
from dataclasses import dataclass, field
from typing import Dict

from dotenv import load_dotenv

from core.exceptions import ConfigurationError

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class PageConfig:
    """Конфигурация страницы Streamlit."""

    title: str
    icon: str
    layout: str = "wide"
    initial_sidebar_state: str = "expanded"


@dataclass
class AppConfig:
    """Основная конфигурация приложения."""

    # API настройки
    api_url: str = field(default_factory=lambda: os.getenv("API_URL", "http://localhost:5050/api"))
    api_timeout: float = field(default_factory=lambda: float(os.getenv("API_TIMEOUT", "30")))

    # Ключ для шифрования токена в localStorage (только обфускация)
    storage_secret_key: str = field(
        default_factory=lambda: os.getenv("STORAGE_SECRET_KEY", "inventorySecretKey")
    )

    # Параллельные запросы (корзина, дашборд)
    fanout_max_workers: int = field(default_factory=lambda: int(os.getenv("FANOUT_MAX_WORKERS", "8")))

    # Дашборд и транзакции
    low_stock_threshold: int = 10
    transactions_page_size: int = 1000
    recent_transactions_limit: int = 5

    # Логирование
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("LOG_JSON"))

    def validate(self) -> "AppConfig":
        """
        Проверка конфигурации.

        Raises:
            ConfigurationError: Если base URL или таймаут некорректны
        """
        if not self.api_url or not self.api_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                "API_URL must be an absolute http(s) URL",
                details={"api_url": self.api_url},
            )
        if self.api_timeout <= 0:
            raise ConfigurationError(
                "API_TIMEOUT must be positive",
                details={"api_timeout": self.api_timeout},
            )
        if self.fanout_max_workers < 1:
            raise ConfigurationError(
                "FANOUT_MAX_WORKERS must be at least 1",
                details={"fanout_max_workers": self.fanout_max_workers},
            )
        return self


# Конфигурации страниц
PAGE_CONFIGS: Dict[str, PageConfig] = {
    "main": PageConfig(title="Inventory Console", icon="📦"),
    "login": PageConfig(
        title="Sign in - Inventory Console",
        icon="🔐",
        layout="centered",
        initial_sidebar_state="collapsed",
    ),
    "dashboard": PageConfig(title="Dashboard - Inventory Console", icon="📊"),
    "products": PageConfig(title="Products - Inventory Console", icon="📦"),
    "categories": PageConfig(title="Categories - Inventory Console", icon="🗂️"),
    "suppliers": PageConfig(title="Suppliers - Inventory Console", icon="🚚"),
    "transactions": PageConfig(title="Transactions - Inventory Console", icon="🔁"),
    "purchase": PageConfig(title="Purchase - Inventory Console", icon="🛒"),
    "sell": PageConfig(title="Sell - Inventory Console", icon="🏷️"),
    "profile": PageConfig(title="Profile - Inventory Console", icon="👤", layout="centered"),
}


# Глобальная конфигурация
app_config = AppConfig()
