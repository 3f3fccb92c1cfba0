"""Тесты конфигурации и логирования."""

import json
import logging

import pytest

from config import AppConfig
from core.exceptions import ConfigurationError
from core.logging_config import ColoredFormatter, JSONFormatter


def test_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("API_URL", "https://inventory.example.com/api")
    monkeypatch.setenv("API_TIMEOUT", "12.5")
    monkeypatch.setenv("FANOUT_MAX_WORKERS", "4")
    monkeypatch.setenv("LOG_JSON", "true")

    config = AppConfig()

    assert config.api_url == "https://inventory.example.com/api"
    assert config.api_timeout == 12.5
    assert config.fanout_max_workers == 4
    assert config.log_json is True
    assert config.validate() is config


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_url": "localhost:5050/api"},
        {"api_url": ""},
        {"api_timeout": 0},
        {"fanout_max_workers": 0},
    ],
)
def test_invalid_config(overrides):
    config = AppConfig(**overrides)

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate()

    assert exc_info.value.to_dict()["error"] == "CONFIGURATION_ERROR"


def _record(message="hello", **extra):
    record = logging.LogRecord("api_client", logging.WARNING, __file__, 10, message, None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields():
    payload = json.loads(JSONFormatter().format(_record(status_code=401)))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "api_client"
    assert payload["message"] == "hello"
    assert payload["status_code"] == 401


def test_colored_formatter_restores_levelname():
    record = _record()
    output = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "\033[33mWARNING\033[0m hello" == output
    assert record.levelname == "WARNING"
