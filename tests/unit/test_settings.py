"""Unit tests for settings and logging configuration"""

import json
import logging

import pytest
from pythonjsonlogger.jsonlogger import JsonFormatter

from authgate.config.log import configure_logging
from authgate.config.settings import Settings, get_settings

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.service_name == "authgate"
    assert settings.debug is False
    assert settings.http_timeout_seconds == 10.0
    assert settings.oauth2_configured is False


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("AUTHGATE_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("AUTHGATE_DEBUG", "true")

    settings = Settings(_env_file=None)

    assert settings.log_level == "WARNING"
    assert settings.debug is True


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_configure_logging_text(restore_root_logger):
    handler = configure_logging(Settings(_env_file=None, log_level="warning"))

    assert restore_root_logger.level == logging.WARNING
    assert handler in restore_root_logger.handlers
    assert not isinstance(handler.formatter, JsonFormatter)


def test_configure_logging_replaces_own_handler(restore_root_logger):
    """Calling twice leaves a single authgate handler"""
    first = configure_logging(Settings(_env_file=None))
    second = configure_logging(Settings(_env_file=None))

    assert first not in restore_root_logger.handlers
    assert second in restore_root_logger.handlers


def test_configure_logging_debug_overrides_level(restore_root_logger):
    configure_logging(Settings(_env_file=None, log_level="ERROR", debug=True))

    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_json(restore_root_logger):
    handler = configure_logging(Settings(_env_file=None, log_format="json"))

    record = logging.LogRecord("authgate.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    entry = json.loads(handler.formatter.format(record))

    assert isinstance(handler.formatter, JsonFormatter)
    assert entry["logger"] == "authgate.test"
    assert entry["level"] == "INFO"
    assert entry["message"] == "hello world"
    assert "timestamp" in entry
