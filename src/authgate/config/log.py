"""Logging setup for host applications embedding authgate."""

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

from .settings import Settings, get_settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
JSON_FIELD_NAMES = {"asctime": "timestamp", "name": "logger", "levelname": "level"}


class _AuthGateHandler(logging.StreamHandler):
    """Marker type so repeated configure_logging() calls replace, not stack"""
    pass


def configure_logging(settings: Optional[Settings] = None) -> logging.Handler:
    """Configure root logging from settings.

    AUTHGATE_DEBUG=true forces DEBUG level so provider debug output shows up.
    Handlers installed by other code are left alone.

    Returns:
        The handler that was installed
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()

    handler = _AuthGateHandler()
    if settings.log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT, rename_fields=JSON_FIELD_NAMES))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _AuthGateHandler)]:
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(level)
    return handler
