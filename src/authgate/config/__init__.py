"""Configuration and logging setup"""

from .settings import Settings, get_settings
from .log import configure_logging

__all__ = ["Settings", "get_settings", "configure_logging"]
