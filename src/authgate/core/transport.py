"""Outbound HTTP transport selection for provider implementations.

Providers never build their own httpx clients ad hoc. They accept an
optional caller-supplied client and resolve it through these helpers, so a
host application can inject proxies, timeouts or a mock transport in one
place.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

import httpx

from authgate.config.settings import get_settings

logger = logging.getLogger(__name__)

# Global default client (created on first use)
_default_client: Optional[httpx.Client] = None
_default_client_lock = threading.Lock()


@dataclass(frozen=True)
class TransportContext:
    """Execution context for an OAuth token exchange.

    Attributes:
        http_client: Client overriding the default transport, or None
    """
    http_client: Optional[httpx.Client] = None

    @property
    def has_override(self) -> bool:
        return self.http_client is not None

    def client(self) -> httpx.Client:
        """Client to use for this exchange"""
        return http_client_with_fallback(self.http_client)


def context_for_client(client: Optional[httpx.Client] = None) -> TransportContext:
    """Build a transport context carrying ``client``.

    With no client, the context carries no override and the default shared
    client is used.
    """
    if client is None:
        return TransportContext()
    return TransportContext(http_client=client)


def http_client_with_fallback(client: Optional[httpx.Client] = None) -> httpx.Client:
    """Return ``client`` if given, else the shared default client."""
    if client is not None:
        return client
    return get_default_client()


def get_default_client() -> httpx.Client:
    """Get the process-wide default HTTP client."""
    global _default_client

    with _default_client_lock:
        if _default_client is None or _default_client.is_closed:
            settings = get_settings()
            _default_client = httpx.Client(
                timeout=settings.http_timeout_seconds,
                headers={"User-Agent": settings.http_user_agent},
            )
            logger.info(f"Default HTTP client created (timeout={settings.http_timeout_seconds}s)")
        return _default_client


def close_default_client() -> None:
    """Close the default HTTP client, if one was created."""
    global _default_client

    with _default_client_lock:
        if _default_client is not None:
            _default_client.close()
            _default_client = None
            logger.info("Default HTTP client closed")
