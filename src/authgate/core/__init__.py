"""Provider contract and registry.

Every identity provider implements Provider; ProviderRegistry resolves a
provider name to a live instance at request time.
"""

from .errors import (
    NO_AUTH_URL_ERROR_MESSAGE,
    AuthenticationError,
    AuthGateError,
    ConfigurationError,
    NoAuthURLError,
    NoSuchProviderError,
    ProviderError,
    RefreshTokenUnsupportedError,
    SessionError,
)
from .provider import Provider, Session, Token, User
from .registry import (
    ProviderRegistry,
    Providers,
    clear_providers,
    default_registry,
    get_provider,
    get_providers,
    remove_provider,
    use_providers,
)
from .factory import providers_from_settings, register_from_settings
from .transport import TransportContext, context_for_client, http_client_with_fallback

__all__ = [
    "NO_AUTH_URL_ERROR_MESSAGE",
    "AuthGateError",
    "AuthenticationError",
    "ConfigurationError",
    "NoAuthURLError",
    "NoSuchProviderError",
    "ProviderError",
    "RefreshTokenUnsupportedError",
    "SessionError",
    "Provider",
    "Session",
    "Token",
    "User",
    "ProviderRegistry",
    "Providers",
    "clear_providers",
    "default_registry",
    "get_provider",
    "get_providers",
    "remove_provider",
    "use_providers",
    "providers_from_settings",
    "register_from_settings",
    "TransportContext",
    "context_for_client",
    "http_client_with_fallback",
]
