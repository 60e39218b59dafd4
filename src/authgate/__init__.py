"""authgate - one contract for many third-party identity providers."""

from authgate.core import (
    NO_AUTH_URL_ERROR_MESSAGE,
    AuthenticationError,
    AuthGateError,
    ConfigurationError,
    NoAuthURLError,
    NoSuchProviderError,
    Provider,
    ProviderError,
    ProviderRegistry,
    Providers,
    RefreshTokenUnsupportedError,
    Session,
    SessionError,
    Token,
    User,
    clear_providers,
    context_for_client,
    default_registry,
    get_provider,
    get_providers,
    http_client_with_fallback,
    register_from_settings,
    remove_provider,
    use_providers,
)

__version__ = "1.0.0"

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
    "Providers",
    "ProviderRegistry",
    "Session",
    "Token",
    "User",
    "clear_providers",
    "context_for_client",
    "default_registry",
    "get_provider",
    "get_providers",
    "http_client_with_fallback",
    "register_from_settings",
    "remove_provider",
    "use_providers",
]
