"""Exception hierarchy for the provider contract and registry.

Registry misses raise NoSuchProviderError. Everything a concrete provider can
fail with derives from ProviderError so callers can tell a misconfigured
provider (ConfigurationError, never worth retrying) apart from a rejected or
failed upstream exchange (AuthenticationError).
"""

from typing import Optional

NO_AUTH_URL_ERROR_MESSAGE = "an AuthURL has not been set"


class AuthGateError(Exception):
    """Base class for all authgate errors."""
    pass


class NoSuchProviderError(AuthGateError, LookupError):
    """No provider is registered under the requested name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"no provider for {name} exists")

    def __eq__(self, other):
        if not isinstance(other, NoSuchProviderError):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash((NoSuchProviderError, self.name))


class ProviderError(AuthGateError):
    """Failure raised by a provider implementation."""
    pass


class ConfigurationError(ProviderError):
    """Provider is misconfigured. Retrying will not help."""
    pass


class NoAuthURLError(ConfigurationError):
    """Provider has no authorization URL to send the user to."""

    def __init__(self, message: str = NO_AUTH_URL_ERROR_MESSAGE):
        super().__init__(message)


class RefreshTokenUnsupportedError(ConfigurationError):
    """refresh_token() called on a provider whose protocol has no refresh grant."""

    def __init__(self, provider_name: str):
        self.provider_name = provider_name
        super().__init__(f"refresh token is not provided by {provider_name}")


class SessionError(ProviderError):
    """Session data is malformed, incomplete or belongs to another provider."""
    pass


class AuthenticationError(ProviderError):
    """Upstream identity service rejected the exchange or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
