"""Settings-driven provider bootstrap.

Builds the providers described by AUTHGATE_* environment variables and
registers them, so a host application only needs one call at startup.
"""

import logging
from typing import List, Optional

from authgate.config.settings import Settings, get_settings

from .errors import ConfigurationError
from .provider import Provider
from .registry import ProviderRegistry, default_registry

logger = logging.getLogger(__name__)


def providers_from_settings(settings: Optional[Settings] = None) -> List[Provider]:
    """Build the providers configured in settings.

    The generic OAuth2 provider is built when any AUTHGATE_OAUTH2_* credential
    or endpoint is set:
        AUTHGATE_OAUTH2_CLIENT_ID=xxx
        AUTHGATE_OAUTH2_CLIENT_SECRET=xxx
        AUTHGATE_OAUTH2_CALLBACK_URL=https://app.example.com/auth/callback
        AUTHGATE_OAUTH2_AUTH_URL=https://idp.example.com/authorize
        AUTHGATE_OAUTH2_TOKEN_URL=https://idp.example.com/token
        AUTHGATE_OAUTH2_PROFILE_URL=https://idp.example.com/userinfo (optional)

    Raises:
        ConfigurationError: If the OAuth2 settings are only partially set
    """
    settings = settings or get_settings()
    providers: List[Provider] = []

    if settings.oauth2_configured:
        # Defer import so the core does not pull in provider modules
        from authgate.providers.oauth2 import OAuth2Provider

        required = {
            "AUTHGATE_OAUTH2_CLIENT_ID": settings.oauth2_client_id,
            "AUTHGATE_OAUTH2_CLIENT_SECRET": settings.oauth2_client_secret,
            "AUTHGATE_OAUTH2_CALLBACK_URL": settings.oauth2_callback_url,
            "AUTHGATE_OAUTH2_TOKEN_URL": settings.oauth2_token_url,
        }
        missing = [key for key, value in required.items() if not value]
        if missing:
            raise ConfigurationError(
                f"OAuth2 provider requires: {', '.join(missing)}"
            )

        # auth_url may be left empty; begin_auth then raises NoAuthURLError
        providers.append(OAuth2Provider(
            client_id=settings.oauth2_client_id,
            client_secret=settings.oauth2_client_secret,
            callback_url=settings.oauth2_callback_url,
            auth_url=settings.oauth2_auth_url or "",
            token_url=settings.oauth2_token_url,
            profile_url=settings.oauth2_profile_url,
            scopes=settings.oauth2_scopes.split(),
            name=settings.oauth2_provider_name,
            use_pkce=settings.oauth2_use_pkce,
        ))

    for provider in providers:
        provider.debug(settings.debug)
    return providers


def register_from_settings(
    settings: Optional[Settings] = None,
    registry: Optional[ProviderRegistry] = None,
) -> List[Provider]:
    """Build the configured providers and register them.

    Returns:
        The providers that were registered (possibly none)
    """
    registry = registry or default_registry()
    providers = providers_from_settings(settings)
    registry.register(*providers)

    for provider in providers:
        logger.info(f"Auth provider registered: {provider.name} ({provider.__class__.__name__})")
    return providers
