"""Configuration settings for authgate.

Values come from environment variables prefixed with AUTHGATE_ (or a .env
file), e.g. AUTHGATE_LOG_LEVEL=DEBUG, AUTHGATE_OAUTH2_CLIENT_ID=xxx.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="AUTHGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = "authgate"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # json or text

    # Default outbound HTTP transport
    http_timeout_seconds: float = 10.0
    http_user_agent: str = "authgate/1.0"

    # Generic OAuth2 provider (registered by register_from_settings)
    oauth2_provider_name: str = "oauth2"
    oauth2_client_id: Optional[str] = None
    oauth2_client_secret: Optional[str] = None
    oauth2_callback_url: Optional[str] = None
    oauth2_auth_url: Optional[str] = None
    oauth2_token_url: Optional[str] = None
    oauth2_profile_url: Optional[str] = None
    oauth2_scopes: str = "openid email profile"
    oauth2_use_pkce: bool = False

    @property
    def oauth2_configured(self) -> bool:
        """True if any generic OAuth2 setting has been provided"""
        return any([
            self.oauth2_client_id,
            self.oauth2_client_secret,
            self.oauth2_auth_url,
            self.oauth2_token_url,
        ])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
