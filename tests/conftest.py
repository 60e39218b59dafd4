"""
Pytest configuration and fixtures for authgate tests.

Provides fixtures for:
- Fresh and shared provider registries
- Faux providers
- OAuth2 provider wired to an in-process mock authorization server
"""

import json
from typing import Callable, Dict, List
from urllib.parse import parse_qs

import httpx
import pytest

from authgate.config.settings import get_settings
from authgate.core import transport
from authgate.core.registry import ProviderRegistry, clear_providers
from authgate.providers.faux import FauxProvider
from authgate.providers.oauth2 import OAuth2Provider

AUTH_URL = "https://idp.test/oauth2/authorize"
TOKEN_URL = "https://idp.test/oauth2/token"
PROFILE_URL = "https://idp.test/oauth2/userinfo"
CALLBACK_URL = "https://app.test/auth/callback"


@pytest.fixture(autouse=True)
def reset_global_state():
    """Isolate tests from the shared registry, default client and settings cache."""
    clear_providers()
    get_settings.cache_clear()
    yield
    clear_providers()
    transport.close_default_client()
    get_settings.cache_clear()


@pytest.fixture
def registry() -> ProviderRegistry:
    """Fresh, empty registry."""
    return ProviderRegistry()


@pytest.fixture
def make_faux() -> Callable[[str], FauxProvider]:
    """Factory for faux providers with a given name."""
    return lambda name="faux": FauxProvider(name)


class MockAuthServer:
    """In-process stand-in for an OAuth2 authorization server.

    Records every request and answers token/userinfo calls with canned data.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.token_status = 200
        self.profile_status = 200
        self.token_response: Dict = {
            "access_token": "access-123",
            "token_type": "Bearer",
            "refresh_token": "refresh-456",
            "expires_in": 3600,
            "scope": "openid email profile",
        }
        self.profile: Dict = {
            "sub": "user-789",
            "email": "ada@example.com",
            "name": "Ada Lovelace",
            "given_name": "Ada",
            "family_name": "Lovelace",
            "preferred_username": "ada",
            "picture": "https://idp.test/avatars/ada.png",
        }

    def form(self, request: httpx.Request) -> Dict[str, str]:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url == TOKEN_URL:
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json=self.token_response)
        if url == PROFILE_URL:
            if self.profile_status != 200:
                return httpx.Response(self.profile_status, text="unauthorized")
            return httpx.Response(200, content=json.dumps(self.profile).encode(),
                                  headers={"Content-Type": "application/json"})
        return httpx.Response(404)


@pytest.fixture
def auth_server() -> MockAuthServer:
    return MockAuthServer()


@pytest.fixture
def http_client(auth_server):
    client = httpx.Client(transport=httpx.MockTransport(auth_server.handler))
    yield client
    client.close()


@pytest.fixture
def oauth2_provider(http_client) -> OAuth2Provider:
    """OAuth2 provider talking to the mock authorization server."""
    return OAuth2Provider(
        client_id="client-id",
        client_secret="client-secret",
        callback_url=CALLBACK_URL,
        auth_url=AUTH_URL,
        token_url=TOKEN_URL,
        profile_url=PROFILE_URL,
        name="idp",
        http_client=http_client,
    )
