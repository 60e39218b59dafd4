"""End-to-end login flows through the shared registry

Mirrors what an HTTP handler layer does: resolve the provider by name,
begin, ship the marshalled session across the redirect, resume, fetch.
"""

import secrets

import pytest

from authgate import (
    NoSuchProviderError,
    get_provider,
    use_providers,
)
from authgate.providers.faux import FauxProvider

pytestmark = pytest.mark.integration


def _login(provider_name: str, callback_params_for) -> object:
    # Begin: handler for /auth/{provider}
    provider = get_provider(provider_name)
    state = secrets.token_urlsafe(16)
    session = provider.begin_auth(state)
    cookie = session.marshal()
    redirect_to = session.get_auth_url()

    # Callback: handler for /auth/{provider}/callback, possibly another worker
    provider = get_provider(provider_name)
    session = provider.unmarshal_session(cookie)
    session.authorize(provider, callback_params_for(redirect_to, state))
    return provider.fetch_user(session)


def test_oauth2_login(oauth2_provider, auth_server):
    """Happy path: full authorization-code login"""
    use_providers(oauth2_provider, FauxProvider())

    user = _login("idp", lambda url, state: {"code": "code-xyz", "state": state})

    assert user.provider == "idp"
    assert user.email == "ada@example.com"
    assert [str(r.url) for r in auth_server.requests] == [
        "https://idp.test/oauth2/token",
        "https://idp.test/oauth2/userinfo",
    ]


def test_faux_login():
    use_providers(FauxProvider())

    user = _login("faux", lambda url, state: {})

    assert user.name == "Homer Simpson"


def test_unknown_provider_is_recoverable(oauth2_provider):
    """A caller can fall back when the requested provider is missing"""
    use_providers(oauth2_provider)

    try:
        provider = get_provider("facebook")
    except NoSuchProviderError as e:
        assert e.name == "facebook"
        provider = get_provider("idp")

    assert provider is oauth2_provider


def test_refresh_after_login(oauth2_provider, auth_server):
    use_providers(oauth2_provider)
    user = _login("idp", lambda url, state: {"code": "c", "state": state})

    provider = get_provider("idp")
    assert provider.refresh_token_available()
    token = provider.refresh_token(user.refresh_token)

    assert token.valid()
    assert auth_server.form(auth_server.requests[-1])["refresh_token"] == "refresh-456"
