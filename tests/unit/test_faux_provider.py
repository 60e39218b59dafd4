"""Unit tests for FauxProvider"""

import pytest

from authgate.core.errors import RefreshTokenUnsupportedError, SessionError
from authgate.providers.faux import FAUX_AUTH_URL, FauxProvider, FauxSession

pytestmark = pytest.mark.unit


@pytest.fixture
def provider():
    return FauxProvider()


def test_full_flow(provider):
    """Happy path: begin, round-trip, authorize, fetch"""
    session = provider.begin_auth("state-1")
    assert session.get_auth_url() == f"{FAUX_AUTH_URL}?state=state-1"

    restored = provider.unmarshal_session(session.marshal())
    assert restored == session

    assert restored.authorize(provider, {}) == "1234567890"
    user = provider.fetch_user(restored)

    assert user.provider == "faux"
    assert user.name == "Homer Simpson"
    assert user.email == "homer@example.com"
    assert user.access_token == "1234567890"


def test_session_fields_survive_round_trip(provider):
    session = FauxSession(state="s", name="Marge", email="marge@example.com", access_token="t")

    restored = provider.unmarshal_session(session.marshal())

    assert provider.fetch_user(restored).name == "Marge"


def test_fetch_user_requires_authorization(provider):
    with pytest.raises(SessionError, match="without accessToken"):
        provider.fetch_user(provider.begin_auth("s"))


@pytest.mark.parametrize("data", ["", "[]", '{"unknown": 1}'])
def test_unmarshal_invalid(provider, data):
    with pytest.raises(SessionError):
        provider.unmarshal_session(data)


def test_refresh_not_supported(provider):
    """Callers must check refresh_token_available() first"""
    assert provider.refresh_token_available() is False

    with pytest.raises(RefreshTokenUnsupportedError):
        provider.refresh_token("anything")
