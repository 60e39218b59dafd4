"""Generic OAuth 2.0 authorization-code provider.

Works against any server exposing the standard authorize / token endpoints:
- Authorization code grant, with optional PKCE (S256)
- Refresh token grant
- Profile from a userinfo-style endpoint and/or the OpenID Connect ID token

Example:
    provider = OAuth2Provider(
        client_id="xxx",
        client_secret="xxx",
        callback_url="https://app.example.com/auth/oauth2/callback",
        auth_url="https://idp.example.com/oauth2/authorize",
        token_url="https://idp.example.com/oauth2/token",
        profile_url="https://idp.example.com/oauth2/userinfo",
    )
"""

import base64
import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlencode

import httpx
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from authgate.core.errors import (
    AuthenticationError,
    NoAuthURLError,
    SessionError,
)
from authgate.core.provider import Provider, Session, Token, User
from authgate.core.transport import context_for_client, http_client_with_fallback

logger = logging.getLogger(__name__)


class OAuth2Session(BaseModel, Session):
    """In-flight state of an OAuth2 authorization-code attempt.

    Attributes:
        provider: Name of the provider that started the attempt
        auth_url: URL the user is redirected to
        state: Anti-forgery token sent with the authorization request
        code_verifier: PKCE verifier (empty when PKCE is off)
        access_token: Set once the code has been exchanged
        refresh_token: Set once the code has been exchanged, if issued
        expires_at: Access token expiry (UTC)
        id_token: OpenID Connect ID token, if issued
    """
    provider: str
    auth_url: str
    state: str = ""
    code_verifier: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_at: Optional[datetime] = None
    id_token: str = ""

    def get_auth_url(self) -> str:
        if not self.auth_url:
            raise NoAuthURLError()
        return self.auth_url

    def authorize(self, provider: Provider, params: Mapping[str, str]) -> str:
        """Exchange the callback code for tokens and store them on the session.

        Raises:
            SessionError: If the provider or callback does not match this session
            AuthenticationError: If the token exchange fails
        """
        if not isinstance(provider, OAuth2Provider):
            raise SessionError(
                f"{self.provider} session can only be completed by an OAuth2Provider"
            )
        if provider.name != self.provider:
            raise SessionError(
                f"session belongs to provider {self.provider!r}, not {provider.name!r}"
            )

        if self.state and params.get("state") != self.state:
            raise SessionError("state parameter does not match the authentication request")

        code = params.get("code")
        if not code:
            raise SessionError("authorization code missing from callback parameters")

        tokens = provider.exchange_code(code, code_verifier=self.code_verifier or None)

        self.access_token = tokens["access_token"]
        self.refresh_token = _str_claim(tokens, "refresh_token")
        self.expires_at = _expiry_from(tokens)
        self.id_token = _str_claim(tokens, "id_token")
        return self.access_token

    def marshal(self) -> str:
        return self.model_dump_json()

    def __str__(self) -> str:
        return self.marshal()


class OAuth2Provider(Provider):
    """OAuth 2.0 provider for any standards-compliant authorization server."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        callback_url: str,
        auth_url: str,
        token_url: str,
        profile_url: Optional[str] = None,
        scopes: Optional[list[str]] = None,
        name: str = "oauth2",
        http_client: Optional[httpx.Client] = None,
        use_pkce: bool = False,
    ):
        """Initialize OAuth2 provider.

        Args:
            client_id: OAuth 2.0 client ID
            client_secret: OAuth 2.0 client secret
            callback_url: Redirect URI registered with the server
            auth_url: Authorization endpoint
            token_url: Token endpoint
            profile_url: Userinfo endpoint (optional)
            scopes: Scopes to request (default: openid email profile)
            name: Registry name
            http_client: Client to use instead of the shared default
            use_pkce: Send a PKCE S256 challenge with the authorization request
        """
        super().__init__(name)
        self.client_id = client_id
        self.client_secret = client_secret
        self.callback_url = callback_url
        self.auth_url = auth_url
        self.token_url = token_url
        self.profile_url = profile_url
        self.scopes = scopes or ["openid", "email", "profile"]
        self.http_client = http_client
        self.use_pkce = use_pkce

    def begin_auth(self, state: str) -> OAuth2Session:
        """Build the authorization URL for a new attempt.

        Raises:
            NoAuthURLError: If auth_url is not configured
        """
        if not self.auth_url:
            raise NoAuthURLError()

        params = {
            "client_id": self.client_id,
            "redirect_uri": self.callback_url,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }

        code_verifier = ""
        if self.use_pkce:
            code_verifier = secrets.token_urlsafe(64)
            params["code_challenge"] = _code_challenge(code_verifier)
            params["code_challenge_method"] = "S256"

        separator = "&" if "?" in self.auth_url else "?"
        session = OAuth2Session(
            provider=self.name,
            auth_url=f"{self.auth_url}{separator}{urlencode(params)}",
            state=state,
            code_verifier=code_verifier,
        )
        self._log_debug("authorization URL: %s", session.auth_url)
        return session

    def unmarshal_session(self, data: str) -> OAuth2Session:
        try:
            session = OAuth2Session.model_validate_json(data)
        except ValidationError as e:
            raise SessionError(f"invalid {self.name} session data") from e

        if session.provider != self.name:
            raise SessionError(
                f"session belongs to provider {session.provider!r}, not {self.name!r}"
            )
        return session

    def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> Dict[str, Any]:
        """Exchange an authorization code at the token endpoint.

        Returns:
            Decoded token response (always contains access_token)

        Raises:
            AuthenticationError: If the exchange fails
        """
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.callback_url,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        if code_verifier:
            data["code_verifier"] = code_verifier

        return self._token_request(data, "Token exchange")

    def fetch_user(self, session: OAuth2Session) -> User:
        """Build the user profile from the ID token and the profile endpoint.

        Raises:
            SessionError: If the session has not been authorized yet
            AuthenticationError: If the profile cannot be fetched
        """
        if not session.access_token:
            raise SessionError(f"{self.name} cannot get user information without accessToken")

        raw_data: Dict[str, Any] = {}
        if session.id_token:
            try:
                raw_data.update(jwt.get_unverified_claims(session.id_token))
            except JWTError as e:
                raise AuthenticationError(f"Invalid ID token: {e}") from e

        if self.profile_url:
            raw_data.update(self._fetch_profile(session.access_token))

        location = raw_data.get("location")
        if isinstance(location, dict):
            # Facebook-style {"id": ..., "name": ...}
            location = location.get("name")

        return User(
            provider=self.name,
            user_id=_id_claim(raw_data, "sub", "id"),
            email=_str_claim(raw_data, "email"),
            name=_str_claim(raw_data, "name"),
            first_name=_str_claim(raw_data, "given_name", "first_name"),
            last_name=_str_claim(raw_data, "family_name", "last_name"),
            nick_name=_str_claim(raw_data, "preferred_username", "login"),
            description=_str_claim(raw_data, "bio"),
            avatar_url=_str_claim(raw_data, "picture", "avatar_url"),
            location=location if isinstance(location, str) else "",
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            id_token=session.id_token,
            raw_data=raw_data,
        )

    def refresh_token(self, refresh_token: str) -> Token:
        """Refresh an access token.

        Raises:
            AuthenticationError: If the refresh fails
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        tokens = self._token_request(data, "Token refresh")

        known = {"access_token", "token_type", "refresh_token", "expires_in"}
        return Token(
            access_token=tokens["access_token"],
            token_type=_str_claim(tokens, "token_type") or "Bearer",
            refresh_token=_str_claim(tokens, "refresh_token") or refresh_token,  # Some servers don't rotate
            expiry=_expiry_from(tokens),
            extra={k: v for k, v in tokens.items() if k not in known},
        )

    def refresh_token_available(self) -> bool:
        return True

    def _token_request(self, data: Dict[str, str], action: str) -> Dict[str, Any]:
        client = context_for_client(self.http_client).client()
        try:
            response = client.post(
                self.token_url,
                data=data,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"{self.name}: {action} request failed: {e}")
            raise AuthenticationError(f"{action} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"{self.name}: {action} failed: {response.text}")
            raise AuthenticationError(
                f"{action} failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            tokens = response.json()
        except ValueError as e:
            raise AuthenticationError(f"{action} returned invalid JSON") from e

        if not isinstance(tokens, dict):
            raise AuthenticationError(f"{action} response was not a JSON object")
        if not _str_claim(tokens, "access_token"):
            raise AuthenticationError(f"{action} response did not include an access_token")

        self._log_debug("%s succeeded (scope=%s)", action, tokens.get("scope"))
        return tokens

    def _fetch_profile(self, access_token: str) -> Dict[str, Any]:
        client = http_client_with_fallback(self.http_client)
        try:
            response = client.get(
                self.profile_url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                },
            )
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Profile request failed: {e}") from e

        if response.status_code != 200:
            logger.warning(f"{self.name}: profile request failed: {response.status_code}")
            raise AuthenticationError(
                f"{self.name} responded with a {response.status_code} trying to fetch user information",
                status_code=response.status_code,
            )

        try:
            profile = response.json()
        except ValueError as e:
            raise AuthenticationError("Profile response was not valid JSON") from e

        if not isinstance(profile, dict):
            raise AuthenticationError("Profile response was not a JSON object")
        return profile


def _str_claim(data: Mapping[str, Any], *keys: str) -> str:
    """First non-empty string value among ``keys``; other types are ignored"""
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _id_claim(data: Mapping[str, Any], *keys: str) -> str:
    """Like _str_claim, but numeric identifiers are accepted too"""
    for key in keys:
        value = data.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, int) or (isinstance(value, str) and value):
            return str(value)
    return ""


def _code_challenge(code_verifier: str) -> str:
    """PKCE S256 challenge for a verifier"""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def _expiry_from(tokens: Mapping[str, Any]) -> Optional[datetime]:
    expires_in = tokens.get("expires_in")
    if not expires_in or isinstance(expires_in, bool):
        return None
    try:
        return datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
    except (TypeError, ValueError, OverflowError):
        return None
