"""Provider capability contract.

Every identity-provider integration (Facebook, Twitter, a generic OAuth2
server, ...) subclasses Provider, and every provider-specific piece of
in-flight state subclasses Session. Calling code only ever talks to these
two interfaces, so it never needs to know which provider it is holding.

An authentication attempt moves through four points:

    begin_auth(state)         -> Session with an auth URL (pending)
    session.marshal()         -> string carried across the redirect
    unmarshal_session(data)   -> equivalent Session (pending, reconstructed)
    session.authorize(...)    -> exchanges the callback code for tokens
    fetch_user(session)       -> User (authenticated) or an exception (failed)
"""

import logging
import threading
import weakref
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

# Tokens this close to expiry are already treated as expired
TOKEN_EXPIRY_DELTA = timedelta(seconds=10)


class User(BaseModel):
    """Profile of an authenticated user, as reported by a provider.

    Immutable snapshot; the provider fills in whatever the upstream service
    returns and leaves the rest empty.

    Attributes:
        provider: Name of the provider that authenticated the user
        user_id: Upstream identifier for the user
        email: Email address
        name: Full display name
        first_name: Given name
        last_name: Family name
        nick_name: Handle / preferred username
        description: Free-form profile text
        avatar_url: Profile picture URL
        location: Free-form location
        access_token: Access token obtained during the flow
        access_token_secret: OAuth1 token secret
        refresh_token: Refresh token, when the provider issues one
        expires_at: Access token expiry (UTC)
        id_token: OpenID Connect ID token
        raw_data: Unmapped profile data straight from the provider
    """
    model_config = ConfigDict(frozen=True)

    provider: str = ""
    user_id: str = ""
    email: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    nick_name: str = ""
    description: str = ""
    avatar_url: str = ""
    location: str = ""
    access_token: str = ""
    access_token_secret: str = ""
    refresh_token: str = ""
    expires_at: Optional[datetime] = None
    id_token: str = ""
    raw_data: Dict[str, Any] = Field(default_factory=dict)


class Token(BaseModel):
    """OAuth2 token set returned by a refresh exchange."""
    access_token: str
    token_type: str = "Bearer"
    refresh_token: str = ""
    expiry: Optional[datetime] = None
    extra: Dict[str, Any] = Field(default_factory=dict)

    def valid(self) -> bool:
        """True if the access token is present and not about to expire."""
        if not self.access_token:
            return False
        if self.expiry is None:
            return True
        return self.expiry - TOKEN_EXPIRY_DELTA > datetime.now(timezone.utc)


class Session(ABC):
    """Provider-specific state for one authentication attempt."""

    @abstractmethod
    def get_auth_url(self) -> str:
        """URL the user is sent to in order to authenticate."""
        pass

    @abstractmethod
    def authorize(self, provider: "Provider", params: Mapping[str, str]) -> str:
        """Complete the upstream exchange with the callback parameters.

        Args:
            provider: Provider that created this session
            params: Query parameters received on the callback URL

        Returns:
            The access token obtained

        Raises:
            SessionError: If the parameters do not match this session
            AuthenticationError: If the upstream exchange fails
        """
        pass

    @abstractmethod
    def marshal(self) -> str:
        """Serialize the session so it can survive the redirect round-trip."""
        pass

    def __str__(self) -> str:
        return self.marshal()


class Provider(ABC):
    """Interface every identity provider implements.

    Subclasses must call ``super().__init__(name)``. The name is the key the
    provider is registered under; renaming a registered provider re-keys it
    in every registry that holds it.
    """

    def __init__(self, name: str):
        self._name = name
        self._debug = False
        self._name_lock = threading.Lock()
        self._registries: "weakref.WeakSet" = weakref.WeakSet()

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self.set_name(value)

    def set_name(self, name: str) -> None:
        """Rename the provider, re-keying it in the registries that hold it."""
        with self._name_lock:
            if name == self._name:
                return
            self._name = name
            registries = list(self._registries)
        for registry in registries:
            registry._rekey(self)

    def _attach(self, registry) -> None:
        with self._name_lock:
            self._registries.add(registry)

    def _detach(self, registry) -> None:
        with self._name_lock:
            self._registries.discard(registry)

    def debug(self, enabled: bool) -> None:
        """Toggle verbose diagnostic logging for this provider."""
        self._debug = enabled

    @property
    def debug_enabled(self) -> bool:
        return self._debug

    def _log_debug(self, msg: str, *args) -> None:
        if self._debug:
            logging.getLogger(type(self).__module__).debug("[%s] " + msg, self._name, *args)

    @abstractmethod
    def begin_auth(self, state: str) -> Session:
        """Start an authentication attempt.

        Args:
            state: Opaque anti-forgery token echoed back on the callback

        Returns:
            Session holding everything needed to finish the flow

        Raises:
            NoAuthURLError: If no authorization URL is configured
            ProviderError: If the authorization request cannot be built
        """
        pass

    @abstractmethod
    def unmarshal_session(self, data: str) -> Session:
        """Rebuild a Session from the output of ``Session.marshal()``.

        Raises:
            SessionError: If the data is malformed or from another provider
        """
        pass

    @abstractmethod
    def fetch_user(self, session: Session) -> User:
        """Fetch the authenticated user's profile.

        Raises:
            SessionError: If the session has not been authorized
            AuthenticationError: If the upstream service rejects the request
        """
        pass

    @abstractmethod
    def refresh_token(self, refresh_token: str) -> Token:
        """Exchange a refresh token for a new access token.

        Raises:
            RefreshTokenUnsupportedError: If refresh_token_available() is False
            AuthenticationError: If the upstream exchange fails
        """
        pass

    @abstractmethod
    def refresh_token_available(self) -> bool:
        """Whether the upstream protocol issues refresh tokens at all."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
