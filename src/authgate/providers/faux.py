"""Network-free provider for testing host applications.

Completes every authentication attempt without talking to anything, so
login flows can be exercised end to end in tests.
"""

import json
from typing import Mapping

from authgate.core.errors import RefreshTokenUnsupportedError, SessionError
from authgate.core.provider import Provider, Session, Token, User

FAUX_AUTH_URL = "http://example.com/auth"


class FauxSession(Session):
    """Session for FauxProvider"""

    def __init__(self, state: str = "", name: str = "", email: str = "", access_token: str = ""):
        self.state = state
        self.name = name
        self.email = email
        self.access_token = access_token

    def get_auth_url(self) -> str:
        return f"{FAUX_AUTH_URL}?state={self.state}"

    def authorize(self, provider: Provider, params: Mapping[str, str]) -> str:
        self.access_token = "1234567890"
        return self.access_token

    def marshal(self) -> str:
        return json.dumps({
            "state": self.state,
            "name": self.name,
            "email": self.email,
            "access_token": self.access_token,
        })

    def __eq__(self, other):
        if not isinstance(other, FauxSession):
            return NotImplemented
        return self.marshal() == other.marshal()


class FauxProvider(Provider):
    """Provider that always succeeds with a fixed user."""

    def __init__(self, name: str = "faux"):
        super().__init__(name)

    def begin_auth(self, state: str) -> FauxSession:
        self._log_debug("begin_auth state=%s", state)
        return FauxSession(state=state)

    def unmarshal_session(self, data: str) -> FauxSession:
        try:
            fields = json.loads(data)
            return FauxSession(**fields)
        except (ValueError, TypeError) as e:
            raise SessionError(f"invalid {self.name} session data") from e

    def fetch_user(self, session: FauxSession) -> User:
        if not session.access_token:
            raise SessionError(f"{self.name} cannot get user information without accessToken")
        return User(
            provider=self.name,
            user_id="faux-user",
            name=session.name or "Homer Simpson",
            email=session.email or "homer@example.com",
            access_token=session.access_token,
        )

    def refresh_token(self, refresh_token: str) -> Token:
        raise RefreshTokenUnsupportedError(self.name)

    def refresh_token_available(self) -> bool:
        return False
