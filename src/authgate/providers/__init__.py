"""Bundled provider implementations.

- oauth2: generic OAuth 2.0 / OpenID Connect authorization-code provider
- faux: network-free provider for tests
"""

from .faux import FauxProvider, FauxSession
from .oauth2 import OAuth2Provider, OAuth2Session

__all__ = [
    "FauxProvider",
    "FauxSession",
    "OAuth2Provider",
    "OAuth2Session",
]
