"""Concurrency-safe catalogue of providers, addressable by name.

Providers are registered once at startup (or incrementally) and looked up
per request. ProviderRegistry can be constructed and injected wherever it is
needed; the module-level functions operate on a default shared instance for
callers that do not care.

Example:
    use_providers(github, gitlab)
    provider = get_provider("github")
    session = provider.begin_auth(state)
"""

from typing import Dict, Iterable, List, Optional

from .errors import NoSuchProviderError
from .locks import ReadWriteLock
from .provider import Provider

Providers = Dict[str, Provider]


class ProviderRegistry:
    """Maps provider names to live Provider instances.

    At most one provider is associated with a name; registering another
    provider under the same name replaces it. Reads run concurrently,
    writes are exclusive. The registry never calls into a provider's
    network operations while holding its lock.
    """

    def __init__(self, providers: Optional[Iterable[Provider]] = None):
        self._lock = ReadWriteLock()
        self._providers: Providers = {}
        if providers:
            self.register(*providers)

    def register(self, *providers: Provider) -> None:
        """Add providers, replacing any already registered under the same name.

        Can be called multiple times. If the same name appears more than
        once, the last provider wins.
        """
        with self._lock.write_locked():
            for provider in providers:
                self._put(provider.name, provider)
                provider._attach(self)
                # Renamed between the key read and the attach
                if self._providers.get(provider.name) is not provider:
                    self._rekey_locked(provider)

    def all(self) -> Providers:
        """Snapshot of every registered provider.

        The returned dict is a copy; mutating it does not affect the registry.
        """
        with self._lock.read_locked():
            return dict(self._providers)

    def get(self, name: str) -> Provider:
        """Return the provider registered under ``name``.

        Raises:
            NoSuchProviderError: If no provider has that name
        """
        with self._lock.read_locked():
            provider = self._providers.get(name)
        if provider is None:
            raise NoSuchProviderError(name)
        return provider

    def remove(self, name: str) -> None:
        """Remove the provider registered under ``name``.

        Raises:
            NoSuchProviderError: If no provider has that name
        """
        with self._lock.write_locked():
            provider = self._providers.pop(name, None)
            if provider is None:
                raise NoSuchProviderError(name)
            provider._detach(self)

    def clear(self) -> None:
        """Remove every provider."""
        with self._lock.write_locked():
            providers, self._providers = self._providers, {}
            for provider in providers.values():
                provider._detach(self)

    def names(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._providers)

    def __contains__(self, name: str) -> bool:
        with self._lock.read_locked():
            return name in self._providers

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._providers)

    def __repr__(self) -> str:
        return f"ProviderRegistry(names={self.names()!r})"

    def _put(self, name: str, provider: Provider) -> None:
        previous = self._providers.get(name)
        self._providers[name] = provider
        if previous is not None and previous is not provider:
            previous._detach(self)

    def _rekey(self, provider: Provider) -> None:
        """Move ``provider`` to its current name after a rename."""
        with self._lock.write_locked():
            self._rekey_locked(provider)

    def _rekey_locked(self, provider: Provider) -> None:
        stale = [key for key, value in self._providers.items() if value is provider]
        if not stale:
            # Removed or replaced meanwhile; nothing to move
            return
        for key in stale:
            del self._providers[key]
        self._put(provider.name, provider)


_default_registry = ProviderRegistry()


def default_registry() -> ProviderRegistry:
    """Get the process-wide shared registry."""
    return _default_registry


def use_providers(*providers: Provider) -> None:
    """Register providers in the shared registry."""
    _default_registry.register(*providers)


def get_providers() -> Providers:
    """Snapshot of every provider in the shared registry."""
    return _default_registry.all()


def get_provider(name: str) -> Provider:
    """Look up a provider in the shared registry.

    Raises:
        NoSuchProviderError: If the provider has not been registered
    """
    return _default_registry.get(name)


def remove_provider(name: str) -> None:
    """Remove a provider from the shared registry.

    Raises:
        NoSuchProviderError: If the provider has not been registered
    """
    _default_registry.remove(name)


def clear_providers() -> None:
    """Remove every provider from the shared registry (mostly for tests)."""
    _default_registry.clear()
