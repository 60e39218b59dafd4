"""Reader/writer lock used by the provider registry.

Many readers may hold the lock at once; a writer holds it alone. Every
acquirer passes through a turnstile first, so a waiting writer stops new
readers from piling in behind it and readers queued behind that writer get
in as soon as it is done. Neither side can be starved.
"""

import threading
from contextlib import contextmanager
from typing import Iterator


class ReadWriteLock:
    """Turnstile-based reader/writer lock (not reentrant)."""

    def __init__(self):
        self._turnstile = threading.Lock()
        self._readers_done = threading.Condition(threading.Lock())
        self._readers = 0

    def acquire_read(self) -> None:
        with self._turnstile:
            with self._readers_done:
                self._readers += 1

    def release_read(self) -> None:
        with self._readers_done:
            self._readers -= 1
            if self._readers == 0:
                self._readers_done.notify_all()

    def acquire_write(self) -> None:
        # Turnstile stays held until release_write()
        self._turnstile.acquire()
        with self._readers_done:
            while self._readers:
                self._readers_done.wait()

    def release_write(self) -> None:
        self._turnstile.release()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        with self._readers_done:
            return self._readers
