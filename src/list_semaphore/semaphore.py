"""Distributed semaphore over a single Redis list.

This module wraps the acquire/release operations in an object bound to one
semaphore name and one store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .exceptions import SemaphoreTimeoutError
from .identifier import new_semaphore
from .operations import acquire, release
from .store import ListStore, check_name, to_seconds

if TYPE_CHECKING:
    from redis import Redis

    from .identifier import RandomSource
    from .store import Duration


class Semaphore:
    """Distributed Redis-powered counting semaphore.

    Each permit is one entry in a Redis list named after the semaphore.
    Releasing pushes an entry, acquiring pops one with a bounded wait, so
    any number of processes sharing the name share the permits.

    Usage:
        >>> from redis import Redis
        >>> redis = Redis()
        >>> sem = Semaphore.new(value=3, redis=redis)
        >>> if sem.acquire(timeout=5):
        ...     try:
        ...         # Critical section with limited concurrency
        ...         pass
        ...     finally:
        ...         sem.release()

        >>> # Elsewhere, with the name handed over out of band
        >>> other = Semaphore(name=sem.name, redis=redis)
        >>> with other:
        ...     # Critical section
        ...     pass

    Args:
        name: The semaphore's name, as minted by :func:`new_semaphore`
        store: List store holding the permits
        redis: Redis client to build a store from when no store is given
        timeout: Default seconds to wait in acquire and in ``with`` blocks
    """

    _DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        *,
        name: str,
        store: Optional[ListStore] = None,
        redis: Optional[Redis] = None,
        timeout: Duration = _DEFAULT_TIMEOUT,
    ) -> None:
        check_name(name)
        self._name = name
        self._store = store if store is not None else ListStore(redis=redis)
        self._timeout = to_seconds(timeout)

    @classmethod
    def new(
        cls,
        *,
        value: int = 0,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> Semaphore:
        """Mint a fresh semaphore and release ``value`` initial permits."""
        if value < 0:
            raise ValueError("Semaphore value must be non-negative")

        sem = cls(name=new_semaphore(rng), **kwargs)
        if value:
            sem.release(n=value)
        return sem

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> int:
        """Return the current number of available permits."""
        return self._store.length(self._name)

    def locked(self) -> bool:
        """Return True if no permits are available."""
        return self.value <= 0

    def acquire(
        self, *, blocking: bool = True, timeout: Optional[Duration] = None
    ) -> bool:
        """Acquire a permit from the semaphore.

        Args:
            blocking: If False, take a permit only if one is available now
            timeout: Maximum time to wait (defaults to the instance timeout)

        Returns:
            True if permit acquired, False otherwise
        """
        if not blocking:
            timeout = 0
        elif timeout is None:
            timeout = self._timeout
        return acquire(self._store, self._name, timeout) is not None

    def release(self, n: int = 1) -> Any:
        """Release permit(s) back to the semaphore.

        Args:
            n: Number of permits to release (default: 1)

        Returns:
            The store's acknowledgment for the last push
        """
        if n < 1:
            raise ValueError("n must be >= 1")

        for _ in range(n):
            ack = release(self._store, self._name)
        return ack

    def __enter__(self) -> Semaphore:
        """Enter context manager, acquiring a permit."""
        if not self.acquire():
            raise SemaphoreTimeoutError(self._name, self._timeout)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager, releasing the permit."""
        self.release()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"name={self._name!r} "
            f"timeout={self._timeout}>"
        )
