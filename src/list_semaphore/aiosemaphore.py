"""Async distributed semaphore over a single Redis list."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from .aiostore import AIOListStore
from .exceptions import SemaphoreTimeoutError
from .identifier import new_semaphore
from .operations import aio_acquire, aio_release
from .store import check_name, to_seconds

if TYPE_CHECKING:
    from redis.asyncio import Redis as AIORedis

    from .identifier import RandomSource
    from .store import Duration


class AIOSemaphore:
    """Async distributed Redis-powered counting semaphore.

    Shares its storage layout with :class:`~list_semaphore.Semaphore`, so
    sync and async holders of the same name draw from the same permits.

    Usage:
        >>> import asyncio
        >>> from redis.asyncio import Redis
        >>> async def main():
        ...     redis = Redis()
        ...     sem = await AIOSemaphore.new(value=3, redis=redis)
        ...     if await sem.acquire(timeout=5):
        ...         try:
        ...             # Critical section with limited concurrency
        ...             pass
        ...         finally:
        ...             await sem.release()
        >>> asyncio.run(main())

        >>> # Or use as async context manager
        >>> async with sem:
        ...     # Critical section
        ...     pass

    Args:
        name: The semaphore's name, as minted by :func:`new_semaphore`
        store: Async list store holding the permits
        redis: Async Redis client to build a store from when no store is given
        timeout: Default seconds to wait in acquire and in ``async with``
    """

    _DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        *,
        name: str,
        store: Optional[AIOListStore] = None,
        redis: Optional[AIORedis] = None,
        timeout: Duration = _DEFAULT_TIMEOUT,
    ) -> None:
        check_name(name)
        self._name = name
        self._store = store if store is not None else AIOListStore(redis=redis)
        self._timeout = to_seconds(timeout)

    @classmethod
    async def new(
        cls,
        *,
        value: int = 0,
        rng: Optional[RandomSource] = None,
        **kwargs: Any,
    ) -> AIOSemaphore:
        """Mint a fresh semaphore and release ``value`` initial permits."""
        if value < 0:
            raise ValueError("Semaphore value must be non-negative")

        sem = cls(name=new_semaphore(rng), **kwargs)
        if value:
            await sem.release(n=value)
        return sem

    @property
    def name(self) -> str:
        return self._name

    async def get_value(self) -> int:
        """Return the current number of available permits."""
        return await self._store.length(self._name)

    async def locked(self) -> bool:
        """Return True if no permits are available."""
        return await self.get_value() <= 0

    async def acquire(
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
        return await aio_acquire(self._store, self._name, timeout) is not None

    async def release(self, n: int = 1) -> Any:
        """Release permit(s) back to the semaphore.

        Args:
            n: Number of permits to release (default: 1)

        Returns:
            The store's acknowledgment for the last push
        """
        if n < 1:
            raise ValueError("n must be >= 1")

        for _ in range(n):
            ack = await aio_release(self._store, self._name)
        return ack

    async def __aenter__(self) -> AIOSemaphore:
        """Enter async context manager, acquiring a permit."""
        if not await self.acquire():
            raise SemaphoreTimeoutError(self._name, self._timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager, releasing the permit."""
        await self.release()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"name={self._name!r} "
            f"timeout={self._timeout}>"
        )
