"""Async list-store adapter for use with AIOSemaphore.

Issues the same Redis list commands as :class:`~list_semaphore.store.ListStore`
through an async command executor, so sync and async callers can share one
semaphore.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Union

from .store import (
    BLOCKING_POP_COMMAND,
    LENGTH_COMMAND,
    POP_COMMAND,
    PUSH_COMMAND,
    Duration,
    check_name,
    pop_reply_value,
    to_seconds,
)

if TYPE_CHECKING:
    from redis.asyncio import Redis as AIORedis

logger = logging.getLogger(__name__)

AIOCommandExecutor = Callable[..., Awaitable[Any]]


class AIOListStore:
    """Async list store backed by an async command executor.

    Usage:
        >>> from redis.asyncio import Redis
        >>> store = AIOListStore(redis=Redis())
        >>> await store.push('my-list', '1')
        1
        >>> await store.blocking_pop('my-list', 1.0)
        b'1'

    Args:
        execute: Coroutine function running one store command
        redis: Async Redis client used when no executor is given (a default
            client is created lazily if neither is given)
    """

    def __init__(
        self,
        *,
        execute: Optional[AIOCommandExecutor] = None,
        redis: Optional[AIORedis] = None,
    ) -> None:
        if execute is None:
            if redis is None:
                from redis.asyncio import Redis as AIORedisClient

                redis = AIORedisClient()
            execute = redis.execute_command
        self._execute = execute

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> AIOListStore:
        """Build a store from a Redis URL, e.g. ``redis://localhost:6379/0``."""
        from redis.asyncio import Redis as AIORedisClient

        return cls(redis=AIORedisClient.from_url(url, **kwargs))

    async def push(self, name: Union[str, bytes], value: Any) -> Any:
        """Append ``value`` to list ``name`` and return the store's ack."""
        check_name(name)
        ack = await self._execute(PUSH_COMMAND, name, value)
        logger.debug("Pushed onto %r (ack=%r)", name, ack)
        return ack

    async def blocking_pop(
        self, name: Union[str, bytes], timeout: Duration
    ) -> Optional[bytes]:
        """Pop the oldest entry of ``name``, waiting up to ``timeout``."""
        check_name(name)
        seconds = to_seconds(timeout)
        if seconds <= 0:
            return await self._execute(POP_COMMAND, name)
        reply = await self._execute(BLOCKING_POP_COMMAND, name, seconds)
        return pop_reply_value(reply)

    async def length(self, name: Union[str, bytes]) -> int:
        """Return the number of entries in list ``name``."""
        check_name(name)
        return int(await self._execute(LENGTH_COMMAND, name))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} execute={self._execute!r}>"
