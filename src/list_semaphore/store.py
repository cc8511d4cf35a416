"""List-store adapter over a Redis-style command executor.

The semaphore needs exactly two things from the store: append to a named
list, and pop from a named list waiting at most some bounded time. Both are
issued through a *command executor*, a callable ``execute(command, *args)``
such as :meth:`redis.Redis.execute_command`, so any host able to run Redis
list commands can back a semaphore.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

if TYPE_CHECKING:
    from redis import Redis

logger = logging.getLogger(__name__)

Duration = Union[int, float, str, bytes, timedelta]
CommandExecutor = Callable[..., Any]

PUSH_COMMAND = "RPUSH"
BLOCKING_POP_COMMAND = "BLPOP"
POP_COMMAND = "LPOP"
LENGTH_COMMAND = "LLEN"


def to_seconds(duration: Duration) -> float:
    """Normalize an acquire duration to a finite number of seconds.

    Hosts hand arguments over as strings or bytes, so numeric text is
    accepted alongside numbers and :class:`~datetime.timedelta`.
    """
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    elif isinstance(duration, bool):
        raise TypeError("duration must be a number of seconds, not a bool")
    else:
        if isinstance(duration, bytes):
            duration = duration.decode()
        try:
            seconds = float(duration)
        except ValueError:
            raise ValueError(f"Invalid duration: {duration!r}") from None
        except TypeError:
            raise TypeError(
                f"duration must be seconds or a timedelta, not "
                f"{type(duration).__name__}"
            ) from None

    if not math.isfinite(seconds):
        raise ValueError(f"duration must be finite, got {seconds!r}")
    return seconds


def check_name(name: Union[str, bytes]) -> None:
    """Reject names that cannot address a list."""
    if not isinstance(name, (str, bytes)):
        raise TypeError(f"Semaphore name must be str, not {type(name).__name__}")
    if not name:
        raise ValueError("Semaphore name must be non-empty")


def pop_reply_value(reply: Any) -> Optional[bytes]:
    """Extract the popped value from a BLPOP reply (``[key, value]`` or nil)."""
    if not reply:
        return None
    return reply[1]


class ListStore:
    """Synchronous list store backed by a command executor.

    Usage:
        >>> from redis import Redis
        >>> store = ListStore(redis=Redis())
        >>> store.push('my-list', '1')
        1
        >>> store.blocking_pop('my-list', 1.0)
        b'1'

    Args:
        execute: Callable running one store command, ``execute(cmd, *args)``
        redis: Redis client whose ``execute_command`` is used when no
            executor is given (a default ``Redis()`` if neither is given)
    """

    def __init__(
        self,
        *,
        execute: Optional[CommandExecutor] = None,
        redis: Optional[Redis] = None,
    ) -> None:
        if execute is None:
            if redis is None:
                from redis import Redis as RedisClient

                redis = RedisClient()
            execute = redis.execute_command
        self._execute = execute

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> ListStore:
        """Build a store from a Redis URL, e.g. ``redis://localhost:6379/0``."""
        from redis import Redis as RedisClient

        return cls(redis=RedisClient.from_url(url, **kwargs))

    def push(self, name: Union[str, bytes], value: Any) -> Any:
        """Append ``value`` to list ``name`` and return the store's ack."""
        check_name(name)
        ack = self._execute(PUSH_COMMAND, name, value)
        logger.debug("Pushed onto %r (ack=%r)", name, ack)
        return ack

    def blocking_pop(
        self, name: Union[str, bytes], timeout: Duration
    ) -> Optional[bytes]:
        """Pop the oldest entry of ``name``, waiting up to ``timeout``.

        A timeout of zero or less polls once without blocking. Returns
        ``None`` when nothing could be popped in time.
        """
        check_name(name)
        seconds = to_seconds(timeout)
        if seconds <= 0:
            return self._execute(POP_COMMAND, name)
        return pop_reply_value(self._execute(BLOCKING_POP_COMMAND, name, seconds))

    def length(self, name: Union[str, bytes]) -> int:
        """Return the number of entries in list ``name``."""
        check_name(name)
        return int(self._execute(LENGTH_COMMAND, name))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} execute={self._execute!r}>"
