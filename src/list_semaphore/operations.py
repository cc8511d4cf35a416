"""Acquire and release, expressed as list-store commands.

A semaphore is a list in the store and each entry is one permit. Releasing
pushes an entry; acquiring pops one, waiting a bounded time for it. The store
guarantees each pushed entry reaches at most one popper, which is all the
mutual exclusion a semaphore needs, so nothing here holds a lock or keeps
state between calls.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final, Optional, Union

from pottery import ContextTimer

if TYPE_CHECKING:
    from .aiostore import AIOListStore
    from .store import Duration, ListStore

logger = logging.getLogger(__name__)

# Only the list length matters; the entry content is never inspected.
PERMIT: Final[str] = "1"


def release(store: ListStore, name: Union[str, bytes]) -> Any:
    """Make one more permit available on semaphore ``name``.

    Returns the store's acknowledgment for the push (the new list length on
    Redis). Not idempotent: every call adds a permit.
    """
    return store.push(name, PERMIT)


def acquire(
    store: ListStore, name: Union[str, bytes], duration: Duration
) -> Optional[bytes]:
    """Take one permit from semaphore ``name``, waiting up to ``duration``.

    Args:
        store: List store holding the semaphore
        name: Semaphore name
        duration: Seconds (or a timedelta) to wait; zero or less polls once

    Returns:
        The popped entry on success, ``None`` if no permit arrived in time
    """
    with ContextTimer() as timer:
        permit = store.blocking_pop(name, duration)
    _log_outcome(name, permit, timer.elapsed())
    return permit


async def aio_release(store: AIOListStore, name: Union[str, bytes]) -> Any:
    """Async :func:`release`."""
    return await store.push(name, PERMIT)


async def aio_acquire(
    store: AIOListStore, name: Union[str, bytes], duration: Duration
) -> Optional[bytes]:
    """Async :func:`acquire`."""
    with ContextTimer() as timer:
        permit = await store.blocking_pop(name, duration)
    _log_outcome(name, permit, timer.elapsed())
    return permit


def _log_outcome(
    name: Union[str, bytes], permit: Optional[bytes], elapsed: int
) -> None:
    if permit is None:
        logger.debug("Timed out acquiring %r after %dms", name, elapsed)
    else:
        logger.debug("Acquired %r after %dms", name, elapsed)
