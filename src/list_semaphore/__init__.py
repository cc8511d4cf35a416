"""Distributed counting semaphore on top of Redis lists.

Each semaphore is a Redis list under a randomly minted name; every entry in
the list is one permit. Releasing pushes an entry and acquiring pops one
with a bounded blocking wait, so the store's atomic pop is the only
coordination cooperating processes need.

Example usage (functions):

    >>> from list_semaphore import ListStore, acquire, new_semaphore, release
    >>>
    >>> store = ListStore.from_url('redis://localhost:6379/0')
    >>> name = new_semaphore()
    >>> release(store, name)
    1
    >>> acquire(store, name, 1.0)
    b'1'
    >>> acquire(store, name, 0) is None
    True

Example usage (sync):

    >>> from redis import Redis
    >>> from list_semaphore import Semaphore
    >>>
    >>> sem = Semaphore.new(value=3, redis=Redis())
    >>> with sem:
    ...     # Critical section with limited concurrency (max 3)
    ...     pass

Example usage (async):

    >>> import asyncio
    >>> from redis.asyncio import Redis
    >>> from list_semaphore import AIOSemaphore
    >>>
    >>> async def main():
    ...     sem = await AIOSemaphore.new(value=3, redis=Redis())
    ...     async with sem:
    ...         # Critical section with limited concurrency
    ...         pass
    >>> asyncio.run(main())
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Final

from .aiosemaphore import AIOSemaphore
from .aiostore import AIOListStore
from .commands import (
    COMMAND_DEC,
    COMMAND_INC,
    COMMAND_NEW,
    CommandRegistrar,
    LocalCommandRegistry,
    register_aio_commands,
    register_commands,
)
from .exceptions import (
    CommandRegistrationError,
    RandomnessError,
    SemaphoreError,
    SemaphoreTimeoutError,
    UnknownCommandError,
)
from .identifier import (
    SEGMENT_COUNT,
    SEGMENT_LENGTH,
    generate_identifier,
    generate_segment,
    new_semaphore,
)
from .operations import acquire, aio_acquire, aio_release, release
from .semaphore import Semaphore
from .store import ListStore

__all__: Final[tuple[str, ...]] = (
    "AIOListStore",
    "AIOSemaphore",
    "COMMAND_DEC",
    "COMMAND_INC",
    "COMMAND_NEW",
    "CommandRegistrar",
    "CommandRegistrationError",
    "ListStore",
    "LocalCommandRegistry",
    "RandomnessError",
    "SEGMENT_COUNT",
    "SEGMENT_LENGTH",
    "Semaphore",
    "SemaphoreError",
    "SemaphoreTimeoutError",
    "UnknownCommandError",
    "acquire",
    "aio_acquire",
    "aio_release",
    "generate_identifier",
    "generate_segment",
    "new_semaphore",
    "register_aio_commands",
    "register_commands",
    "release",
)

try:
    __version__ = version("list-semaphore")
except PackageNotFoundError:
    __version__ = "unknown"
