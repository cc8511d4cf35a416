"""Expose the semaphore operations as host commands.

A host that can run named commands hands in a registrar and gets
``sema/new``, ``sema/inc`` and ``sema/dec`` registered on it. Without a host,
a :class:`LocalCommandRegistry` stands in so the same commands can be called
directly, which is how the test suite drives them.

Example:

    >>> from list_semaphore import ListStore, register_commands
    >>> registry = register_commands(ListStore())
    >>> name = registry.call('sema/new')
    >>> registry.call('sema/inc', name)
    1
    >>> registry.call('sema/dec', name, 1)
    b'1'
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Final, Optional, Protocol, Tuple

from .exceptions import CommandRegistrationError, UnknownCommandError
from .identifier import new_semaphore
from .operations import acquire, aio_acquire, aio_release, release

if TYPE_CHECKING:
    from .aiostore import AIOListStore
    from .identifier import RandomSource
    from .store import ListStore

logger = logging.getLogger(__name__)

COMMAND_NEW: Final[str] = "sema/new"
COMMAND_INC: Final[str] = "sema/inc"
COMMAND_DEC: Final[str] = "sema/dec"

Command = Callable[..., Any]


class CommandRegistrar(Protocol):
    """The host's hook for making a function callable by name."""

    def register(self, name: str, func: Command) -> None: ...


class LocalCommandRegistry:
    """In-process command table used when no host is present."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def register(self, name: str, func: Command) -> None:
        if name in self._commands:
            raise CommandRegistrationError(name)
        self._commands[name] = func

    def call(self, name: str, *args: Any) -> Any:
        """Run command ``name`` with positional ``args``."""
        try:
            func = self._commands[name]
        except KeyError:
            raise UnknownCommandError(name) from None
        return func(*args)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} commands={list(self._commands)!r}>"


def register_commands(
    store: ListStore,
    registry: Optional[CommandRegistrar] = None,
    *,
    rng: Optional[RandomSource] = None,
) -> CommandRegistrar:
    """Register the semaphore commands bound to ``store``.

    Args:
        store: List store the commands operate on
        registry: Host registrar; a fresh :class:`LocalCommandRegistry` if None
        rng: Randomness source for ``sema/new`` (system randomness if None)

    Returns:
        The registrar the commands were registered on
    """
    if registry is None:
        registry = LocalCommandRegistry()

    def sema_new() -> str:
        return new_semaphore(rng)

    def sema_inc(name: str) -> Any:
        return release(store, name)

    def sema_dec(name: str, duration: Any) -> Optional[bytes]:
        return acquire(store, name, duration)

    _register_all(registry, sema_new, sema_inc, sema_dec)
    return registry


def register_aio_commands(
    store: AIOListStore,
    registry: Optional[CommandRegistrar] = None,
    *,
    rng: Optional[RandomSource] = None,
) -> CommandRegistrar:
    """Like :func:`register_commands`, with coroutine ``inc``/``dec`` commands."""
    if registry is None:
        registry = LocalCommandRegistry()

    def sema_new() -> str:
        return new_semaphore(rng)

    async def sema_inc(name: str) -> Any:
        return await aio_release(store, name)

    async def sema_dec(name: str, duration: Any) -> Optional[bytes]:
        return await aio_acquire(store, name, duration)

    _register_all(registry, sema_new, sema_inc, sema_dec)
    return registry


def _register_all(
    registry: CommandRegistrar, new: Command, inc: Command, dec: Command
) -> None:
    for name, func in ((COMMAND_NEW, new), (COMMAND_INC, inc), (COMMAND_DEC, dec)):
        registry.register(name, func)
    logger.debug("Registered semaphore commands on %r", registry)
