"""Exceptions for list-semaphore."""

from __future__ import annotations


class SemaphoreError(Exception):
    """Base exception for semaphore errors."""

    pass


class RandomnessError(SemaphoreError):
    """Raised when the randomness source cannot produce a digit.

    A semaphore name must never fall back to a fixed value, so this is
    always fatal to the caller minting the name.
    """

    pass


class SemaphoreTimeoutError(SemaphoreError, TimeoutError):
    """Raised when a context-managed acquire runs out of time."""

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(
            f"Semaphore '{name}' not acquired within {timeout}s"
        )


class UnknownCommandError(SemaphoreError, KeyError):
    """Raised when calling a command that was never registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown command: {self.name!r}"


class CommandRegistrationError(SemaphoreError, ValueError):
    """Raised when a command name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Command {name!r} is already registered")
