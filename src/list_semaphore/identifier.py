"""Semaphore name generation.

A semaphore name is five independently drawn groups of eight decimal digits
joined with dashes, e.g. ``'01234567-89012345-67890123-45678901-23456789'``.
That leaves 10**40 possible names, so collisions are negligible but not
impossible.
"""

from __future__ import annotations

import secrets
from typing import Final, Optional, Protocol

from .exceptions import RandomnessError

SEGMENT_LENGTH: Final[int] = 8
SEGMENT_COUNT: Final[int] = 5
SEPARATOR: Final[str] = "-"


class RandomSource(Protocol):
    """Anything that can draw a uniform integer, like ``random.Random``."""

    def randrange(self, stop: int) -> int: ...


_system_random: Final[RandomSource] = secrets.SystemRandom()


def _draw_digit(rng: RandomSource) -> str:
    try:
        digit = rng.randrange(10)
    except Exception as error:
        raise RandomnessError(f"Randomness source failed: {error}") from error
    return str(digit)


def generate_segment(rng: Optional[RandomSource] = None) -> str:
    """Return ``SEGMENT_LENGTH`` uniformly drawn decimal digits."""
    rng = rng if rng is not None else _system_random
    return "".join(_draw_digit(rng) for _ in range(SEGMENT_LENGTH))


def generate_identifier(rng: Optional[RandomSource] = None) -> str:
    """Return ``SEGMENT_COUNT`` independent segments joined by dashes."""
    rng = rng if rng is not None else _system_random
    return SEPARATOR.join(generate_segment(rng) for _ in range(SEGMENT_COUNT))


def new_semaphore(rng: Optional[RandomSource] = None) -> str:
    """Mint a name for a new semaphore.

    Nothing is written to the store: the list springs into existence on its
    first release, so callers must release at least once before anyone can
    acquire.
    """
    return generate_identifier(rng)
