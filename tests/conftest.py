"""Pytest configuration and fixtures for list-semaphore tests."""

from __future__ import annotations

import asyncio
import os
import threading
import time
from collections import defaultdict, deque
from collections.abc import AsyncGenerator, Generator
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional, Tuple

import pytest

from list_semaphore import AIOListStore, ListStore, new_semaphore

if TYPE_CHECKING:
    from redis import Redis
    from redis.asyncio import Redis as AIORedis


def is_docker_available() -> bool:
    """Check if Docker is available."""
    import shutil
    import subprocess

    if not shutil.which("docker"):
        return False
    try:
        result = subprocess.run(
            ["docker", "info"],
            capture_output=True,
            timeout=5,
        )
        return result.returncode == 0
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return False


# Skip integration tests if Docker is not available
requires_docker = pytest.mark.skipif(
    not is_docker_available(),
    reason="Docker is not available",
)


def _to_bytes(value: Any) -> bytes:
    """Encode a command argument the way Redis stores it."""
    if isinstance(value, bytes):
        return value
    return str(value).encode()


class FakeListCommands:
    """In-memory executor for the Redis list commands a semaphore uses.

    Pops happen under one condition variable, so each pushed entry reaches
    exactly one popper, like Redis.
    """

    def __init__(self) -> None:
        self._lists: Dict[bytes, Deque[bytes]] = defaultdict(deque)
        self._cond = threading.Condition()
        self.calls: List[Tuple[Any, ...]] = []

    def __call__(self, command: str, *args: Any) -> Any:
        self.calls.append((command, *args))
        return getattr(self, f"_{command.lower()}")(*args)

    def _rpush(self, name: Any, *values: Any) -> int:
        key = _to_bytes(name)
        with self._cond:
            self._lists[key].extend(_to_bytes(value) for value in values)
            self._cond.notify_all()
            return len(self._lists[key])

    def _lpop(self, name: Any) -> Optional[bytes]:
        key = _to_bytes(name)
        with self._cond:
            entries = self._lists[key]
            return entries.popleft() if entries else None

    def _blpop(self, name: Any, timeout: Any) -> Optional[List[bytes]]:
        key = _to_bytes(name)
        deadline = time.monotonic() + float(timeout)
        with self._cond:
            while not self._lists[key]:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._cond.wait(remaining)
            return [key, self._lists[key].popleft()]

    def _llen(self, name: Any) -> int:
        with self._cond:
            return len(self._lists[_to_bytes(name)])


class AIOFakeListCommands:
    """Async counterpart of :class:`FakeListCommands`."""

    def __init__(self) -> None:
        self._lists: Dict[bytes, Deque[bytes]] = defaultdict(deque)
        self._cond = asyncio.Condition()
        self.calls: List[Tuple[Any, ...]] = []

    async def __call__(self, command: str, *args: Any) -> Any:
        self.calls.append((command, *args))
        return await getattr(self, f"_{command.lower()}")(*args)

    async def _rpush(self, name: Any, *values: Any) -> int:
        key = _to_bytes(name)
        async with self._cond:
            self._lists[key].extend(_to_bytes(value) for value in values)
            self._cond.notify_all()
            return len(self._lists[key])

    async def _lpop(self, name: Any) -> Optional[bytes]:
        key = _to_bytes(name)
        async with self._cond:
            entries = self._lists[key]
            return entries.popleft() if entries else None

    async def _blpop(self, name: Any, timeout: Any) -> Optional[List[bytes]]:
        key = _to_bytes(name)
        async with self._cond:
            try:
                await asyncio.wait_for(
                    self._cond.wait_for(lambda: bool(self._lists[key])),
                    float(timeout),
                )
            except asyncio.TimeoutError:
                return None
            return [key, self._lists[key].popleft()]

    async def _llen(self, name: Any) -> int:
        async with self._cond:
            return len(self._lists[_to_bytes(name)])


@pytest.fixture
def fake_commands() -> FakeListCommands:
    """Fresh in-memory list store executor."""
    return FakeListCommands()


@pytest.fixture
def store(fake_commands: FakeListCommands) -> ListStore:
    """ListStore backed by the in-memory executor."""
    return ListStore(execute=fake_commands)


@pytest.fixture
async def aio_fake_commands() -> AIOFakeListCommands:
    """Fresh async in-memory list store executor, created inside the loop."""
    return AIOFakeListCommands()


@pytest.fixture
async def aio_store(aio_fake_commands: AIOFakeListCommands) -> AIOListStore:
    """AIOListStore backed by the async in-memory executor."""
    return AIOListStore(execute=aio_fake_commands)


@pytest.fixture
def name() -> str:
    """A freshly minted semaphore name for each test."""
    return new_semaphore()


@pytest.fixture(scope="session")
def docker_compose_file() -> str:
    """Return path to docker-compose file for Redis."""
    return os.path.join(os.path.dirname(__file__), "docker-compose.yml")


@pytest.fixture(scope="session")
def redis_port() -> int:
    """Return the Redis port for tests."""
    return 6399  # Use non-standard port to avoid conflicts


@pytest.fixture(scope="session")
def docker_redis(docker_compose_file: str, redis_port: int) -> Generator[str, None, None]:
    """Start Redis in Docker for integration tests.

    Returns the Redis URL.
    """
    import subprocess

    compose_content = f"""
services:
  redis:
    image: redis:7-alpine
    ports:
      - "{redis_port}:6379"
    healthcheck:
      test: ["CMD", "redis-cli", "ping"]
      interval: 1s
      timeout: 3s
      retries: 30
"""
    with open(docker_compose_file, "w") as f:
        f.write(compose_content)

    subprocess.run(
        ["docker", "compose", "-f", docker_compose_file, "up", "-d", "--wait"],
        check=True,
        capture_output=True,
    )

    redis_url = f"redis://localhost:{redis_port}/0"
    _wait_for_redis(redis_url)

    yield redis_url

    subprocess.run(
        ["docker", "compose", "-f", docker_compose_file, "down", "-v"],
        capture_output=True,
    )
    os.remove(docker_compose_file)


def _wait_for_redis(url: str, timeout: float = 30) -> None:
    """Wait for Redis to be ready."""
    from redis import Redis
    from redis.exceptions import ConnectionError

    start = time.time()
    while time.time() - start < timeout:
        try:
            r = Redis.from_url(url)
            r.ping()
            r.close()
            return
        except ConnectionError:
            time.sleep(0.5)
    raise TimeoutError(f"Redis at {url} did not become ready in {timeout}s")


@pytest.fixture
def redis_client(docker_redis: str) -> Generator[Redis, None, None]:
    """Create a Redis client connected to Docker Redis."""
    from redis import Redis

    client = Redis.from_url(docker_redis)
    client.flushdb()
    yield client
    try:
        client.flushdb()
    except Exception:
        pass  # Ignore errors during cleanup
    client.close()


@pytest.fixture
async def aioredis_client(docker_redis: str) -> AsyncGenerator[AIORedis, None]:
    """Create an async Redis client connected to Docker Redis."""
    from redis.asyncio import Redis as AIORedis

    client = AIORedis.from_url(docker_redis)
    await client.flushdb()
    yield client
    try:
        await client.flushdb()
    except Exception:
        pass  # Ignore errors during cleanup
    await client.aclose()
