"""Shared fixtures for driven adapter tests."""

import asyncio
from collections import defaultdict
from collections.abc import Iterator
from typing import Any
from unittest.mock import patch

import pytest

__all__ = []


class FakeRedisServer:
    """In-test stand-in for the lists held by a Redis server."""

    def __init__(self) -> None:
        self.lists: dict[str, list[str]] = defaultdict(list)
        self.changed = asyncio.Condition()
        self.acquired = 0
        self.released = 0
        self.client_kwargs: list[dict[str, Any]] = []


class FakeRedis:
    """Client exposing the handful of list commands the queue uses."""

    def __init__(self, server: FakeRedisServer, **kwargs: Any) -> None:
        self.server = server
        server.acquired += 1
        server.client_kwargs.append(kwargs)

    async def rpush(self, key: str, *values: str) -> int:
        async with self.server.changed:
            self.server.lists[key].extend(values)
            self.server.changed.notify_all()
        return len(self.server.lists[key])

    async def lpush(self, key: str, *values: str) -> int:
        async with self.server.changed:
            for value in values:
                self.server.lists[key].insert(0, value)
            self.server.changed.notify_all()
        return len(self.server.lists[key])

    async def llen(self, key: str) -> int:
        return len(self.server.lists[key])

    async def blpop(self, keys: list[str], timeout: int = 0) -> tuple[str, str]:
        async with self.server.changed:
            await self.server.changed.wait_for(lambda: any(self.server.lists[k] for k in keys))
            for key in keys:
                if self.server.lists[key]:
                    return key, self.server.lists[key].pop(0)
        raise AssertionError("unreachable")

    async def aclose(self) -> None:
        self.server.released += 1


@pytest.fixture
def fake_redis() -> Iterator[FakeRedisServer]:
    """Patch the Redis client used by RedisQueue with an in-memory fake.

    Yields:
        The fake server holding the lists.
    """
    server = FakeRedisServer()
    with patch(
        "hookrelay.adapters.driven.queue.redis_queue.Redis",
        side_effect=lambda **kwargs: FakeRedis(server, **kwargs),
    ):
        yield server
