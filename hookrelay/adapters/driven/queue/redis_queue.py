"""Redis-backed queue offering a persistent queue shared across processes."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from redis.asyncio import ConnectionPool, Redis

from hookrelay.adapters.driven.config.settings import QueueSettings
from hookrelay.ports.hook_request import HookRequest
from hookrelay.ports.queue import HookQueue, QueueAction, QueueStateError

__all__ = ["RedisQueue"]

logger = logging.getLogger(__name__)

# Block forever on BLPOP
BLOCK_INDEFINITELY = 0


class RedisQueue(HookQueue):
    """Queue stored as a Redis list addressed by ``QueueSettings.key``.

    Items are pushed to the tail (RPUSH) and popped from the head (BLPOP).
    When the pop action fails the original serialized string is pushed back
    on the *head* (LPUSH), so it is retried before anything else; this is the
    opposite of ``InMemoryQueue``, which requeues on the tail.

    Every popped item is a fresh ``HookRequest`` decoded from the wire form.

    Note:
        BLPOP removes the item before the action runs. A crash between the
        two loses that item; there is no acknowledgement step.
    """

    def __init__(
        self,
        settings: QueueSettings | None = None,
        pool: ConnectionPool | None = None,
    ) -> None:
        """Initialize queue.

        Args:
            settings: Key, host, port and pool tuning; defaults apply if None.
            pool: Optional pre-built pool; start() then skips creating one.
        """
        self.settings = settings or QueueSettings(type="redis")
        self.pool = pool
        self.started = False

    @property
    def key(self) -> str:
        return self.settings.key

    async def start(self) -> None:
        """Mark started and set up the connection pool unless one was given."""
        if self.started:
            raise QueueStateError("RedisQueue already started")
        self.started = True

        if isinstance(self.pool, ConnectionPool):
            return

        logger.debug(
            f'Setting up redis queue "{self.key}" on the server '
            f'"{self.settings.hostname}:{self.settings.port}"'
        )
        self.pool = ConnectionPool(
            host=self.settings.hostname,
            port=self.settings.port,
            max_connections=self.settings.max_connections,
            health_check_interval=self.settings.health_check_interval_sec,
            decode_responses=True,
        )

    async def stop(self) -> None:
        """Mark stopped and tear down the connection pool."""
        if not self.started:
            raise QueueStateError("RedisQueue not started")
        self.started = False

        if self.pool is not None:
            await self.pool.disconnect()
        self.pool = None

    async def size(self) -> int:
        self._ensure_started()
        async with self._redis() as client:
            return int(await client.llen(self.key))

    async def push(self, request: HookRequest) -> bool:
        """Append the serialized request to the tail of the list."""
        self._ensure_started()
        payload = request.to_wire()
        async with self._redis() as client:
            await client.rpush(self.key, payload)
        return True

    async def pop(self, action: QueueAction | None) -> None:
        """Block on the head of the list and await ``action`` on the item.

        If the action raises, the raw string is pushed back on the head.
        """
        if action is None:
            raise ValueError("Must provide an action to RedisQueue.pop()")
        self._ensure_started()

        async with self._redis() as client:
            # BLPOP answers (key, value)
            popped = await client.blpop([self.key], timeout=BLOCK_INDEFINITELY)
            if not popped:
                return
            raw = popped[1]

            try:
                request = HookRequest.from_wire(raw)
            except ValueError:
                logger.error(f'Discarding undecodable item from redis queue "{self.key}": {raw!r}')
                return

            try:
                await action(request)
            except asyncio.CancelledError:
                await client.lpush(self.key, raw)
                raise
            except Exception:
                logger.info(
                    '"Pop" on redis queue failed, pushing it back on front of the queue',
                    exc_info=True,
                )
                await client.lpush(self.key, raw)

    def _ensure_started(self) -> None:
        if not self.started:
            raise QueueStateError("Queue must be started before this operation is invoked")

    @asynccontextmanager
    async def _redis(self) -> AsyncIterator[Redis]:
        """Borrow one pooled connection for a single logical operation.

        The connection goes back to the pool on every exit path.
        """
        client = Redis(connection_pool=self.pool, single_connection_client=True)
        try:
            yield client
        finally:
            await client.aclose()
