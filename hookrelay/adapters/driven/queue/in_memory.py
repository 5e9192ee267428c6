"""In-process queue backend with no persistence between restarts."""

import asyncio
import logging

from hookrelay.ports.hook_request import HookRequest
from hookrelay.ports.queue import HookQueue, QueueAction, QueueStateError

__all__ = ["InMemoryQueue"]

logger = logging.getLogger(__name__)


class InMemoryQueue(HookQueue):
    """FIFO queue living inside the event loop.

    Failed items go back to the tail, so a request that keeps failing cycles
    behind everything else pending instead of blocking the head.

    Not thread-safe: producers on other threads must schedule ``push`` on the
    owning loop (``asyncio.run_coroutine_threadsafe``).
    """

    def __init__(self, queue: "asyncio.Queue[HookRequest] | None" = None) -> None:
        """Initialize queue.

        Args:
            queue: Optional pre-built (possibly bounded) queue to use instead
                of a fresh unbounded one.
        """
        self._queue: asyncio.Queue[HookRequest] = queue if queue is not None else asyncio.Queue()
        self.started = False

    async def start(self) -> None:
        if self.started:
            raise QueueStateError("InMemoryQueue already started")
        self.started = True

    async def stop(self) -> None:
        if not self.started:
            raise QueueStateError("InMemoryQueue not started")
        self.started = False

    async def size(self) -> int:
        return self._queue.qsize()

    async def push(self, request: HookRequest) -> bool:
        """Insert without waiting; False if the queue is at capacity."""
        try:
            self._queue.put_nowait(request)
        except asyncio.QueueFull:
            logger.warning(f'In-memory queue full, rejected hook request for "{request.url}"')
            return False
        return True

    async def pop(self, action: QueueAction | None) -> None:
        """Wait for the head item and await ``action`` on it.

        If the action raises, the same instance is put back on the tail.
        """
        if action is None:
            raise ValueError("Must provide an action to InMemoryQueue.pop()")

        item = await self._queue.get()
        try:
            await action(item)
        except asyncio.CancelledError:
            self._queue.put_nowait(item)
            raise
        except Exception:
            logger.info(
                '"Pop" on in-memory queue failed, putting it back on the tail-end',
                exc_info=True,
            )
            await self._queue.put(item)
