"""Sequential dispatch loop: pop one request, publish it, repeat."""

import logging

from hookrelay.core.publisher import Publisher
from hookrelay.ports.hook_request import HookRequest
from hookrelay.ports.queue import HookQueue

__all__ = ["SequentialHookRunner"]

logger = logging.getLogger(__name__)


class SequentialHookRunner:
    """Dequeues requests and publishes them one at a time.

    The simplest and slowest runner: a retrying target blocks every request
    queued behind it until its backoff budget is spent.
    """

    def __init__(self, queue: HookQueue, publisher: Publisher) -> None:
        self.queue = queue
        self._publisher = publisher
        self.keep_going = True

    @property
    def publisher(self) -> Publisher:
        return self._publisher

    async def run(self) -> None:
        """Run the loop until stop() is observed.

        The flag is only checked between full pop+publish cycles: a pending
        pop or backoff sleep is never interrupted by stop().
        """
        logger.info("Sequential hook runner started")
        while self.keep_going:
            await self.queue.pop(self._dispatch)
        logger.info("Sequential hook runner stopped")

    def stop(self) -> None:
        """Tell the loop to exit after the current item."""
        self.keep_going = False

    async def _dispatch(self, request: HookRequest) -> None:
        if not await self._publisher.publish(request):
            # Budget exhausted: the request is dropped, not requeued
            logger.warning(
                f'Dropping hook request for "{request.url}" after {request.retries} retries'
            )
