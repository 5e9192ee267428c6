"""Publisher: delivers hook requests over HTTP with retry and backoff."""

import asyncio
import enum
import logging
import time

import aiohttp

from hookrelay.core.retry import RetryPolicy, should_retry
from hookrelay.ports.hook_request import HookRequest
from hookrelay.ports.http import HttpPostPort
from hookrelay.ports.metrics import DeliveryAttemptDto, MetricsPort

__all__ = ["Publisher", "DeliveryOutcome", "DEFAULT_CONTENT_TYPE", "TRANSPORT_ERRORS"]

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"

# Failures where no response exists; always retryable
TRANSPORT_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
)


class DeliveryOutcome(enum.Enum):
    """Final result of publishing one request."""

    DELIVERED = "delivered"
    GAVE_UP = "gave_up"


class Publisher:
    """Executes delivery attempts and owns the retry/backoff state machine.

    Any response outside the retryable set (see ``should_retry``) is terminal
    and reported as delivered, including permanent client errors such as 404.
    Callers can not tell a 404 apart from a 200 through the return value.
    """

    def __init__(
        self,
        http: HttpPostPort,
        policy: RetryPolicy | None = None,
        metrics: MetricsPort | None = None,
    ) -> None:
        """Initialize publisher.

        Args:
            http: Transport used for each POST.
            policy: Retry bounds; defaults to 5 retries, 50ms base, 10s cap.
            metrics: Optional collector fed one record per attempt.
        """
        self.http = http
        self.policy = policy or RetryPolicy()
        self.metrics = metrics

    async def publish(self, request: HookRequest) -> bool:
        """Deliver ``request``, retrying transient failures.

        Returns:
            False only when the retry budget was exhausted.
        """
        return await self.deliver(request) is DeliveryOutcome.DELIVERED

    async def deliver(self, request: HookRequest) -> DeliveryOutcome:
        """Run attempts until a terminal outcome or the retry budget is spent.

        ``request.retries`` is incremented in place before every retry and is
        never reset, so a request that comes back through the queue continues
        with whatever budget it has left.
        """
        if not request.url:
            logger.error("Refusing to deliver a hook request without url")
            return DeliveryOutcome.GAVE_UP

        while True:
            status_code = await self._attempt(request)
            if not should_retry(status_code):
                logger.debug(f'POST to url "{request.url}" succeeded ({status_code})')
                return DeliveryOutcome.DELIVERED

            if request.retries >= self.policy.max_retries:
                logger.error(
                    f'Giving up on POST to url "{request.url}" after {request.retries} retries'
                )
                return DeliveryOutcome.GAVE_UP

            request.retries += 1
            delay_ms = self.policy.delay_millis(request.retries)
            logger.info(
                f'Retrying POST to url "{request.url}" in {delay_ms} ms '
                f"(retry {request.retries}/{self.policy.max_retries})"
            )
            await asyncio.sleep(delay_ms / 1_000)

    async def _attempt(self, request: HookRequest) -> int | None:
        """Send one POST; return its status, or None on transport failure."""
        content_type = request.content_type or DEFAULT_CONTENT_TYPE
        started = time.monotonic()
        status_code: int | None = None
        try:
            status_code = await self.http.post(request.url, request.post_data, content_type)
        except TRANSPORT_ERRORS as e:
            logger.warning(f'POST to url "{request.url}" failed: {e!r}')

        if self.metrics:
            self.metrics.update(
                DeliveryAttemptDto(
                    url=request.url,
                    retries=request.retries,
                    elapsed_ms=(time.monotonic() - started) * 1_000.0,
                    status_code=status_code,
                    is_retryable=should_retry(status_code),
                )
            )
            logger.debug(f"Delivery metrics: {self.metrics}")

        return status_code
