"""Healthcheck validator for container orchestration."""

import asyncio
import logging

from redis.asyncio import Redis

from hookrelay.adapters.driven.config.settings import QueueSettings, load_settings
from hookrelay.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main", "ping_queue_store"]

logger = logging.getLogger(__name__)


async def ping_queue_store(settings: QueueSettings) -> bool:
    """PING the Redis server backing the queue.

    Returns:
        True if the server answered.
    """
    client = Redis(host=settings.hostname, port=settings.port)
    try:
        return bool(await client.ping())
    finally:
        await client.aclose()


def main() -> int:
    """Run health check for container orchestration.

    Validates:
    - Configuration can be loaded successfully.
    - For the redis queue, the server answers PING.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        settings = load_settings()
        if settings.queue.type == "redis" and not asyncio.run(ping_queue_store(settings.queue)):
            raise RuntimeError("Redis did not answer PING")
    except Exception as exc:
        logger.error(f"Relay healthcheck FAILED: {exc}")
        return 1

    logger.info("Relay healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
