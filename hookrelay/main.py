"""Application entrypoint."""

import asyncio
import logging

from hookrelay.adapters.driven.config.factory import build_queue, build_runner
from hookrelay.adapters.driven.config.settings import Settings, load_settings
from hookrelay.adapters.driven.http.client import HttpClient
from hookrelay.adapters.driven.logging.logging_config import configure_logs
from hookrelay.adapters.driven.metrics.delivery_metrics import Metrics
from hookrelay.adapters.driving.signals import make_stop_on_sigterm
from hookrelay.core.publisher import Publisher
from hookrelay.core.retry import RetryPolicy
from hookrelay.ports.runner import HookRunner

__all__ = ["main", "run_until_stopped"]

logger = logging.getLogger(__name__)


async def main() -> None:
    """Start the hook relay service.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Build queue, publisher and runner from the registry.
    4. Start the queue and run the dispatch loop.
    5. Gracefully shutdown on SIGTERM, then stop the queue.
    """
    configure_logs()
    logger.info("Starting hook relay service...")

    try:
        config = load_settings()
        queue = build_queue(config.queue)
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check QUEUE_TYPE, QUEUE_PORT, RUNNER_TYPE, MAX_RETRIES and "
            "the BACKOFF_* variables.",
            exc,
        )
        return

    # Wrap config into the policy so core does not depend on settings
    policy = RetryPolicy(
        max_retries=config.max_retries,
        backoff_base_millis=config.backoff_base_millis,
        backoff_max_millis=config.backoff_max_millis,
    )

    async with HttpClient(timeout_sec=config.http_timeout_sec) as http:
        publisher = Publisher(http, policy=policy, metrics=Metrics())
        runner = build_runner(config.runner_type, queue, publisher)

        await queue.start()
        try:
            await run_until_stopped(runner, config)
            logger.info(f"Pending hook requests at shutdown: {await queue.size()}")
        except Exception as e:
            logger.error(f"Unhandled exception in dispatch loop: {e}", exc_info=True)
        finally:
            await queue.stop()

        logger.info("Hook relay stopped.")


async def run_until_stopped(runner: HookRunner, config: Settings) -> None:
    """Run ``runner`` until it returns or a termination signal arrives.

    After a signal the runner gets ``config.shutdown_grace_sec`` to finish the
    item it is processing. A runner still parked on an empty queue is then
    cancelled; an item whose delivery was cut short goes back to the queue.

    Args:
        runner: Dispatch loop to drive.
        config: Runtime settings.
    """
    stop_requested = make_stop_on_sigterm(on_stop=runner.stop)
    run_task = asyncio.create_task(runner.run())
    stop_task = asyncio.create_task(stop_requested.wait())

    try:
        await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        if not run_task.done():
            try:
                await asyncio.wait_for(run_task, timeout=config.shutdown_grace_sec)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Runner still busy after {config.shutdown_grace_sec}s, cancelled it"
                )
                return
        # Surface runner errors to the caller
        run_task.result()
    finally:
        stop_task.cancel()
        if not run_task.done():
            run_task.cancel()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutdown requested by user (Ctrl+C).")
