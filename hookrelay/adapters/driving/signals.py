"""Signal handling for graceful shutdown."""

import asyncio
import logging
import signal
from collections.abc import Callable

__all__ = ["make_stop_on_sigterm"]

logger = logging.getLogger(__name__)


def make_stop_on_sigterm(on_stop: Callable[[], None] | None = None) -> asyncio.Event:
    """Create a SIGTERM/SIGINT-driven stop event.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL,
    allowing the runner to finish its in-flight request.

    Args:
        on_stop: Optional callback run once per signal, typically runner.stop.

    Returns:
        Event that is set when a termination signal has been received.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        """Signal handler that sets the stop event on SIGTERM/SIGINT."""
        logger.info("Termination signal received, initiating graceful shutdown...")
        if on_stop is not None:
            on_stop()
        stop.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    return stop
