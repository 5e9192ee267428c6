"""Tests for main application entrypoint."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from hookrelay.adapters.driven.config.settings import Settings
from hookrelay.main import main, run_until_stopped

__all__ = []


class BlockingRunner:
    """Runner parked forever, like one waiting on an empty queue."""

    def __init__(self) -> None:
        self.keep_going = True
        self.cancelled = False

    async def run(self) -> None:
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise

    def stop(self) -> None:
        self.keep_going = False


@pytest.mark.asyncio
async def test_run_until_stopped_returns_when_runner_finishes() -> None:
    """A runner that ends on its own ends the service."""
    runner = Mock()
    runner.run = AsyncMock()

    with patch("hookrelay.main.make_stop_on_sigterm", return_value=asyncio.Event()):
        await asyncio.wait_for(run_until_stopped(runner, Settings()), timeout=1)

    runner.run.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_until_stopped_raises_runner_errors() -> None:
    """Runner failures propagate to main() for logging."""
    runner = Mock()
    runner.run = AsyncMock(side_effect=RuntimeError("redis went away"))

    with (
        patch("hookrelay.main.make_stop_on_sigterm", return_value=asyncio.Event()),
        pytest.raises(RuntimeError, match="redis went away"),
    ):
        await run_until_stopped(runner, Settings())


@pytest.mark.asyncio
async def test_run_until_stopped_cancels_blocked_runner_after_grace() -> None:
    """A runner still blocked after the grace period is cancelled."""
    runner = BlockingRunner()
    stop_requested = asyncio.Event()

    with patch("hookrelay.main.make_stop_on_sigterm", return_value=stop_requested) as make_stop:
        task = asyncio.create_task(run_until_stopped(runner, Settings(shutdown_grace_sec=0.05)))
        await asyncio.sleep(0.01)
        stop_requested.set()
        await asyncio.wait_for(task, timeout=1)

    make_stop.assert_called_once_with(on_stop=runner.stop)
    assert runner.cancelled is True


@pytest.mark.asyncio
async def test_main_starts_and_stops_queue() -> None:
    """Main should start the queue, run the loop and stop the queue."""
    queue = Mock()
    queue.start = AsyncMock()
    queue.stop = AsyncMock()
    queue.size = AsyncMock(return_value=0)

    with (
        patch("hookrelay.main.configure_logs"),
        patch("hookrelay.main.load_settings", return_value=Settings()),
        patch("hookrelay.main.build_queue", return_value=queue),
        patch("hookrelay.main.build_runner") as mock_build_runner,
        patch("hookrelay.main.HttpClient") as mock_http_client_class,
        patch("hookrelay.main.run_until_stopped", new_callable=AsyncMock) as mock_run,
    ):
        mock_http_client = AsyncMock()
        mock_http_client_class.return_value = mock_http_client
        mock_http_client.__aenter__.return_value = mock_http_client

        await main()

        queue.start.assert_awaited_once()
        queue.stop.assert_awaited_once()
        mock_run.assert_awaited_once()
        assert mock_build_runner.call_args[0][0] == "sequential"
        assert mock_build_runner.call_args[0][1] is queue


@pytest.mark.asyncio
async def test_main_aborts_on_configuration_error() -> None:
    """Main should return early when configuration is invalid."""
    with (
        patch("hookrelay.main.configure_logs"),
        patch("hookrelay.main.load_settings", side_effect=RuntimeError("bad env")),
        patch("hookrelay.main.build_queue") as mock_build_queue,
        patch("hookrelay.main.run_until_stopped", new_callable=AsyncMock) as mock_run,
    ):
        await main()

        mock_build_queue.assert_not_called()
        mock_run.assert_not_called()


@pytest.mark.asyncio
async def test_main_stops_queue_on_loop_exception() -> None:
    """Main should log loop errors and still stop the queue."""
    queue = Mock()
    queue.start = AsyncMock()
    queue.stop = AsyncMock()

    with (
        patch("hookrelay.main.configure_logs"),
        patch("hookrelay.main.load_settings", return_value=Settings()),
        patch("hookrelay.main.build_queue", return_value=queue),
        patch("hookrelay.main.build_runner"),
        patch("hookrelay.main.HttpClient") as mock_http_client_class,
        patch("hookrelay.main.run_until_stopped", new_callable=AsyncMock) as mock_run,
        patch("hookrelay.main.logger") as mock_logger,
    ):
        mock_http_client = AsyncMock()
        mock_http_client_class.return_value = mock_http_client
        mock_http_client.__aenter__.return_value = mock_http_client
        mock_run.side_effect = RuntimeError("Test error in loop")

        try:
            await main()
        except RuntimeError:
            pytest.fail("main() should not raise; exceptions are caught internally")

        mock_logger.error.assert_called()
        queue.stop.assert_awaited_once()
