"""HTTP client adapter delivering hook payloads with aiohttp."""

import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from hookrelay.ports.http import HttpPostPort

__all__ = ["HttpClient"]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0


class HttpClient(HttpPostPort):
    """Thin aiohttp wrapper performing exactly one POST per call.

    Retries are not handled here; the publisher owns that policy.
    Use as an async context manager so the session is closed.
    """

    def __init__(self, timeout_sec: float = DEFAULT_TIMEOUT_SEC) -> None:
        """Initialize HTTP client.

        Args:
            timeout_sec: Total timeout for one request, including reading the body.
        """
        self.timeout_sec = timeout_sec
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession(timeout=ClientTimeout(total=self.timeout_sec))
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session)."""
        if self.session:
            await self.session.close()
            self.session = None

    async def post(self, url: str, data: str, content_type: str) -> int:
        """Send one POST and return its status code.

        The response body is read and discarded.

        Raises:
            RuntimeError: If session not initialized.
            aiohttp.ClientError: On connection or protocol failures.
            asyncio.TimeoutError: When the request times out.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        async with self.session.post(
            url,
            data=data.encode("utf-8"),
            headers={"Content-Type": content_type},
        ) as resp:
            await resp.read()
            logger.debug(f"POST {url} -> {resp.status}")
            return resp.status
