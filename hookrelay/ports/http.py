"""HTTP transport port definition (interface)."""

from typing import Protocol

__all__ = ["HttpPostPort"]


class HttpPostPort(Protocol):
    """Sends one HTTP POST and reports the status code.

    Transport failures (connection refused, timeouts) are raised, since no
    status code exists for them.
    """

    async def post(self, url: str, data: str, content_type: str) -> int:
        """POST ``data`` to ``url`` with the given Content-Type.

        Returns:
            HTTP status code of the response.
        """
        ...
