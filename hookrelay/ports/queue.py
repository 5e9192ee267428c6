"""Queue port definition (interface)."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from hookrelay.ports.hook_request import HookRequest

__all__ = ["HookQueue", "QueueAction", "QueueStateError", "SIZE_UNKNOWN"]

SIZE_UNKNOWN = -1

QueueAction = Callable[[HookRequest], Awaitable[object]]


class QueueStateError(RuntimeError):
    """Queue operation invoked out of lifecycle order."""


class HookQueue(Protocol):
    """Interface for queue backends holding pending hook requests.

    Implementations own their ``started`` flag. If the action handed to
    ``pop`` raises, the backend must put the item back so it is not lost;
    where it goes back (head or tail) is up to the backend.
    """

    started: bool

    async def start(self) -> None:
        """Transition Stopped -> Started.

        Raises:
            QueueStateError: If already started.
        """
        ...

    async def stop(self) -> None:
        """Transition Started -> Stopped and release resources.

        Raises:
            QueueStateError: If not started.
        """
        ...

    async def size(self) -> int:
        """Return the pending item count, or SIZE_UNKNOWN."""
        ...

    async def push(self, request: HookRequest) -> bool:
        """Enqueue a request.

        Returns:
            True if the backend accepted the request.
        """
        ...

    async def pop(self, action: QueueAction | None) -> None:
        """Wait for one item, remove it and await ``action(item)``.

        Raises:
            ValueError: If ``action`` is None.
        """
        ...
