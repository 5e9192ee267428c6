"""Runner port definition (interface)."""

from typing import Protocol

__all__ = ["HookRunner"]


class HookRunner(Protocol):
    """Drains a queue and hands every request to a publisher."""

    keep_going: bool

    async def run(self) -> None:
        """Run the dispatch loop until stop() takes effect."""
        ...

    def stop(self) -> None:
        """Ask the loop to exit once the current item is fully processed."""
        ...
