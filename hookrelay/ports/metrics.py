"""Metrics port definition (interface and DTO)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

__all__ = ["DeliveryAttemptDto", "MetricsPort"]


@dataclass(slots=True, frozen=True)
class DeliveryAttemptDto:
    """Immutable snapshot of a single delivery attempt.

    Attributes:
        url: Target the attempt was sent to.
        retries: Retry counter of the request when the attempt was made.
        elapsed_ms: Wall time spent on the attempt.
        status_code: HTTP status code when a response arrived; None otherwise.
        is_retryable: True if the outcome was classified as transient.
    """

    url: str
    retries: int
    elapsed_ms: float
    status_code: int | None = None
    is_retryable: bool = False


class MetricsPort(Protocol):
    """Interface for recording delivery attempt metrics.

    Core calls update() after each attempt; presentation layers call
    __str__() to render summaries.
    """

    def update(self, attempt: DeliveryAttemptDto, /) -> None:
        """Record a finished delivery attempt.

        Args:
            attempt: The attempt to record.
        """
        ...

    def __str__(self) -> str:
        """Return concise textual summary for humans.

        Returns:
            Formatted metrics string.
        """
        ...
