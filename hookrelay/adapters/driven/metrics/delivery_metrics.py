"""In-memory sliding-window metrics for delivery attempts."""

from __future__ import annotations

import statistics
from collections import deque
from dataclasses import dataclass

from hookrelay.ports.metrics import DeliveryAttemptDto, MetricsPort

__all__ = ["Metrics"]


@dataclass(slots=True, frozen=True)
class _Sample:
    """Internal record for one delivery attempt."""

    elapsed_ms: float
    retryable: bool
    status_code: int


class Metrics(MetricsPort):
    """Lock-free delivery metrics for async context.

    Tracks:
    - Average attempt latency.
    - Share of attempts classified as retryable failures.
    - Last status code (0 for transport failures).
    - Total attempts seen.

    Not thread-safe; create one instance per event loop.
    """

    def __init__(self, *, window_size: int = 100) -> None:
        """Initialize metrics collector.

        Args:
            window_size: Number of recent attempts to keep for statistics.
        """
        self._window: deque[_Sample] = deque(maxlen=window_size)
        self._total_seen: int = 0

    def update(self, attempt: DeliveryAttemptDto) -> None:
        """Record a finished delivery attempt."""
        self._window.append(
            _Sample(
                elapsed_ms=attempt.elapsed_ms,
                retryable=attempt.is_retryable,
                status_code=attempt.status_code or 0,
            )
        )
        self._total_seen += 1

    def __str__(self) -> str:
        """Return human-readable one-line summary for logging."""
        if not self._window:
            return "Metrics: waiting for data …"

        n_window = len(self._window)
        failures = sum(1 for s in self._window if s.retryable)
        fail_pct = (failures / n_window) * 100
        avg_latency = statistics.fmean(s.elapsed_ms for s in self._window)
        last = self._window[-1]

        return (
            f"latency={avg_latency:7.1f} ms | "
            f"status={last.status_code:3d} | "
            f"retryable={fail_pct:5.1f}% | "
            f"win={n_window}/{self._window.maxlen} | "
            f"total={self._total_seen}"
        )
