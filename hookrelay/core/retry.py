"""Retry classification and exponential backoff policy."""

from dataclasses import dataclass

__all__ = ["RetryPolicy", "should_retry", "RATE_LIMITED_STATUSES"]

# "Enhance your calm" (420) and "Too Many Requests" (429)
RATE_LIMITED_STATUSES = frozenset({420, 429})


def should_retry(status_code: int | None) -> bool:
    """Decide whether a delivery outcome is transient.

    Args:
        status_code: Response status, or None when no response arrived
            (transport failure).

    Returns:
        True for transport failures, rate limiting and 5xx responses.
    """
    if status_code is None:
        return True
    if status_code in RATE_LIMITED_STATUSES:
        return True
    return 500 <= status_code < 600


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds and pacing for delivery retries.

    Attributes:
        max_retries: Retries allowed after the initial attempt.
        backoff_base_millis: Base raised to the retry number.
        backoff_max_millis: Upper bound for a single delay.
    """

    max_retries: int = 5
    backoff_base_millis: int = 50
    backoff_max_millis: int = 10_000

    def delay_millis(self, retries: int) -> int:
        """Return the delay before retry number ``retries`` (1-based).

        With the defaults: 50, 2500, 10000, 10000, ...
        """
        if retries <= 0:
            return 0
        return min(self.backoff_base_millis**retries, self.backoff_max_millis)
