"""Configuration loading from environment variables."""

import logging
import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

__all__ = ["QueueSettings", "Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)

QueueType = Literal["in_memory", "redis"]
RunnerType = Literal["sequential"]


class QueueSettings(BaseModel):
    """Queue backend selection and the fields the Redis backend honors.

    Attributes:
        type: Backend kind, resolved through the queue registry.
        key: Redis list holding the queue.
        hostname: Redis server host.
        port: Redis server port.
        max_connections: Upper bound of the Redis connection pool.
        health_check_interval_sec: Idle seconds before a pooled connection
            is health-checked on checkout.
    """

    type: QueueType = Field(default="in_memory", description="Queue backend kind.")
    key: str = Field(default="queue", min_length=1, description="Key of the Redis list.")
    hostname: str = Field(default="localhost", min_length=1)
    port: int = Field(default=6379, gt=0, lt=65536)
    max_connections: int = Field(default=10, gt=0)
    health_check_interval_sec: int = Field(default=30, ge=0)


class Settings(BaseModel):
    """Runtime configuration for the relay service.

    Attributes:
        queue: Queue backend configuration.
        runner_type: Runner kind, resolved through the runner registry.
        max_retries: Retries after the first delivery attempt.
        backoff_base_millis: Base of the exponential backoff.
        backoff_max_millis: Cap for a single backoff delay.
        http_timeout_sec: Total timeout of a single POST.
        shutdown_grace_sec: How long shutdown waits for the in-flight item.
    """

    queue: QueueSettings = Field(default_factory=QueueSettings)
    runner_type: RunnerType = Field(default="sequential")
    max_retries: int = Field(default=5, ge=0)
    backoff_base_millis: int = Field(default=50, gt=0)
    backoff_max_millis: int = Field(default=10_000, gt=0)
    http_timeout_sec: float = Field(default=30.0, gt=0)
    shutdown_grace_sec: float = Field(default=30.0, ge=0)

    @model_validator(mode="after")
    def validate_backoff_bounds(self) -> "Settings":
        """Ensure the backoff cap is not below the first delay.

        Raises:
            ValueError: If backoff_max_millis < backoff_base_millis.
        """
        if self.backoff_max_millis < self.backoff_base_millis:
            raise ValueError("BACKOFF_MAX_MILLIS must be >= BACKOFF_BASE_MILLIS")
        return self


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer (got: {raw})") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be a number (got: {raw})") from e


def load_settings() -> Settings:
    """Load and validate settings from the environment.

    All variables are optional:
    - QUEUE_TYPE (in_memory|redis), QUEUE_KEY, QUEUE_HOSTNAME, QUEUE_PORT,
      QUEUE_MAX_CONNECTIONS.
    - RUNNER_TYPE (sequential).
    - MAX_RETRIES, BACKOFF_BASE_MILLIS, BACKOFF_MAX_MILLIS.
    - HTTP_TIMEOUT_SECONDS, SHUTDOWN_GRACE_SECONDS.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If a numeric variable is not a number.
        ValueError: If a value is out of range or names an unknown kind.
    """
    queue = QueueSettings(
        type=os.getenv("QUEUE_TYPE", "in_memory"),
        key=os.getenv("QUEUE_KEY", "queue"),
        hostname=os.getenv("QUEUE_HOSTNAME", "localhost"),
        port=_int_env("QUEUE_PORT", 6379),
        max_connections=_int_env("QUEUE_MAX_CONNECTIONS", 10),
    )
    settings = Settings(
        queue=queue,
        runner_type=os.getenv("RUNNER_TYPE", "sequential"),
        max_retries=_int_env("MAX_RETRIES", 5),
        backoff_base_millis=_int_env("BACKOFF_BASE_MILLIS", 50),
        backoff_max_millis=_int_env("BACKOFF_MAX_MILLIS", 10_000),
        http_timeout_sec=_float_env("HTTP_TIMEOUT_SECONDS", 30.0),
        shutdown_grace_sec=_float_env("SHUTDOWN_GRACE_SECONDS", 30.0),
    )

    logger.info(
        f"Relay configured: queue={settings.queue.type}, "
        f"key={settings.queue.key}, "
        f"redis={settings.queue.hostname}:{settings.queue.port}, "
        f"runner={settings.runner_type}, "
        f"max_retries={settings.max_retries}"
    )

    return settings
