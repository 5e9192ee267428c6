"""Registry resolving configured queue and runner kinds to constructors."""

from collections.abc import Callable

from hookrelay.adapters.driven.config.settings import QueueSettings
from hookrelay.adapters.driven.queue.in_memory import InMemoryQueue
from hookrelay.adapters.driven.queue.redis_queue import RedisQueue
from hookrelay.core.publisher import Publisher
from hookrelay.core.runner import SequentialHookRunner
from hookrelay.ports.queue import HookQueue
from hookrelay.ports.runner import HookRunner

__all__ = ["QUEUE_BUILDERS", "RUNNER_BUILDERS", "build_queue", "build_runner"]

QUEUE_BUILDERS: dict[str, Callable[[QueueSettings], HookQueue]] = {
    "in_memory": lambda settings: InMemoryQueue(),
    "redis": lambda settings: RedisQueue(settings),
}

RUNNER_BUILDERS: dict[str, Callable[[HookQueue, Publisher], HookRunner]] = {
    "sequential": SequentialHookRunner,
}


def build_queue(settings: QueueSettings) -> HookQueue:
    """Allocate the queue named by ``settings.type``.

    Raises:
        ValueError: If the kind is not registered.
    """
    try:
        builder = QUEUE_BUILDERS[settings.type]
    except KeyError as e:
        raise ValueError(f"Unknown queue type: {settings.type}") from e
    return builder(settings)


def build_runner(kind: str, queue: HookQueue, publisher: Publisher) -> HookRunner:
    """Allocate the runner named by ``kind`` around ``queue``.

    Raises:
        ValueError: If the kind is not registered.
    """
    try:
        builder = RUNNER_BUILDERS[kind]
    except KeyError as e:
        raise ValueError(f"Unknown runner type: {kind}") from e
    return builder(queue, publisher)
