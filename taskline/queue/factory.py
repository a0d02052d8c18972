from typing import Optional

from taskline.config import QueueSettings, load_settings
from taskline.queue.exceptions import QueueConfigError
from taskline.queue.in_memory import InMemoryJobQueue
from taskline.queue.interface import JobQueue
from taskline.queue.adapters.redis_queue import RedisConfig, RedisJobQueue


def build_queue(backend: Optional[str] = None, settings: Optional[QueueSettings] = None) -> JobQueue:
    """Pick and connect the queue implementation named by ``backend`` or QUEUE_BACKEND."""
    settings = settings or load_settings()
    backend = (backend or settings.backend or 'redis').lower()
    if backend == 'redis':
        return RedisJobQueue.new(RedisConfig.from_settings(settings))
    if backend == 'memory':
        return InMemoryJobQueue.new(settings)
    raise QueueConfigError(f"unknown queue backend: {backend!r} (expected 'redis' or 'memory')")


__all__ = ["build_queue"]
