"""Job queue contract, job records and the in-process implementation.

Modules
-------
- interface: JobQueue protocol
- models: EnqueuedJob, RetryCount, QueueIdentifier, NoJobDequeued
- exceptions: QueueError hierarchy
- in_memory: InMemoryJobQueue
- adapters.redis_queue: RedisJobQueue over Redis lists
- factory: build_queue, picks a backend from configuration
"""

from .exceptions import (  # noqa: F401
    JobSerializationError,
    QueueBackendError,
    QueueConfigError,
    QueueConnectionError,
    QueueError,
)
from .interface import JobQueue  # noqa: F401
from .models import DequeueFailure, EnqueuedJob, NoJobDequeued, QueueIdentifier, RetryCount, RetryKind  # noqa: F401
from .in_memory import InMemoryJobQueue  # noqa: F401
