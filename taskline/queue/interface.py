"""Job queue contract.

Purpose:
    Producers, consumers and whatever runtime executes jobs depend on this
    protocol instead of a storage technology. Concrete queues (Redis lists,
    the in-process queue used in tests) are chosen at composition time, see
    ``taskline.queue.factory.build_queue``.

How to Use:
    - Callers: type-hint with ``JobQueue`` and branch on the dequeue result.

        result = queue.dequeue(5.0, QueueIdentifier.MAIN)
        if isinstance(result, NoJobDequeued):
            if result.is_timeout:
                ...  # nothing to do, poll again
            else:
                ...  # result.error holds the QueueError
        else:
            ...  # result is an EnqueuedJob

    - Implementers: provide every method below. Errors other than a dequeue
      miss are raised as ``taskline.queue.exceptions.QueueError`` subclasses.
"""
from __future__ import annotations

from typing import Any, Protocol, TypeVar

from .exceptions import QueueConfigError
from .models import DequeueResult, EnqueuedJob, QueueIdentifier

Q = TypeVar("Q", bound="JobQueue")


class JobQueue(Protocol):
    """Backend-agnostic queue of ``EnqueuedJob`` records."""

    @classmethod
    def new(cls: type[Q], config: Any) -> Q:
        """Build and connect a queue from backend-specific config.

        Raises QueueConnectionError if the backend is unreachable and
        QueueConfigError if the config is invalid.
        """

    def enqueue(self, job: EnqueuedJob, queue: QueueIdentifier) -> None:
        """Append ``job`` to the tail of ``queue``. Durable once this returns."""

    def dequeue(self, timeout: float, queue: QueueIdentifier) -> DequeueResult:
        """Pop the head of ``queue``, waiting up to ``timeout`` seconds.

        Returns the job, or ``NoJobDequeued`` for a timeout or an error.
        """

    def delete_all(self, queue: QueueIdentifier) -> None:
        """Drop every pending job in ``queue``."""

    def size(self, queue: QueueIdentifier) -> int:
        """Number of pending jobs in ``queue``. May be stale immediately."""


def validate_timeout(timeout: Any) -> float:
    """Seconds to block on dequeue. Must be positive: a zero BLPOP timeout blocks forever."""
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise QueueConfigError(f"dequeue timeout must be a number of seconds, got {timeout!r}")
    if timeout <= 0:
        raise QueueConfigError(f"dequeue timeout must be positive, got {timeout}")
    return float(timeout)


__all__ = ["JobQueue", "validate_timeout"]
