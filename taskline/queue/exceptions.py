"""Exception hierarchy for the job queue layer.

Explicit exception types let callers tell configuration mistakes apart from
an unreachable backend, a failing backend call, or a payload that cannot be
turned back into a job.
"""

from __future__ import annotations


class QueueError(Exception):
    """Base class for all queue related errors."""


class QueueConfigError(QueueError):
    """Raised when queue configuration or call arguments are invalid."""


class QueueConnectionError(QueueError):
    """Raised when the backend cannot be reached while constructing a queue."""


class QueueBackendError(QueueError):
    """Raised when a backend call fails or replies with something unexpected."""


class JobSerializationError(QueueError):
    """Raised when a job record cannot be encoded or decoded."""


__all__ = [
    "QueueError",
    "QueueConfigError",
    "QueueConnectionError",
    "QueueBackendError",
    "JobSerializationError",
]
