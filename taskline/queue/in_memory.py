from collections import deque
import threading
import time
from typing import Any, Deque, Dict, Optional

from taskline.queue.exceptions import QueueError
from taskline.queue.interface import JobQueue, validate_timeout
from taskline.queue.models import DequeueResult, EnqueuedJob, NoJobDequeued, QueueIdentifier


class InMemoryJobQueue(JobQueue):
    """Thread-safe in-process job queue for local development and tests.

    Jobs are stored as their serialized JSON text, exactly like the Redis
    backend stores them, so a record that survives this queue survives Redis.
    """

    def __init__(self, namespace: str = "memory"):
        self.namespace = namespace
        self._lists: Dict[str, Deque[str]] = {}
        self._cond = threading.Condition()

    @classmethod
    def new(cls, config: Optional[Any] = None) -> "InMemoryJobQueue":
        namespace = getattr(config, "namespace", None) or "memory"
        return cls(namespace=namespace)

    def _list(self, queue: QueueIdentifier) -> Deque[str]:
        return self._lists.setdefault(queue.key(self.namespace), deque())

    def enqueue(self, job: EnqueuedJob, queue: QueueIdentifier) -> None:
        data = job.to_json()
        with self._cond:
            self._list(queue).append(data)
            self._cond.notify_all()

    def dequeue(self, timeout: float, queue: QueueIdentifier) -> DequeueResult:
        end = time.monotonic() + validate_timeout(timeout)
        with self._cond:
            items = self._list(queue)
            while not items:
                remaining = end - time.monotonic()
                if remaining <= 0:
                    return NoJobDequeued.because_timeout()
                self._cond.wait(timeout=remaining)
            data = items.popleft()
        try:
            return EnqueuedJob.from_json(data)
        except QueueError as e:
            return NoJobDequeued.because_error(e)

    def delete_all(self, queue: QueueIdentifier) -> None:
        with self._cond:
            self._lists.pop(queue.key(self.namespace), None)

    def size(self, queue: QueueIdentifier) -> int:
        with self._cond:
            return len(self._lists.get(queue.key(self.namespace), ()))

    def push_raw(self, payload: str, queue: QueueIdentifier) -> None:
        """Store ``payload`` verbatim, bypassing serialization."""
        with self._cond:
            self._list(queue).append(payload)
            self._cond.notify_all()
