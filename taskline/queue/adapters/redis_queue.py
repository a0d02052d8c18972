from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import redis

from platform_monitoring import log_event, redact_url
from taskline.config import DEFAULT_NAMESPACE, DEFAULT_REDIS_URL
from taskline.queue.exceptions import (
    JobSerializationError,
    QueueBackendError,
    QueueConfigError,
    QueueConnectionError,
    QueueError,
)
from taskline.queue.interface import JobQueue, validate_timeout
from taskline.queue.models import DequeueResult, EnqueuedJob, NoJobDequeued, QueueIdentifier


@dataclass(frozen=True)
class RedisConfig:
    """Connection address and key namespace for ``RedisJobQueue``."""
    url: str = DEFAULT_REDIS_URL
    namespace: str = DEFAULT_NAMESPACE

    @classmethod
    def from_settings(cls, settings: Any) -> "RedisConfig":
        return cls(url=settings.redis_url, namespace=settings.namespace)

    def validate(self) -> None:
        if not self.url or not self.url.strip():
            raise QueueConfigError("redis url is empty")
        if not self.namespace or not self.namespace.strip():
            raise QueueConfigError("queue namespace is empty")


class RedisJobQueue(JobQueue):
    """Job queue over Redis lists.

    - One list per logical queue: `<namespace>_main`, `<namespace>_retry`
    - Entries are the JSON text of an ``EnqueuedJob``
    - Producers RPUSH to the tail, consumers BLPOP from the head, so every
      job is handed to exactly one consumer

    One instance wraps one connection; give each concurrent caller its own.
    """

    def __init__(self, config: Optional[RedisConfig] = None, client: Any = None):
        config = config or RedisConfig()
        config.validate()
        self.redis_url = config.url
        self.ns = config.namespace
        if client is None:
            try:
                # raw bytes; payloads are decoded in _payload so bad UTF-8 is a dequeue error
                client = redis.Redis.from_url(self.redis_url)
            except ValueError as e:
                # from_url rejects unknown schemes and malformed addresses
                raise QueueConfigError(f"invalid redis url {redact_url(self.redis_url)!r}: {e}") from e
        self.client = client

    @classmethod
    def new(cls, config: Optional[RedisConfig] = None) -> "RedisJobQueue":
        """Connect to Redis and make sure it answers before handing the queue out."""
        q = cls(config)
        try:
            q.client.ping()
        except redis.exceptions.RedisError as e:
            log_event("queue.connect.error", {"url": q.redis_url, "error": str(e)})
            raise QueueConnectionError(f"cannot reach redis at {redact_url(q.redis_url)}: {e}") from e
        log_event("queue.connect", {"url": q.redis_url, "namespace": q.ns})
        return q

    def key(self, queue: QueueIdentifier) -> str:
        return queue.key(self.ns)

    def enqueue(self, job: EnqueuedJob, queue: QueueIdentifier) -> None:
        data = job.to_json()
        name = self.key(queue)
        try:
            self.client.rpush(name, data)
        except redis.exceptions.RedisError as e:
            log_event("queue.backend.error", {"op": "enqueue", "list": name, "error": str(e)})
            raise QueueBackendError(f"RPUSH {name} failed: {e}") from e
        log_event("queue.enqueue", {"list": name, "job": job.name, "retry_count": str(job.retry_count)})

    def dequeue(self, timeout: float, queue: QueueIdentifier) -> DequeueResult:
        seconds = validate_timeout(timeout)
        name = self.key(queue)
        try:
            reply = self.client.blpop([name], timeout=seconds)
        except redis.exceptions.RedisError as e:
            log_event("queue.dequeue.error", {"list": name, "error": str(e)})
            return NoJobDequeued.because_error(QueueBackendError(f"BLPOP {name} failed: {e}"))
        except UnicodeDecodeError as e:
            # client built with decode_responses=True decodes the reply itself
            log_event("queue.dequeue.error", {"list": name, "error": str(e)})
            return NoJobDequeued.because_error(JobSerializationError(f"stored payload in {name} is not valid UTF-8: {e}"))

        if reply is None:
            return NoJobDequeued.because_timeout()

        try:
            job = EnqueuedJob.from_json(self._payload(reply))
        except QueueError as e:
            log_event("queue.dequeue.error", {"list": name, "error": str(e)})
            return NoJobDequeued.because_error(e)
        log_event("queue.dequeue", {"list": name, "job": job.name, "retry_count": str(job.retry_count)})
        return job

    @staticmethod
    def _payload(reply: Any) -> str:
        # BLPOP answers with (list name, value)
        if not isinstance(reply, (list, tuple)) or len(reply) != 2:
            raise QueueBackendError(f"unexpected backend response to BLPOP: {reply!r}")
        data = reply[1]
        if isinstance(data, bytes):
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise JobSerializationError(f"stored payload is not valid UTF-8: {e}") from e
        if not isinstance(data, str):
            raise QueueBackendError(f"unexpected backend response to BLPOP: {reply!r}")
        return data

    def delete_all(self, queue: QueueIdentifier) -> None:
        name = self.key(queue)
        try:
            self.client.delete(name)
        except redis.exceptions.RedisError as e:
            raise QueueBackendError(f"DEL {name} failed: {e}") from e
        log_event("queue.delete_all", {"list": name})

    def size(self, queue: QueueIdentifier) -> int:
        name = self.key(queue)
        try:
            return int(self.client.llen(name))
        except redis.exceptions.RedisError as e:
            raise QueueBackendError(f"LLEN {name} failed: {e}") from e

    def peek(self, queue: QueueIdentifier) -> Optional[str]:
        """Raw payload at the head of ``queue`` without removing it."""
        name = self.key(queue)
        try:
            data = self.client.lindex(name, 0)
        except redis.exceptions.RedisError as e:
            raise QueueBackendError(f"LINDEX {name} failed: {e}") from e
        if isinstance(data, bytes):
            return data.decode("utf-8", errors="replace")
        return data

    def close(self) -> None:
        self.client.close()

    def __repr__(self) -> str:
        return f"RedisJobQueue(namespace={self.ns!r}, redis_url={redact_url(self.redis_url)!r})"


__all__ = ["RedisConfig", "RedisJobQueue"]
