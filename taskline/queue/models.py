"""Job records and queue identifiers stored in the backend.

A job travels through the backend as a single JSON document:

    {"name": "send_email", "args": "{\"to\": \"a@b.com\"}", "retry_count": "NeverRetried"}

``retry_count`` is either the marker ``"NeverRetried"`` or ``{"Count": n}``.
Reading is lenient: unknown fields are ignored, a missing ``args`` becomes an
empty string and a missing or null ``retry_count`` means never retried.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from .exceptions import JobSerializationError, QueueError

NEVER_RETRIED_MARKER = "NeverRetried"
COUNT_FIELD = "Count"


class RetryKind(Enum):
	NEVER_RETRIED = "never_retried"
	COUNT = "count"


@dataclass(frozen=True)
class RetryCount:
	"""How many times a job has been retried, if ever.

	Either ``NEVER_RETRIED`` or ``COUNT`` with the number of retries so far.
	Values only ever move forward via ``increment``.
	"""
	kind: RetryKind = RetryKind.NEVER_RETRIED
	count: int = 0

	def __post_init__(self) -> None:
		if not isinstance(self.kind, RetryKind):
			raise ValueError(f"retry kind must be a RetryKind, got {self.kind!r}")
		if isinstance(self.count, bool) or not isinstance(self.count, int):
			raise ValueError(f"retry count must be an int, got {self.count!r}")
		if self.count < 0:
			raise ValueError(f"retry count cannot be negative: {self.count}")
		if self.kind is RetryKind.NEVER_RETRIED and self.count != 0:
			raise ValueError("a never-retried job has no retry count")

	@classmethod
	def never_retried(cls) -> "RetryCount":
		return cls(kind=RetryKind.NEVER_RETRIED)

	@classmethod
	def of(cls, n: int) -> "RetryCount":
		return cls(kind=RetryKind.COUNT, count=n)

	@property
	def is_never_retried(self) -> bool:
		return self.kind is RetryKind.NEVER_RETRIED

	def increment(self) -> "RetryCount":
		"""Return the next retry count; never retried becomes ``Count(1)``."""
		if self.kind is RetryKind.NEVER_RETRIED:
			return RetryCount.of(1)
		return RetryCount.of(self.count + 1)

	def limit_reached(self, limit: Union[int, Any]) -> bool:
		"""``True`` once the job was retried more than ``limit`` times.

		``limit`` is an int or any settings object exposing ``retry_count_limit``.
		"""
		if not isinstance(limit, int):
			limit = limit.retry_count_limit
		if self.kind is RetryKind.NEVER_RETRIED:
			return False
		return self.count > limit

	def to_wire(self) -> Union[str, Dict[str, int]]:
		if self.kind is RetryKind.NEVER_RETRIED:
			return NEVER_RETRIED_MARKER
		return {COUNT_FIELD: self.count}

	@classmethod
	def from_wire(cls, raw: Any) -> "RetryCount":
		if raw is None or raw == NEVER_RETRIED_MARKER:
			return cls.never_retried()
		if isinstance(raw, dict) and COUNT_FIELD in raw:
			raw = raw[COUNT_FIELD]
		if isinstance(raw, bool) or not isinstance(raw, int):
			raise JobSerializationError(f"invalid retry_count value: {raw!r}")
		try:
			return cls.of(raw)
		except ValueError as e:
			raise JobSerializationError(str(e)) from e

	def __str__(self) -> str:
		if self.kind is RetryKind.NEVER_RETRIED:
			return NEVER_RETRIED_MARKER
		return f"{COUNT_FIELD}({self.count})"


@dataclass(frozen=True)
class EnqueuedJob:
	"""A named job and its opaque, already-serialized arguments."""
	name: str
	args: str
	retry_count: RetryCount = field(default_factory=RetryCount)

	def __post_init__(self) -> None:
		if not isinstance(self.name, str):
			raise JobSerializationError(f"job name must be a string, got {type(self.name).__name__}")
		if not isinstance(self.args, str):
			raise JobSerializationError(f"job args must be a string, got {type(self.args).__name__}")
		if not isinstance(self.retry_count, RetryCount):
			raise JobSerializationError(f"job retry_count must be a RetryCount, got {self.retry_count!r}")

	@classmethod
	def create(cls, name: str, args: str = "") -> "EnqueuedJob":
		return cls(name=name, args=args, retry_count=RetryCount.never_retried())

	def retried(self) -> "EnqueuedJob":
		"""Copy of this job with its retry count incremented."""
		return EnqueuedJob(name=self.name, args=self.args, retry_count=self.retry_count.increment())

	def to_dict(self) -> Dict[str, Any]:
		return {"name": self.name, "args": self.args, "retry_count": self.retry_count.to_wire()}

	def to_json(self) -> str:
		try:
			return json.dumps(self.to_dict(), separators=(",", ":"))
		except (TypeError, ValueError) as e:
			raise JobSerializationError(f"cannot serialize job {self.name!r}: {e}") from e

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "EnqueuedJob":
		name = data.get("name")
		if not isinstance(name, str):
			raise JobSerializationError(f"job record needs a string 'name', got {name!r}")
		args = data.get("args", "")
		if not isinstance(args, str):
			raise JobSerializationError(f"job record 'args' must be a string, got {type(args).__name__}")
		return cls(name=name, args=args, retry_count=RetryCount.from_wire(data.get("retry_count")))

	@classmethod
	def from_json(cls, text: str) -> "EnqueuedJob":
		try:
			data = json.loads(text)
		except (TypeError, ValueError) as e:
			raise JobSerializationError(f"stored payload is not valid JSON: {e}") from e
		if not isinstance(data, dict):
			raise JobSerializationError(f"stored payload is not a JSON object: {text[:80]!r}")
		return cls.from_dict(data)


class QueueIdentifier(Enum):
	"""The logical queues a job can live in."""

	# All new jobs go here.
	MAIN = "main"
	# Jobs that failed on the main queue and are waiting to be tried again.
	RETRY = "retry"

	@property
	def suffix(self) -> str:
		return self.value

	def key(self, namespace: str) -> str:
		"""Backend key for this queue under ``namespace``."""
		return f"{namespace}_{self.suffix}"


class DequeueFailure(Enum):
	TIMEOUT = "timeout"
	ERROR = "error"


@dataclass(frozen=True)
class NoJobDequeued:
	"""Why a dequeue attempt produced no job.

	A timeout is an expected outcome (nothing to do right now); an error
	carries the underlying ``QueueError``.
	"""
	reason: DequeueFailure
	error: Optional[QueueError] = None

	def __post_init__(self) -> None:
		if self.reason is DequeueFailure.ERROR and self.error is None:
			raise ValueError("an error outcome needs the underlying error")
		if self.reason is DequeueFailure.TIMEOUT and self.error is not None:
			raise ValueError("a timeout outcome carries no error")

	@classmethod
	def because_timeout(cls) -> "NoJobDequeued":
		return cls(reason=DequeueFailure.TIMEOUT)

	@classmethod
	def because_error(cls, error: QueueError) -> "NoJobDequeued":
		return cls(reason=DequeueFailure.ERROR, error=error)

	@property
	def is_timeout(self) -> bool:
		return self.reason is DequeueFailure.TIMEOUT

	@property
	def is_error(self) -> bool:
		return self.reason is DequeueFailure.ERROR


DequeueResult = Union[EnqueuedJob, NoJobDequeued]


__all__ = [
	"RetryKind",
	"RetryCount",
	"EnqueuedJob",
	"QueueIdentifier",
	"DequeueFailure",
	"NoJobDequeued",
	"DequeueResult",
]
