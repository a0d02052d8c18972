"""Queue configuration read from the environment.

Environment variables (a local ``.env`` file is loaded first):
- REDIS_URL: backend address (default: redis://127.0.0.1:6379/0)
- QUEUE_NAMESPACE: key prefix isolating this application's queues (default: taskline)
- QUEUE_RETRY_LIMIT: how many retries a job gets before it is abandoned (default: 10)
- QUEUE_BACKEND: redis|memory, used by ``taskline.queue.factory`` (default: redis)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from taskline.queue.exceptions import QueueConfigError

load_dotenv()

DEFAULT_REDIS_URL = "redis://127.0.0.1:6379/0"
DEFAULT_NAMESPACE = "taskline"
DEFAULT_RETRY_LIMIT = 10
DEFAULT_BACKEND = "redis"


@dataclass(frozen=True)
class QueueSettings:
    redis_url: str = DEFAULT_REDIS_URL
    namespace: str = DEFAULT_NAMESPACE
    retry_count_limit: int = DEFAULT_RETRY_LIMIT
    backend: str = DEFAULT_BACKEND


def _env_int(env: Mapping[str, str], var: str, default: int) -> int:
    raw = env.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as e:
        raise QueueConfigError(f"{var} must be an integer, got {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> QueueSettings:
    """Build ``QueueSettings`` from ``env`` (defaults to ``os.environ``)."""
    env = os.environ if env is None else env
    limit = _env_int(env, "QUEUE_RETRY_LIMIT", DEFAULT_RETRY_LIMIT)
    if limit < 0:
        raise QueueConfigError(f"QUEUE_RETRY_LIMIT cannot be negative, got {limit}")
    return QueueSettings(
        redis_url=(env.get("REDIS_URL") or DEFAULT_REDIS_URL).strip(),
        namespace=(env.get("QUEUE_NAMESPACE") or DEFAULT_NAMESPACE).strip(),
        retry_count_limit=limit,
        backend=(env.get("QUEUE_BACKEND") or DEFAULT_BACKEND).strip().lower(),
    )


__all__ = [
    "DEFAULT_REDIS_URL",
    "DEFAULT_NAMESPACE",
    "DEFAULT_RETRY_LIMIT",
    "DEFAULT_BACKEND",
    "QueueSettings",
    "load_settings",
]
