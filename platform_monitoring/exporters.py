from typing import Dict, Any, Union
import logging
import re

_SECRET_KEY_RE = re.compile(r"(?i)(api_?key|token|secret|authorization|password|passwd)")
# user:password@ inside redis://, rediss:// and similar URLs
_URL_CREDENTIALS_RE = re.compile(r"(?i)^([a-z][a-z0-9+.\-]*://)([^/@]*)@")


def redact_url(url: str) -> str:
    """Hide the credentials part of a connection URL."""
    return _URL_CREDENTIALS_RE.sub(r"\1***REDACTED***@", url)


def _mask_value(v: Any) -> Any:
    if isinstance(v, str) and "://" in v:
        return redact_url(v)
    return v


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, dict):
        out: Dict[str, Any] = {}
        for k, v in obj.items():
            if _SECRET_KEY_RE.search(str(k)):
                out[k] = "***REDACTED***"
            else:
                out[k] = _sanitize(v)
        return out
    if isinstance(obj, (list, tuple)):
        return [_sanitize(x) for x in obj]
    return _mask_value(obj)

logger = logging.getLogger('platform_monitoring')


def log_event(event: Union[str, Dict[str, Any]], payload: Dict[str, Any] | None = None, level: int = logging.INFO):
    """Log a monitoring event to the central logger.

    Accepts either log_event('queue.enqueue', {...}) or a single dict that
    already carries an 'event' key.
    """
    if isinstance(event, str):
        record = {'event': event, **(payload or {})}
    else:
        record = event
    logger.log(level, 'MONITOR_EVENT %s', _sanitize(record))
