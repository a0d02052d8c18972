"""Top-level platform monitoring helpers.

Usage: from platform_monitoring import log_event, redact_url
"""
from .exporters import log_event, redact_url

__all__ = ["log_event", "redact_url"]
