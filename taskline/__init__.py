"""taskline: a small, backend-pluggable job queue."""

__version__ = "0.1.0"
