"""Structured logging utilities."""

from .trace import JsonlTraceLogger, TraceEvent, sanitize_metadata, utc_timestamp

__all__ = ["JsonlTraceLogger", "TraceEvent", "sanitize_metadata", "utc_timestamp"]
