"""Structured event logging, JSON HTTP responders and small filesystem helpers."""

from eventlog.logutil import EventLogger, generate_correlation_id, get_event_logger, merge_fields

__all__ = ["EventLogger", "generate_correlation_id", "get_event_logger", "merge_fields"]
