"""Event logging on top of structlog.

An :class:`EventLogger` owns the debug flag and the set of events that were
already logged once. Build one at startup (or use :func:`get_event_logger`)
and pass it to whatever needs to log.

Every record keeps the event name under ``event``; the human message goes
under ``msg``.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from threading import Lock
from typing import Any

import structlog

from eventlog.config import get_settings
from eventlog.observability.logging import protect_renderer_keys


TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def merge_fields(base: Mapping[str, Any], extra: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Return ``base`` updated with ``extra``; ``extra`` wins on collisions."""

    merged = dict(base)
    if extra:
        merged.update(extra)
    return merged


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _error_reason(err: BaseException | str | None) -> str:
    if err is None:
        return ""
    return str(err)


class EventLogger:
    """Debug-gated, always-on and once-only event logging."""

    def __init__(self, debug: bool = False, logger_name: str = "eventlog") -> None:
        self._debug = debug
        self._logger_name = logger_name
        self._lock = Lock()
        self._logged_events: set[str] = set()

    @property
    def debug(self) -> bool:
        return self._debug

    def set_debug_mode(self, enabled: bool) -> None:
        # Unsynchronized: set it before other threads start logging.
        self._debug = bool(enabled)

    def has_logged(self, event: str) -> bool:
        with self._lock:
            return event in self._logged_events

    def log_start(
        self, correlation_id: str, event: str, extra: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        return self._log_relational(correlation_id, event, "started", "Event started", extra)

    def log_end(
        self, correlation_id: str, event: str, extra: Mapping[str, Any] | None = None
    ) -> dict[str, Any] | None:
        return self._log_relational(correlation_id, event, "completed", "Event completed", extra)

    def log_error(
        self,
        correlation_id: str,
        event: str,
        err: BaseException | str | None,
        extra: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Log a failure regardless of debug mode; a missing ``err`` logs an empty reason."""

        fields = merge_fields(
            {
                "event": event,
                "correlationID": correlation_id,
                "timestamp": _utc_timestamp(),
                "error": _error_reason(err),
                "status": "error",
            },
            extra,
        )
        self._emit("error", "Error occurred", fields)
        return fields

    def log_once(
        self, event: str, err: BaseException | str | None = None, extra: Mapping[str, Any] | None = None
    ) -> bool:
        """Log ``event`` the first time it is seen; later calls are no-ops.

        Returns True only for the call that produced the record.
        """

        base: dict[str, Any] = {"event": event, "timestamp": _utc_timestamp()}
        if err is not None:
            base["error"] = _error_reason(err)
        return self._log_first(event, "Event logged once", merge_fields(base, extra))

    def log_success(self, event: str, extra: Mapping[str, Any] | None = None) -> bool:
        fields = merge_fields({"event": event, "timestamp": _utc_timestamp()}, extra)
        return self._log_first(event, "Event logged successfully", fields)

    def _log_relational(
        self,
        correlation_id: str,
        event: str,
        status: str,
        message: str,
        extra: Mapping[str, Any] | None,
    ) -> dict[str, Any] | None:
        if not self._debug:
            return None

        fields = merge_fields(
            {
                "event": event,
                "correlationID": correlation_id,
                "timestamp": _utc_timestamp(),
                "status": status,
            },
            extra,
        )
        self._emit("info", message, fields)
        return fields

    def _log_first(self, key: str, message: str, fields: dict[str, Any]) -> bool:
        # Check, emit and insert under one lock so concurrent callers cannot both emit.
        with self._lock:
            if key in self._logged_events:
                return False
            if not self._emit("info", message, fields):
                return False
            self._logged_events.add(key)
            return True

    def _emit(self, level: str, message: str, fields: dict[str, Any]) -> bool:
        payload = protect_renderer_keys(fields)
        event = str(payload.pop("event", ""))
        payload["msg"] = message
        try:
            log = structlog.get_logger(self._logger_name)
            getattr(log, level)(event, **payload)
        except Exception:  # noqa: BLE001
            # Sink failures never reach the caller.
            return False
        return True


_EVENT_LOGGER: EventLogger | None = None
_EVENT_LOGGER_LOCK = Lock()


def get_event_logger() -> EventLogger:
    global _EVENT_LOGGER
    with _EVENT_LOGGER_LOCK:
        if _EVENT_LOGGER is None:
            settings = get_settings()
            _EVENT_LOGGER = EventLogger(debug=settings.debug_mode, logger_name=settings.logger_name)
        return _EVENT_LOGGER


def reset_event_logger() -> None:
    """Drop the process default logger (used by tests)."""

    global _EVENT_LOGGER
    with _EVENT_LOGGER_LOCK:
        _EVENT_LOGGER = None
