from __future__ import annotations

from time import perf_counter
from typing import Any, Callable

import structlog
from starlette.datastructures import MutableHeaders

from eventlog.logutil import EventLogger, generate_correlation_id, get_event_logger


CORRELATION_HEADER = "X-Correlation-ID"


class RequestContextMiddleware:
    """Tags each request with a correlation ID and logs its start, end and failures."""

    def __init__(self, app: Callable[..., Any], event_logger: EventLogger | None = None) -> None:
        self.app = app
        self._event_logger = event_logger

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        event_logger = self._event_logger or get_event_logger()
        correlation_id = generate_correlation_id()
        request_fields = {"path": scope.get("path"), "method": scope.get("method")}

        # Exception handlers read it back from request.state.
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        structlog.contextvars.bind_contextvars(correlationID=correlation_id)

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
                headers = MutableHeaders(scope=message)
                headers[CORRELATION_HEADER] = correlation_id

            await send(message)

        event_logger.log_start(correlation_id, "http_request", request_fields)
        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            event_logger.log_error(correlation_id, "http_request", exc, request_fields)
            raise
        else:
            elapsed_ms = (perf_counter() - start) * 1000.0
            event_logger.log_end(
                correlation_id,
                "http_request",
                {**request_fields, "status_code": status_code, "elapsed_ms": round(elapsed_ms, 2)},
            )
        finally:
            structlog.contextvars.clear_contextvars()
