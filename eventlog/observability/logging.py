from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


_CONFIGURED = False

# Keys the renderer owns on every line; caller fields with these names are kept as ``fields.<key>``.
RENDERER_KEYS = ("level", "msg", "time")


def protect_renderer_keys(fields: dict[str, Any]) -> dict[str, Any]:
    """Return ``fields`` with renderer-owned keys moved under a ``fields.`` prefix."""

    protected: dict[str, Any] = {}
    for key, value in fields.items():
        if key in RENDERER_KEYS:
            key = f"fields.{key}"
        protected[key] = value
    return protected


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog + stdlib logging for JSON lines on stdout.

    Records carry ``level`` and a UTC ISO ``time`` next to the caller's own
    fields. Safe to call multiple times (no-op after first call).
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        # ``timestamp`` belongs to the event fields, so the render time goes under ``time``.
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="time"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Keep uvicorn's own loggers consistent with our handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.propagate = False
        logger.setLevel(level)

    _CONFIGURED = True
