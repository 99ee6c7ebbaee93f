from __future__ import annotations

import os

import structlog


def get_home_dir() -> str:
    """Return the working directory, or ``""`` if it cannot be read."""

    try:
        return os.getcwd()
    except OSError as exc:
        structlog.get_logger(__name__).error("could not get home directory", error=str(exc))
        return ""
