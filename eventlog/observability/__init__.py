"""Logging setup and request correlation for the HTTP app.

structlog renders every record as one JSON line on stdout; the request
middleware ties each request's lines together with a correlation ID.
"""

from __future__ import annotations
