from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from eventlog.config import get_settings
from eventlog.logutil import reset_event_logger
from eventlog.main import create_app


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_NAME", "eventlog-test")
    monkeypatch.delenv("EVENTLOG_DEBUG", raising=False)
    get_settings.cache_clear()
    reset_event_logger()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()

    yield

    reset_event_logger()
    structlog.reset_defaults()
    get_settings.cache_clear()


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
async def api_client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
