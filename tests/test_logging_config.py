from __future__ import annotations

import json
import logging

import pytest

from eventlog.logutil import EventLogger
from eventlog.observability import logging as logging_setup


@pytest.fixture
def fresh_logging(monkeypatch: pytest.MonkeyPatch):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)

    yield

    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_records_are_json_lines_on_stdout(fresh_logging, capsys) -> None:
    logging_setup.configure_logging(logging.INFO)

    EventLogger().log_error("cid-9", "upload", ValueError("bad file"), {"size": 3})

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    record = json.loads(lines[-1])
    assert record["event"] == "upload"
    assert record["correlationID"] == "cid-9"
    assert record["status"] == "error"
    assert record["error"] == "bad file"
    assert record["size"] == 3
    assert record["level"] == "error"
    assert record["msg"] == "Error occurred"
    assert record["timestamp"].endswith("Z")
    assert "time" in record


def test_configure_logging_is_idempotent(fresh_logging) -> None:
    logging_setup.configure_logging(logging.INFO)
    handlers = logging.getLogger().handlers[:]

    logging_setup.configure_logging(logging.DEBUG)

    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.INFO


def test_renderer_keys_from_caller_survive_in_json_line(fresh_logging, capsys) -> None:
    logging_setup.configure_logging(logging.INFO)

    EventLogger().log_once("e1", None, {"level": "custom", "time": "t", "msg": "mine"})

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    record = json.loads(lines[-1])
    assert record["fields.level"] == "custom"
    assert record["fields.time"] == "t"
    assert record["fields.msg"] == "mine"
    assert record["level"] == "info"
    assert record["msg"] == "Event logged once"
    assert record["time"] != "t"


def test_protect_renderer_keys_leaves_other_fields_alone() -> None:
    fields = {"event": "e1", "level": "custom", "rows": 3}

    assert logging_setup.protect_renderer_keys(fields) == {"event": "e1", "fields.level": "custom", "rows": 3}
    assert fields == {"event": "e1", "level": "custom", "rows": 3}
