"""JSON log output."""

import json
import logging
import sys

from viavo.logging_setup import JsonFormatter, configure_logging


def _record(msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord("viavo.pipeline", logging.WARNING, __file__, 1, msg, ("face",), exc_info)


def test_formatter_writes_one_json_object() -> None:
    line = JsonFormatter().format(_record("%s photo upload rejected"))

    data = json.loads(line)
    assert set(data) == {"time", "level", "logger", "message"}
    assert data["level"] == "WARNING"
    assert data["logger"] == "viavo.pipeline"
    assert data["message"] == "face photo upload rejected"


def test_formatter_includes_traceback() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("%s failed", sys.exc_info())

    data = json.loads(JsonFormatter().format(record))
    assert "ValueError: boom" in data["exc_info"]


def test_configure_logging_replaces_root_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

        configure_logging("nonsense")
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
