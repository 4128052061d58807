"""Tests for the JSONL log formatter and log_event."""

from __future__ import annotations

import json
import logging

from philosophy_path.config import LoggingConfig
from philosophy_path.utils.logging import JsonlFormatter, get_logger, log_event, setup_logging


def test_jsonl_formatter_keeps_event_fields():
    record = logging.LogRecord("philosophy_path.engine", logging.INFO, __file__, 1, "Next link: %s", ("Mid",), None)
    record.event = "hop"
    record.title = "Mid"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "Next link: Mid"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "philosophy_path.engine"
    assert payload["event"] == "hop"
    assert payload["title"] == "Mid"
    assert "lineno" not in payload
    assert "exc_info" not in payload


def test_log_event_writes_jsonl_file(tmp_path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
    setup_logging(cfg, tmp_path)
    try:
        log_event(get_logger("engine"), "Reached target article.", event="reached", hops=2)
    finally:
        for handler in get_logger().handlers:
            handler.close()
        get_logger().handlers = []

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    payload = json.loads(lines[-1])
    assert payload["event"] == "reached"
    assert payload["hops"] == 2


def test_log_event_without_logger_is_noop():
    log_event(None, "ignored", event="nothing")
