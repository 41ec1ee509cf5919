"""Tests for the JSON log formatter used by the scripts."""

import json
import logging

from core.utils.log_format import JSONFormatter, setup_logging


def test_extra_fields_are_folded_in():
    record = logging.LogRecord("core.indicators.bollinger", logging.DEBUG, __file__, 1, "bands_computed", None, None)
    record.bars = 25
    record.source = "close"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "bands_computed"
    assert payload["level"] == "DEBUG"
    assert payload["logger"] == "core.indicators.bollinger"
    assert payload["bars"] == 25
    assert payload["source"] == "close"
    assert "lineno" not in payload


def test_setup_logging_writes_json_file(tmp_path):
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        log_file = setup_logging("unit", str(tmp_path))
        logging.getLogger("test").info("hello", extra={"points": 3})
        for handler in root.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["points"] == 3
    finally:
        for handler in list(root.handlers):
            if handler not in before:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)
