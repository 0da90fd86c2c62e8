import logging

import pytest
from flask import Flask, g

from orgapi.logutil import RequestIdFilter, configure_logging, parse_log_level


@pytest.mark.parametrize(
    "name, level",
    [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("Warning", logging.WARNING),
        ("error", logging.ERROR),
    ],
)
def test_parse_log_level(name, level):
    assert parse_log_level(name) == level


@pytest.mark.parametrize("name", ["", "trace", "fatal"])
def test_parse_log_level_rejects_unknown(name):
    with pytest.raises(ValueError, match="unknown log level"):
        parse_log_level(name)


def _record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)


def test_filter_uses_default_outside_requests():
    record = _record()

    assert RequestIdFilter().filter(record) is True
    assert record.request_id == "-"


def test_filter_uses_flask_request_id():
    app = Flask(__name__)
    record = _record()

    with app.test_request_context("/"):
        g.request_id = "req-42"
        RequestIdFilter(default="cli").filter(record)

    assert record.request_id == "req-42"


def test_configure_logging_installs_filtered_handler():
    root = logging.getLogger()
    original_level = root.level

    handler = configure_logging("warn", request_id="cli-1")
    try:
        assert root.level == logging.WARNING
        assert handler in root.handlers
        record = _record()
        handler.filter(record)
        assert record.request_id == "cli-1"
    finally:
        root.removeHandler(handler)
        root.setLevel(original_level)
