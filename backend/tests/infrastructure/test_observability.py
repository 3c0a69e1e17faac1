"""Structured Logging: JSON rendering of extras and idempotent setup."""

import json
import logging

from txn_records.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "txn_records.test", logging.WARNING, __file__, 1, "cache %s", ("miss",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_line_has_core_fields_and_known_extras():
    line = json.loads(JSONFormatter().format(
        _record(transaction_id=7, cache_region="transaction", unrelated="x"),
    ))
    assert line["level"] == "WARNING"
    assert line["logger"] == "txn_records.test"
    assert line["message"] == "cache miss"
    assert line["transaction_id"] == 7
    assert line["cache_region"] == "transaction"
    assert "unrelated" not in line
    assert line["timestamp"].endswith("+00:00")


def test_setup_logging_is_idempotent():
    root = logging.getLogger()
    before = len(root.handlers)
    setup_logging("DEBUG", "text")
    setup_logging("DEBUG", "json")
    try:
        assert len(root.handlers) == before + 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
    finally:
        for handler in list(root.handlers):
            if handler.get_name() == "txn_records":
                root.removeHandler(handler)
