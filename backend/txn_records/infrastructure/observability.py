"""Structured Logging: one JSON object per log line, plus setup for the whole process.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Known extra fields (transaction_id, reference, cache_region, error_code,
      request fields) are copied into the line when a call site passes them
    - setup_logging is idempotent: calling it twice never duplicates handlers
    - Timestamps are the record's creation time in UTC, not formatting time

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - uvicorn.access silenced: the request-timing middleware logs every request once
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "transaction_id", "reference", "cache_region", "error_code",
    "path", "method", "status_code", "duration_ms",
)

_HANDLER_NAME = "txn_records"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


class JSONFormatter(logging.Formatter):
    """Render a LogRecord and its known extras as a JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
