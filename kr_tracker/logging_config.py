# kr_tracker/logging_config.py
"""
Stderr-only logging configuration.

stdout carries command results (preview tables, JSON) so it stays pipeable;
ALL logging goes to stderr, either as plain lines or as JSON records.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


# Attributes the engine attaches with ``extra=`` on deletion log records.
CONTEXT_FIELDS = ("delete_type", "entity_id", "removals", "updates", "version")


class JsonFormatter(logging.Formatter):
    """
    One JSON object per log line.

    Deletion context passed via ``extra`` (type, id, removal and update
    counts, snapshot version) is lifted into top-level keys so log lines for
    one deletion can be filtered without parsing the message.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(verbosity: str = "normal", log_format: str = "plain") -> None:
    """
    Configure root logging to stderr.

    Clears existing handlers so repeated calls (one per CLI invocation in
    tests) do not stack handlers.

    Args:
        verbosity: quiet, normal or verbose
        log_format: plain or json
    """
    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s  %(levelname)-7s  %(message)s", datefmt="%H:%M:%S")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_LEVELS.get(verbosity, logging.WARNING))
