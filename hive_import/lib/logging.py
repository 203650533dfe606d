"""Root logger configuration for the hive-import command.

Library modules only create ``logging.getLogger(__name__)`` loggers. The
CLI calls :func:`setup_logging` once; statements go to stdout, so every
handler here writes to stderr or a file.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

__all__ = ["setup_logging", "JSONFormatter"]

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PLAIN_DATEFMT = "%Y-%m-%d %H:%M:%S"

_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, timezone.utc).isoformat().replace("+00:00", "Z")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, source.

    ``exception`` is added when the record carries exc_info, and anything
    passed through ``extra=`` is nested under ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.pathname:
            payload["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra:
            payload["extra"] = extra
        return json.dumps(payload, default=str)


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Replace the root logger's handlers with a stderr (and optional file) handler.

    ``verbose`` switches to DEBUG, which also logs each generated statement.
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = JSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT, datefmt=PLAIN_DATEFMT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    _attach(root, logging.StreamHandler(sys.stderr), level, formatter)
    if log_file:
        _attach(root, logging.FileHandler(log_file), level, formatter)

    logging.getLogger("fsspec").setLevel(logging.WARNING)
