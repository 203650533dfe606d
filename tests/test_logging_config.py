from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from hive_import.lib.logging import JSONFormatter, setup_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    root = logging.getLogger()
    saved_level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(saved_level)


def test_setup_logging_writes_json_file(tmp_path: Path) -> None:
    """Ensure logging setup adds JSON console output and a file handler."""
    log_path = tmp_path / "hive.log"
    setup_logging(verbose=True, json_format=True, log_file=str(log_path))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    ours = [h for h in root.handlers if type(h) in (logging.StreamHandler, logging.FileHandler)]
    assert len(ours) == 2
    assert all(isinstance(h.formatter, JSONFormatter) for h in ours)

    logging.getLogger("hive_import.test").warning("Column %s is lossy", "total", extra={"table": "orders"})
    for handler in ours:
        handler.flush()

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert records[-1]["message"] == "Column total is lossy"
    assert records[-1]["level"] == "WARNING"
    assert records[-1]["logger"] == "hive_import.test"
    assert records[-1]["extra"] == {"table": "orders"}
    assert records[-1]["timestamp"].endswith("Z")


def test_setup_logging_plain_format_defaults_to_info() -> None:
    setup_logging()
    root = logging.getLogger()
    assert root.level == logging.INFO
    console = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(console) == 1
    assert not isinstance(console[0].formatter, JSONFormatter)


def test_json_formatter_includes_exception() -> None:
    formatter = JSONFormatter()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    data = json.loads(formatter.format(record))
    assert data["message"] == "failed"
    assert "RuntimeError: boom" in data["exception"]
    assert "extra" not in data
