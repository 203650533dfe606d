"""Shared fixtures for hive-table-writer tests."""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from hive_import.lib.options import HiveImportOptions  # noqa: E402
from hive_import.lib.paths import StaticPathResolver  # noqa: E402
from hive_import.lib.schema import StaticSchemaProvider  # noqa: E402
from hive_import.lib.sql_types import SqlType  # noqa: E402

FIXED_TIME = datetime(2025, 1, 15, 10, 30, 0)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep option defaults independent of the developer's environment."""
    for var in ("HIVE_WAREHOUSE_DIR", "HIVE_DEFAULT_FS", "HDFS_DEFAULT_PORT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def orders_provider():
    """Schema provider with an orders table and a table Hive can't hold."""
    return StaticSchemaProvider(
        {
            "orders": [
                ("order_id", SqlType.INTEGER),
                ("status", SqlType.VARCHAR),
                ("total", SqlType.DECIMAL),
                ("updated_at", SqlType.TIMESTAMP),
                ("is_paid", SqlType.BIT),
            ],
            "foo": [
                ("id", SqlType.INTEGER),
                ("name", SqlType.VARCHAR),
            ],
            "blobs": [
                ("id", SqlType.BIGINT),
                ("payload", SqlType.BLOB),
            ],
        }
    )


@pytest.fixture
def plain_options():
    """Options with comments disabled and default delimiters."""
    return HiveImportOptions(with_comments=False)


@pytest.fixture
def hdfs_resolver():
    """Resolver that places every path under a port-less namenode URI."""
    return StaticPathResolver(prefix="hdfs://namenode")
