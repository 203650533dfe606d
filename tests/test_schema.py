"""Tests for schema providers."""

import sys
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from hive_import.lib.errors import ConfigurationError, SchemaLookupError
from hive_import.lib.odbc_schema import OdbcSchemaProvider
from hive_import.lib.schema import StaticSchemaProvider, load_schema_file, schema_from_dict
from hive_import.lib.sql_types import SqlType


class TestStaticSchemaProvider:
    """Tests for the in-memory provider."""

    def test_column_types_and_order(self, orders_provider):
        assert orders_provider.get_column_names("foo") == ["id", "name"]
        assert orders_provider.get_column_types("foo") == {
            "id": SqlType.INTEGER,
            "name": SqlType.VARCHAR,
        }

    def test_unknown_table(self, orders_provider):
        with pytest.raises(SchemaLookupError) as exc_info:
            orders_provider.get_column_types("missing")
        assert exc_info.value.table == "missing"
        assert "orders" in exc_info.value.details["known_tables"]

    def test_default_mapping_helpers(self):
        provider = StaticSchemaProvider({})
        assert provider.to_hive_type(SqlType.BIGINT) == "BIGINT"
        assert provider.is_lossy_mapping(SqlType.DATE) is True


class TestSchemaFile:
    """Tests for YAML schema files."""

    def test_load_schema_file(self, tmp_path):
        schema_path = tmp_path / "schema.yaml"
        schema_path.write_text(
            "tables:\n"
            "  orders:\n"
            "    - {name: order_id, type: INTEGER}\n"
            "    - {name: status, type: varchar}\n"
            "    - {name: total, type: 3}\n",
            encoding="utf-8",
        )

        provider = load_schema_file(schema_path)
        assert provider.tables == ["orders"]
        assert provider.get_column_names("orders") == ["order_id", "status", "total"]
        assert provider.get_column_types("orders") == {
            "order_id": 4,
            "status": 12,
            "total": 3,
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Schema file not found"):
            load_schema_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        schema_path = tmp_path / "schema.yaml"
        schema_path.write_text("tables: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_schema_file(schema_path)

    def test_missing_tables_section(self):
        with pytest.raises(ConfigurationError, match="'tables' mapping"):
            schema_from_dict({"orders": []})

    def test_column_without_type(self):
        with pytest.raises(ConfigurationError) as exc_info:
            schema_from_dict({"tables": {"orders": [{"name": "id"}]}})
        assert exc_info.value.field == "tables.orders[0]"

    def test_unknown_type_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            schema_from_dict({"tables": {"orders": [{"name": "geo", "type": "GEOMETRY"}]}})
        assert exc_info.value.field == "tables.orders[0].type"


def _column_row(name, data_type, position, table="users", schema="dbo"):
    return SimpleNamespace(
        column_name=name,
        data_type=data_type,
        ordinal_position=position,
        table_name=table,
        table_schem=schema,
    )


def _fake_pyodbc(connect):
    class Error(Exception):
        pass

    class OperationalError(Error):
        pass

    class InterfaceError(Error):
        pass

    return SimpleNamespace(
        Error=Error,
        OperationalError=OperationalError,
        InterfaceError=InterfaceError,
        connect=connect,
    )


class TestOdbcSchemaProvider:
    """Tests for the ODBC catalog-backed provider."""

    @pytest.fixture
    def connection(self):
        conn = MagicMock()
        conn.cursor.return_value.columns.return_value = [
            _column_row("name", -9, 2),
            _column_row("id", 4, 1),
            _column_row("created", 11, 3),
        ]
        return conn

    def test_reads_columns_in_ordinal_order(self, connection):
        provider = OdbcSchemaProvider(connection, schema="dbo")
        assert provider.get_column_names("users") == ["id", "name", "created"]
        assert provider.get_column_types("users") == {
            "id": SqlType.INTEGER,
            "name": SqlType.NVARCHAR,
            "created": SqlType.TIMESTAMP,
        }
        connection.cursor.return_value.columns.assert_called_once_with(table="users", schema="dbo")
        connection.cursor.return_value.close.assert_called_once()

    def test_unknown_table(self, connection):
        connection.cursor.return_value.columns.return_value = []
        provider = OdbcSchemaProvider(connection)
        with pytest.raises(SchemaLookupError):
            provider.get_column_names("missing")

    def test_wildcard_matches_for_other_tables_are_dropped(self, connection):
        """Test that '_' in a table name does not pull in columns of look-alike tables."""
        connection.cursor.return_value.columns.return_value = [
            _column_row("item_id", 4, 1, table="order_items"),
            _column_row("qty", 4, 2, table="order_items"),
            _column_row("note", 12, 1, table="orderXitems"),
        ]
        provider = OdbcSchemaProvider(connection)
        assert provider.get_column_names("order_items") == ["item_id", "qty"]

    def test_only_look_alike_tables_is_not_found(self, connection):
        connection.cursor.return_value.columns.return_value = [
            _column_row("note", 12, 1, table="orderXitems"),
        ]
        provider = OdbcSchemaProvider(connection)
        with pytest.raises(SchemaLookupError):
            provider.get_column_names("order_items")

    def test_same_table_in_several_schemas_is_ambiguous(self, connection):
        connection.cursor.return_value.columns.return_value = [
            _column_row("id", 4, 1, table="orders", schema="dbo"),
            _column_row("id", 4, 1, table="orders", schema="staging"),
            _column_row("name", 12, 2, table="orders", schema="dbo"),
            _column_row("payload", 2004, 2, table="orders", schema="staging"),
        ]
        provider = OdbcSchemaProvider(connection)

        with pytest.raises(SchemaLookupError) as exc_info:
            provider.get_column_names("orders")
        assert exc_info.value.details["schemas"] == "dbo, staging"
        assert "--odbc-schema" in exc_info.value.suggestion

    def test_catalog_failure_is_wrapped(self, connection):
        connection.cursor.return_value.columns.side_effect = RuntimeError("permission denied")
        provider = OdbcSchemaProvider(connection)

        with pytest.raises(SchemaLookupError, match="permission denied") as exc_info:
            provider.get_column_types("users")
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        connection.cursor.return_value.close.assert_called_once()

    def test_context_manager_closes_connection(self, connection):
        with OdbcSchemaProvider(connection) as provider:
            provider.get_column_names("users")
        connection.close.assert_called_once()

    def test_connect_retries_transient_errors(self):
        conn = MagicMock()
        fake_pyodbc = _fake_pyodbc(MagicMock())
        fake_pyodbc.connect.side_effect = [fake_pyodbc.OperationalError("timeout"), conn]

        with patch.dict(sys.modules, {"pyodbc": fake_pyodbc}):
            provider = OdbcSchemaProvider.connect("DSN=source", backoff_seconds=0)

        assert provider.connection is conn
        assert fake_pyodbc.connect.call_count == 2

    def test_connect_gives_up_after_max_attempts(self):
        fake_pyodbc = _fake_pyodbc(MagicMock())
        fake_pyodbc.connect.side_effect = fake_pyodbc.OperationalError("down")

        with patch.dict(sys.modules, {"pyodbc": fake_pyodbc}):
            with pytest.raises(SchemaLookupError, match="down") as exc_info:
                OdbcSchemaProvider.connect("DSN=source", max_attempts=2, backoff_seconds=0)

        assert isinstance(exc_info.value.__cause__, fake_pyodbc.OperationalError)
        assert fake_pyodbc.connect.call_count == 2

    def test_connect_does_not_retry_other_driver_errors(self):
        fake_pyodbc = _fake_pyodbc(MagicMock())
        fake_pyodbc.connect.side_effect = fake_pyodbc.Error("bad DSN")

        with patch.dict(sys.modules, {"pyodbc": fake_pyodbc}):
            with pytest.raises(SchemaLookupError):
                OdbcSchemaProvider.connect("DSN=source", backoff_seconds=0)

        assert fake_pyodbc.connect.call_count == 1

    def test_connect_without_pyodbc(self):
        with patch.dict(sys.modules, {"pyodbc": None}):
            with pytest.raises(ConfigurationError) as exc_info:
                OdbcSchemaProvider.connect("DSN=source")
        assert "pyodbc" in exc_info.value.suggestion
