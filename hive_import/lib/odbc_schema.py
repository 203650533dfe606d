"""Schema provider reading column metadata over ODBC (pyodbc).

Column metadata comes from the ODBC catalog function ``SQLColumns``
(``cursor.columns(table=...)``), so no query against the table itself is
issued. ODBC type codes are translated to SqlType numbering.

The table argument of ``SQLColumns`` is a search pattern (``_`` and ``%``
are wildcards), so only rows naming the requested table exactly are kept.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from hive_import.lib.errors import ConfigurationError, SchemaLookupError
from hive_import.lib.resilience import with_retry
from hive_import.lib.schema import SchemaProvider
from hive_import.lib.sql_types import from_odbc_type

logger = logging.getLogger(__name__)

__all__ = ["OdbcSchemaProvider"]


class OdbcSchemaProvider(SchemaProvider):
    """Read column names and types from a live ODBC connection.

    Args:
        connection: An open pyodbc (or pyodbc-compatible) connection
        schema: Optional schema/owner to restrict the catalog lookup to
    """

    def __init__(self, connection: Any, schema: Optional[str] = None) -> None:
        self.connection = connection
        self.schema = schema
        self._cache: Dict[str, List[Tuple[str, int]]] = {}

    @classmethod
    def connect(
        cls,
        conn_str: str,
        *,
        schema: Optional[str] = None,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
    ) -> "OdbcSchemaProvider":
        """Open a pyodbc connection (retrying transient failures).

        Raises:
            ConfigurationError: If pyodbc is not installed.
            SchemaLookupError: If the connection cannot be opened.
        """
        try:
            import pyodbc
        except ImportError as exc:
            raise ConfigurationError(
                "pyodbc is required to read schemas over ODBC",
                field="odbc_env",
                suggestion="Install pyodbc and an ODBC driver, or pass --schema with a YAML file.",
            ) from exc

        @with_retry(
            max_attempts=max_attempts,
            backoff_seconds=backoff_seconds,
            retry_exceptions=(pyodbc.OperationalError, pyodbc.InterfaceError),
        )
        def _open() -> Any:
            return pyodbc.connect(conn_str)

        try:
            connection = _open()
        except pyodbc.Error as exc:
            raise SchemaLookupError(
                f"Could not connect to the ODBC schema source: {exc}",
                details={"attempts": max_attempts},
            ) from exc
        return cls(connection, schema=schema)

    def _read_catalog(self, table: str) -> List[Any]:
        cursor = self.connection.cursor()
        try:
            return list(cursor.columns(table=table, schema=self.schema))
        except Exception as exc:
            raise SchemaLookupError(
                f"Catalog lookup failed: {exc}",
                table=table,
                details={"schema": self.schema} if self.schema else None,
            ) from exc
        finally:
            cursor.close()

    def _columns(self, table: str) -> List[Tuple[str, int]]:
        if table in self._cache:
            return self._cache[table]

        rows = [row for row in self._read_catalog(table) if row.table_name == table]
        if not rows:
            raise SchemaLookupError(
                "Table not found or has no columns",
                table=table,
                details={"schema": self.schema} if self.schema else None,
            )

        schemas = sorted({row.table_schem or "" for row in rows})
        if len(schemas) > 1:
            raise SchemaLookupError(
                "Table name is ambiguous across schemas",
                table=table,
                details={"schemas": ", ".join(schemas)},
                suggestion="Pass --odbc-schema to pick one.",
            )

        rows.sort(key=lambda row: row.ordinal_position)
        columns = [(row.column_name, from_odbc_type(row.data_type)) for row in rows]
        logger.debug("Read %d column(s) for table %s", len(columns), table)
        self._cache[table] = columns
        return columns

    def get_column_types(self, table: str) -> Dict[str, int]:
        return dict(self._columns(table))

    def get_column_names(self, table: str) -> List[str]:
        return [name for name, _ in self._columns(table)]

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "OdbcSchemaProvider":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
