"""Schema providers: where column names and SQL type codes come from.

A provider answers two questions about a table (its column types and its
natural column order) and decides how SQL types map to Hive types. The
default mapping is :mod:`hive_import.lib.hive_types`; providers for
databases with unusual types can override :meth:`SchemaProvider.to_hive_type`.

Example YAML schema file::

    tables:
      orders:
        - {name: order_id, type: INTEGER}
        - {name: status, type: VARCHAR}
        - {name: total, type: 3}
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from hive_import.lib import hive_types
from hive_import.lib.errors import ConfigurationError, SchemaLookupError
from hive_import.lib.sql_types import parse_sql_type

logger = logging.getLogger(__name__)

__all__ = ["SchemaProvider", "StaticSchemaProvider", "load_schema_file", "schema_from_dict"]


class SchemaProvider(ABC):
    """Source of table metadata for statement generation."""

    @abstractmethod
    def get_column_types(self, table: str) -> Dict[str, int]:
        """Return a mapping of column name to SQL type code."""

    @abstractmethod
    def get_column_names(self, table: str) -> List[str]:
        """Return column names in the table's natural order."""

    def to_hive_type(self, sql_type: Optional[int]) -> Optional[str]:
        return hive_types.to_hive_type(sql_type)

    def is_lossy_mapping(self, sql_type: Optional[int]) -> bool:
        return hive_types.is_hive_type_improvised(sql_type)


class StaticSchemaProvider(SchemaProvider):
    """Schema provider backed by in-memory column lists.

    Args:
        tables: Table name to ordered ``(column, sql_type)`` pairs
    """

    def __init__(self, tables: Dict[str, Sequence[Tuple[str, int]]]) -> None:
        self._tables: Dict[str, List[Tuple[str, int]]] = {
            name: list(columns) for name, columns in tables.items()
        }

    @property
    def tables(self) -> List[str]:
        return list(self._tables)

    def _columns(self, table: str) -> List[Tuple[str, int]]:
        try:
            return self._tables[table]
        except KeyError:
            raise SchemaLookupError(
                "Table not found in schema",
                table=table,
                details={"known_tables": ", ".join(sorted(self._tables)) or "(none)"},
            ) from None

    def get_column_types(self, table: str) -> Dict[str, int]:
        return dict(self._columns(table))

    def get_column_names(self, table: str) -> List[str]:
        return [name for name, _ in self._columns(table)]


def _parse_columns(table: str, columns: Any) -> List[Tuple[str, int]]:
    if not isinstance(columns, list):
        raise ConfigurationError(
            f"tables.{table} must be a list of columns", field=f"tables.{table}", value=columns
        )

    parsed: List[Tuple[str, int]] = []
    for index, column in enumerate(columns):
        field = f"tables.{table}[{index}]"
        if not isinstance(column, dict) or "name" not in column or "type" not in column:
            raise ConfigurationError(
                f"{field} must be a mapping with 'name' and 'type'", field=field, value=column
            )
        try:
            sql_type = parse_sql_type(column["type"])
        except ValueError as exc:
            raise ConfigurationError(str(exc), field=f"{field}.type", value=column["type"]) from exc
        parsed.append((str(column["name"]), sql_type))
    return parsed


def schema_from_dict(data: Dict[str, Any]) -> StaticSchemaProvider:
    """Build a provider from a parsed ``{"tables": {...}}`` document."""
    if not isinstance(data, dict) or not isinstance(data.get("tables"), dict):
        raise ConfigurationError("Schema must contain a 'tables' mapping", field="tables")

    tables: Dict[str, Sequence[Tuple[str, int]]] = {}
    for table, columns in data["tables"].items():
        tables[str(table)] = _parse_columns(str(table), columns)
    return StaticSchemaProvider(tables)


def load_schema_file(path: Union[str, Path]) -> StaticSchemaProvider:
    """Load a YAML schema file into a :class:`StaticSchemaProvider`."""
    schema_path = Path(path)
    if not schema_path.exists():
        raise ConfigurationError(f"Schema file not found: {schema_path}")

    try:
        with schema_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {schema_path}: {exc}") from exc

    provider = schema_from_dict(data)
    logger.debug("Loaded schema for %d table(s) from %s", len(provider.tables), schema_path)
    return provider
