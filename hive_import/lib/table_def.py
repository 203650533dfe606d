"""Hive CREATE TABLE and LOAD DATA statement generation.

After a table's rows have been exported as delimited text files, the two
statements built here create a matching Hive table and move the files into
it::

    writer = TableDefWriter(options, provider, "orders", resolver)
    create = writer.get_create_table_stmt()
    load = writer.get_load_data_stmt()

Generation is pure string building. The only ambient input is the clock
used for the optional COMMENT clause, which can be injected.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from hive_import.lib.errors import (
    ConfigurationError,
    OutOfRangeError,
    SchemaLookupError,
    UnsupportedTypeError,
)
from hive_import.lib.options import DEFAULT_HDFS_PORT, HiveImportOptions
from hive_import.lib.paths import (
    FsspecPathResolver,
    PathResolver,
    repair_hdfs_port,
    warehouse_table_path,
)
from hive_import.lib.schema import SchemaProvider

logger = logging.getLogger(__name__)

__all__ = [
    "COMMENT_TIME_FORMAT",
    "MAX_OCTAL_CHAR",
    "TableDefWriter",
    "build_create_table",
    "build_load_data",
    "encode_delimiter",
    "hive_octal_char_code",
]

MAX_OCTAL_CHAR = 0o177
COMMENT_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"


def hive_octal_char_code(char_num: int) -> str:
    """Return a delimiter character code as a Hive ``\\ooo`` octal escape.

    Hive reads delimiters written as a backslash and exactly three octal
    digits between 000 and 177: ``'\\12'`` is wrong, ``'\\012'`` is right,
    and ``'\\0177'`` is wrong too.

    Raises:
        OutOfRangeError: If ``char_num`` is outside [0, 0177].
    """
    if char_num > MAX_OCTAL_CHAR or char_num < 0:
        raise OutOfRangeError(
            f"Character {char_num} is an out-of-range delimiter", char_code=char_num
        )
    return "\\%03o" % char_num


def encode_delimiter(delim: str) -> str:
    """Octal-escape a single-character delimiter.

    Raises:
        ConfigurationError: If ``delim`` is not exactly one character.
        OutOfRangeError: If the character is outside [0, 0177].
    """
    if not isinstance(delim, str) or len(delim) != 1:
        raise ConfigurationError("Delimiter must be a single character", field="delimiter", value=delim)
    return hive_octal_char_code(ord(delim))


def build_create_table(
    table: str,
    columns: Sequence[Tuple[str, str]],
    field_delim: str,
    record_delim: str,
    comment_time: Optional[datetime] = None,
) -> str:
    """Render a CREATE TABLE statement for delimited text files.

    Args:
        table: Hive table name, embedded verbatim
        columns: Ordered ``(column, hive_type)`` pairs
        field_delim: Field separator character
        record_delim: Record terminator character
        comment_time: When given, add a COMMENT clause stamped with this time
    """
    col_defs = ", ".join(f"{name} {hive_type}" for name, hive_type in columns)
    parts = [f"CREATE TABLE {table} ( {col_defs}) "]

    if comment_time is not None:
        stamp = comment_time.strftime(COMMENT_TIME_FORMAT)
        parts.append(f"COMMENT 'Imported by hive_import on {stamp}' ")

    parts.append("ROW FORMAT DELIMITED FIELDS TERMINATED BY '")
    parts.append(encode_delimiter(field_delim))
    parts.append("' LINES TERMINATED BY '")
    parts.append(encode_delimiter(record_delim))
    parts.append("' STORED AS TEXTFILE")
    return "".join(parts)


def build_load_data(table: str, path: str, default_port: int = DEFAULT_HDFS_PORT) -> str:
    """Render a LOAD DATA statement moving files at ``path`` into ``table``.

    ``path`` is the resolved location; an ``hdfs://`` URI without a port
    gets ``default_port`` put back before it is embedded.
    """
    repaired = repair_hdfs_port(path, default_port)
    return f"LOAD DATA INPATH '{repaired}' INTO TABLE {table}"


class TableDefWriter:
    """Generate the Hive DDL/DML for one exported table.

    Args:
        options: Generation options (delimiters, warehouse dir, comments, ...)
        schema_provider: Where column names and SQL types come from
        table: Name of the table, used in Hive and as a path segment
        path_resolver: Qualifies the table's data path; defaults to an
            :class:`FsspecPathResolver` over ``options.default_fs``
        clock: Returns the time stamped into the COMMENT clause
    """

    def __init__(
        self,
        options: HiveImportOptions,
        schema_provider: SchemaProvider,
        table: str,
        path_resolver: Optional[PathResolver] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.options = options
        self.schema_provider = schema_provider
        self.table = table
        self.path_resolver = path_resolver or FsspecPathResolver(
            options.default_fs, working_dir=options.working_dir
        )
        self.clock = clock

    def map_columns(self) -> List[Tuple[str, str]]:
        """Return ``(column, hive_type)`` pairs in output order.

        Raises:
            UnsupportedTypeError: If a column's SQL type has no Hive mapping.
            SchemaLookupError: If a requested column is not in the table.
        """
        provider = self.schema_provider
        column_types = provider.get_column_types(self.table)

        col_names = self.options.columns
        if col_names is None:
            col_names = provider.get_column_names(self.table)

        mapped: List[Tuple[str, str]] = []
        for col in col_names:
            if col not in column_types:
                raise SchemaLookupError(
                    f"Column {col} not found in table", table=self.table, column=col
                )

            col_type = column_types[col]
            hive_col_type = provider.to_hive_type(col_type)
            if hive_col_type is None:
                raise UnsupportedTypeError(
                    f"Hive does not support the SQL type for column {col}",
                    table=self.table,
                    column=col,
                    sql_type=col_type,
                )

            if provider.is_lossy_mapping(col_type):
                logger.warning("Column %s had to be cast to a less precise type in Hive", col)

            mapped.append((col, hive_col_type))

        return mapped

    def get_create_table_stmt(self) -> str:
        """Return the CREATE TABLE statement for the table."""
        columns = self.map_columns()
        comment_time = self.clock() if self.options.with_comments else None
        stmt = build_create_table(
            self.table,
            columns,
            self.options.field_delim,
            self.options.record_delim,
            comment_time=comment_time,
        )
        logger.debug("Create statement: %s", stmt)
        return stmt

    def _qualified_path(self) -> str:
        raw_path = warehouse_table_path(self.options.warehouse_dir, self.table)
        return self.path_resolver.canonicalize(raw_path)

    def get_table_path(self) -> str:
        """Return the fully-qualified, port-repaired location of the table data."""
        return repair_hdfs_port(self._qualified_path(), self.options.hdfs_default_port)

    def get_load_data_stmt(self) -> str:
        """Return the LOAD DATA statement for the table."""
        stmt = build_load_data(self.table, self._qualified_path(), self.options.hdfs_default_port)
        logger.debug("Load statement: %s", stmt)
        return stmt
