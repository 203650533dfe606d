"""SQL type codes for source table columns.

Codes follow the JDBC ``java.sql.Types`` numbering, which ODBC shares for
most of the common types. ``from_odbc_type`` translates the handful of
ODBC codes that differ.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Union

__all__ = ["SqlType", "parse_sql_type", "from_odbc_type"]


class SqlType(IntEnum):
    """Relational column type codes."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009


# ODBC codes whose numbering differs from SqlType
_ODBC_OVERRIDES: Dict[int, SqlType] = {
    -8: SqlType.NCHAR,  # SQL_WCHAR
    -10: SqlType.LONGNVARCHAR,  # SQL_WLONGVARCHAR
    9: SqlType.DATE,  # SQL_DATE (ODBC 2.x)
    10: SqlType.TIME,  # SQL_TIME (ODBC 2.x)
    11: SqlType.TIMESTAMP,  # SQL_TIMESTAMP (ODBC 2.x)
}


def parse_sql_type(value: Union[int, str]) -> int:
    """Return the integer code for a type given as a code or a SqlType name.

    Example:
        >>> parse_sql_type("varchar")
        12
        >>> parse_sql_type(4)
        4
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid SQL type: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(SqlType[text.upper()])
    except KeyError:
        raise ValueError(f"Unknown SQL type name: {value!r}") from None


def from_odbc_type(code: int) -> int:
    """Translate an ODBC ``data_type`` code to SqlType numbering."""
    override = _ODBC_OVERRIDES.get(code)
    return int(override) if override is not None else code
