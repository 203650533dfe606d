"""Mapping from source SQL types to Hive column types."""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from hive_import.lib.sql_types import SqlType

__all__ = ["HIVE_TYPE_MAP", "to_hive_type", "is_hive_type_improvised"]

HIVE_TYPE_MAP: Dict[int, str] = {
    SqlType.INTEGER: "INT",
    SqlType.SMALLINT: "INT",
    SqlType.VARCHAR: "STRING",
    SqlType.CHAR: "STRING",
    SqlType.LONGVARCHAR: "STRING",
    SqlType.NVARCHAR: "STRING",
    SqlType.NCHAR: "STRING",
    SqlType.LONGNVARCHAR: "STRING",
    SqlType.DATE: "STRING",
    SqlType.TIME: "STRING",
    SqlType.TIMESTAMP: "STRING",
    SqlType.NUMERIC: "DOUBLE",
    SqlType.DECIMAL: "DOUBLE",
    SqlType.FLOAT: "DOUBLE",
    SqlType.DOUBLE: "DOUBLE",
    SqlType.REAL: "DOUBLE",
    SqlType.BIT: "BOOLEAN",
    SqlType.BOOLEAN: "BOOLEAN",
    SqlType.TINYINT: "TINYINT",
    SqlType.BIGINT: "BIGINT",
}

# Hive has no temporal or fixed-point types; these land in STRING/DOUBLE
_IMPROVISED: FrozenSet[int] = frozenset(
    {
        SqlType.DATE,
        SqlType.TIME,
        SqlType.TIMESTAMP,
        SqlType.DECIMAL,
        SqlType.NUMERIC,
    }
)


def to_hive_type(sql_type: Optional[int]) -> Optional[str]:
    """Return the Hive type for a SQL type code, or None if Hive can't hold it."""
    if sql_type is None:
        return None
    return HIVE_TYPE_MAP.get(sql_type)


def is_hive_type_improvised(sql_type: Optional[int]) -> bool:
    """True if the Hive type chosen for ``sql_type`` loses precision."""
    return sql_type in _IMPROVISED
