"""Structured exception hierarchy for Hive statement generation.

Schema problems (a column type Hive cannot hold, a table or column the
provider does not know) are kept apart from configuration problems (an
unencodable delimiter, a malformed options file) so callers can tell them
apart without parsing messages.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "HiveImportError",
    "UnsupportedTypeError",
    "OutOfRangeError",
    "SchemaLookupError",
    "ConfigurationError",
]


class HiveImportError(Exception):
    """Base exception for all statement generation errors.

    Provides structured error information for debugging.
    """

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.table = table
        self.details = details or {}
        self.suggestion = suggestion

        parts = [message]

        if table:
            parts.insert(0, f"[{table}]")

        if details:
            detail_lines = [f"  {k}: {v}" for k, v in details.items()]
            parts.append("\nDetails:")
            parts.extend(detail_lines)

        if suggestion:
            parts.append(f"\nSuggestion: {suggestion}")

        super().__init__("\n".join(parts) if len(parts) > 1 else message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "table": self.table,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class UnsupportedTypeError(HiveImportError):
    """A source column's SQL type has no Hive equivalent."""

    def __init__(
        self,
        message: str,
        *,
        column: Optional[str] = None,
        sql_type: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        self.column = column
        self.sql_type = sql_type

        details = kwargs.pop("details", None) or {}
        if column:
            details["column"] = column
        if sql_type is not None:
            details["sql_type"] = sql_type

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = (
                "Exclude the column with an explicit column list, or cast it "
                "to a supported type in the source query."
            )

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class OutOfRangeError(HiveImportError, ValueError):
    """A delimiter character cannot be written as a Hive octal escape."""

    def __init__(
        self,
        message: str,
        *,
        char_code: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        self.char_code = char_code

        details = kwargs.pop("details", None) or {}
        if char_code is not None:
            details["char_code"] = char_code

        suggestion = kwargs.pop("suggestion", None)
        if not suggestion:
            suggestion = "Hive delimiters must be 7-bit characters (\\000 to \\177)."

        super().__init__(message, details=details, suggestion=suggestion, **kwargs)


class SchemaLookupError(HiveImportError):
    """A table or column could not be looked up from the schema source."""

    def __init__(
        self,
        message: str,
        *,
        column: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        self.column = column

        details = kwargs.pop("details", None) or {}
        if column:
            details["column"] = column

        super().__init__(message, details=details, **kwargs)


class ConfigurationError(HiveImportError):
    """Invalid or incomplete generation options."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value

        details = kwargs.pop("details", None) or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = repr(value)

        super().__init__(message, details=details, **kwargs)
