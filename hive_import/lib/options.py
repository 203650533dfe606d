"""Generation options for Hive statements.

Options can be built directly, from a dictionary, or from a YAML file::

    hive:
      fields_terminated_by: "\\t"
      lines_terminated_by: "\\n"
      warehouse_dir: /user/hive/warehouse
      default_fs: ${HIVE_DEFAULT_FS}
      with_comments: true
      columns: [id, name]

String values may reference environment variables as ``${VAR}``; a
``.env`` file can be loaded first with :func:`load_env_file`. When a value
is absent, ``HIVE_WAREHOUSE_DIR``, ``HIVE_DEFAULT_FS`` and
``HDFS_DEFAULT_PORT`` are consulted before the built-in defaults.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

from hive_import.lib.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_HDFS_PORT",
    "HiveImportOptions",
    "decode_delimiter",
    "expand_env_vars",
    "load_env_file",
    "load_options",
]

# NameNode RPC port used when a qualified hdfs:// URI comes back without one
DEFAULT_HDFS_PORT = 8020

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

_SIMPLE_ESCAPES = {
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "'": "'",
    "\\": "\\",
}


def load_env_file(
    path: Optional[Union[str, Path]] = None,
    *,
    override: bool = False,
) -> bool:
    """Load environment variables from a .env file (python-dotenv).

    Returns:
        True if a .env file was found and loaded, False otherwise.
    """
    return load_dotenv(dotenv_path=path, override=override)


def expand_env_vars(value: str) -> str:
    """Expand ``${VAR}`` references; unknown variables are left as written."""

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        return match.group(0) if env_value is None else env_value

    return ENV_VAR_PATTERN.sub(replacer, value)


def decode_delimiter(value: str, field_name: str = "delimiter") -> str:
    """Decode a delimiter as written on a command line or in YAML.

    Accepts a literal character, the escapes ``\\b \\n \\r \\t \\" \\' \\\\``,
    octal ``\\0ooo`` and hex ``\\0xhh``.

    Raises:
        ConfigurationError: If the value does not decode to one character.

    Example:
        >>> decode_delimiter("\\\\t")
        '\\t'
        >>> decode_delimiter("\\\\001")
        '\\x01'
    """
    if not isinstance(value, str) or not value:
        raise ConfigurationError(
            f"{field_name} must be a single character", field=field_name, value=value
        )

    if len(value) == 1:
        return value

    if value[0] != "\\":
        raise ConfigurationError(
            f"{field_name} must be a single character", field=field_name, value=value
        )

    body = value[1:]
    if len(body) == 1 and body in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[body]

    try:
        if body.startswith(("0x", "0X")):
            return chr(int(body[2:], 16))
        if body.startswith("0"):
            return chr(int(body, 8))
    except ValueError:
        pass

    raise ConfigurationError(
        f"Unrecognized escape sequence for {field_name}",
        field=field_name,
        value=value,
    )


def _optional_str(data: Dict[str, Any], key: str, env_var: Optional[str] = None) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigurationError(f"{key} must be a string", field=key, value=value)
    if value:
        value = expand_env_vars(value)
    if not value and env_var:
        value = os.environ.get(env_var) or None
    return value or None


def _bool_value(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    raise ConfigurationError(f"{key} must be a boolean", field=key, value=value)


def _port_value(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        value = os.environ.get("HDFS_DEFAULT_PORT") or DEFAULT_HDFS_PORT
    if isinstance(value, str):
        value = expand_env_vars(value)
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be an integer", field=key, value=value) from None
    if not 0 < port < 65536:
        raise ConfigurationError(f"{key} is not a valid port", field=key, value=port)
    return port


def _columns_value(data: Dict[str, Any], key: str) -> Optional[List[str]]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        value = [col.strip() for col in value.split(",") if col.strip()]
    if not isinstance(value, list) or not all(isinstance(col, str) for col in value):
        raise ConfigurationError(f"{key} must be a list of column names", field=key, value=value)
    return list(value)


@dataclass(frozen=True)
class HiveImportOptions:
    """Read-only options driving statement generation.

    Attributes:
        field_delim: Single character separating fields in the exported files
        record_delim: Single character terminating records
        warehouse_dir: Directory the table data lives under (None: relative path)
        with_comments: Add a timestamp COMMENT clause to CREATE TABLE
        columns: Explicit column projection and order (None: natural order)
        default_fs: Filesystem URI relative paths are qualified against
        working_dir: Directory relative paths resolve from (None: /user/<login>)
        hdfs_default_port: Port restored on hdfs:// URIs that lost theirs
    """

    field_delim: str = ","
    record_delim: str = "\n"
    warehouse_dir: Optional[str] = None
    with_comments: bool = True
    columns: Optional[List[str]] = field(default=None)
    default_fs: str = "file:///"
    working_dir: Optional[str] = None
    hdfs_default_port: int = DEFAULT_HDFS_PORT

    def __post_init__(self) -> None:
        for name in ("field_delim", "record_delim"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1:
                raise ConfigurationError(f"{name} must be a single character", field=name, value=value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HiveImportOptions":
        """Parse options from a dictionary (e.g. a YAML ``hive`` section)."""
        if not isinstance(data, dict):
            raise ConfigurationError("hive options must be a dictionary", value=data)

        field_delim = decode_delimiter(
            data.get("fields_terminated_by", ","), "fields_terminated_by"
        )
        record_delim = decode_delimiter(
            data.get("lines_terminated_by", "\n"), "lines_terminated_by"
        )

        return cls(
            field_delim=field_delim,
            record_delim=record_delim,
            warehouse_dir=_optional_str(data, "warehouse_dir", "HIVE_WAREHOUSE_DIR"),
            with_comments=_bool_value(data, "with_comments", True),
            columns=_columns_value(data, "columns"),
            default_fs=_optional_str(data, "default_fs", "HIVE_DEFAULT_FS") or "file:///",
            working_dir=_optional_str(data, "working_dir"),
            hdfs_default_port=_port_value(data, "hdfs_default_port"),
        )

    def with_overrides(self, **overrides: Any) -> "HiveImportOptions":
        """Return a copy with non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def load_options(path: Union[str, Path]) -> HiveImportOptions:
    """Load options from a YAML file.

    The file may hold a top-level ``hive`` section or the options directly.

    Raises:
        ConfigurationError: If the file is missing or malformed.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(f"Options file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

    if isinstance(data, dict) and "hive" in data:
        data = data["hive"] or {}

    logger.debug("Loaded hive options from %s", config_path)
    return HiveImportOptions.from_dict(data)
