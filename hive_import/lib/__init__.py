"""Hive statement generation library.

Maps source table schemas to Hive column types and renders the CREATE TABLE
and LOAD DATA statements used to expose exported text files in Hive.
"""

from hive_import.lib.errors import (
    ConfigurationError,
    HiveImportError,
    OutOfRangeError,
    SchemaLookupError,
    UnsupportedTypeError,
)
from hive_import.lib.hive_types import is_hive_type_improvised, to_hive_type
from hive_import.lib.odbc_schema import OdbcSchemaProvider
from hive_import.lib.options import (
    DEFAULT_HDFS_PORT,
    HiveImportOptions,
    decode_delimiter,
    load_env_file,
    load_options,
)
from hive_import.lib.paths import (
    FsspecPathResolver,
    PathResolver,
    StaticPathResolver,
    repair_hdfs_port,
    warehouse_table_path,
)
from hive_import.lib.schema import (
    SchemaProvider,
    StaticSchemaProvider,
    load_schema_file,
    schema_from_dict,
)
from hive_import.lib.script import render_script, write_script
from hive_import.lib.sql_types import SqlType, from_odbc_type, parse_sql_type
from hive_import.lib.table_def import (
    TableDefWriter,
    build_create_table,
    build_load_data,
    encode_delimiter,
    hive_octal_char_code,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "HiveImportError",
    "OutOfRangeError",
    "SchemaLookupError",
    "UnsupportedTypeError",
    # Types
    "SqlType",
    "from_odbc_type",
    "is_hive_type_improvised",
    "parse_sql_type",
    "to_hive_type",
    # Options
    "DEFAULT_HDFS_PORT",
    "HiveImportOptions",
    "decode_delimiter",
    "load_env_file",
    "load_options",
    # Schema providers
    "OdbcSchemaProvider",
    "SchemaProvider",
    "StaticSchemaProvider",
    "load_schema_file",
    "schema_from_dict",
    # Paths
    "FsspecPathResolver",
    "PathResolver",
    "StaticPathResolver",
    "repair_hdfs_port",
    "warehouse_table_path",
    # Statements
    "TableDefWriter",
    "build_create_table",
    "build_load_data",
    "encode_delimiter",
    "hive_octal_char_code",
    "render_script",
    "write_script",
]
