"""CLI entry point for generating Hive import scripts.

Usage:
    python -m hive_import --table orders --schema schema.yaml
    python -m hive_import --table orders --schema schema.yaml --config hive.yaml -o orders.q
    python -m hive_import --table orders --odbc-env SOURCE_DB_CONN --warehouse-dir /user/hive/warehouse
    python -m hive_import --table orders --schema schema.yaml --fields-terminated-by '\\t'

The CREATE TABLE and LOAD DATA statements are written to stdout (or to the
--output file) as a script that ``hive -f`` can run.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from hive_import import __version__
from hive_import.lib.errors import ConfigurationError, HiveImportError
from hive_import.lib.logging import setup_logging
from hive_import.lib.odbc_schema import OdbcSchemaProvider
from hive_import.lib.options import (
    HiveImportOptions,
    decode_delimiter,
    load_env_file,
    load_options,
)
from hive_import.lib.schema import SchemaProvider, load_schema_file
from hive_import.lib.script import render_script, write_script
from hive_import.lib.table_def import TableDefWriter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hive-import",
        description="Generate Hive CREATE TABLE and LOAD DATA statements for an exported table",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--table", required=True, help="Table to generate statements for")

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--schema", help="YAML file describing table columns and SQL types")
    source.add_argument(
        "--odbc-env",
        metavar="VAR",
        help="Environment variable holding an ODBC connection string to read the schema from",
    )
    parser.add_argument("--odbc-schema", help="Schema/owner of the table in the source database")

    parser.add_argument("--config", help="YAML file with hive options")
    parser.add_argument("--env-file", help="Load environment variables from this .env file first")
    parser.add_argument("--columns", help="Comma-separated column list (projection and order)")
    parser.add_argument("--fields-terminated-by", metavar="CHAR", help="Field delimiter")
    parser.add_argument("--lines-terminated-by", metavar="CHAR", help="Record delimiter")
    parser.add_argument("--warehouse-dir", help="Directory holding the exported table data")
    parser.add_argument("--default-fs", help="Filesystem URI to qualify paths against")
    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Omit the timestamp COMMENT clause from CREATE TABLE",
    )
    parser.add_argument("-o", "--output", help="Write the script here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    return parser


def resolve_options(args: argparse.Namespace) -> HiveImportOptions:
    """Merge the options file (if any) with command line overrides."""
    options = load_options(args.config) if args.config else HiveImportOptions.from_dict({})

    columns = None
    if args.columns:
        columns = [col.strip() for col in args.columns.split(",") if col.strip()]

    field_delim = None
    if args.fields_terminated_by is not None:
        field_delim = decode_delimiter(args.fields_terminated_by, "fields_terminated_by")
    record_delim = None
    if args.lines_terminated_by is not None:
        record_delim = decode_delimiter(args.lines_terminated_by, "lines_terminated_by")

    return options.with_overrides(
        field_delim=field_delim,
        record_delim=record_delim,
        warehouse_dir=args.warehouse_dir,
        default_fs=args.default_fs,
        columns=columns,
        with_comments=False if args.no_comments else None,
    )


def open_schema_provider(args: argparse.Namespace) -> SchemaProvider:
    if args.schema:
        return load_schema_file(args.schema)

    conn_str = os.environ.get(args.odbc_env)
    if not conn_str:
        raise ConfigurationError(
            f"Environment variable '{args.odbc_env}' not set for ODBC connection string",
            field="odbc_env",
        )
    return OdbcSchemaProvider.connect(conn_str, schema=args.odbc_schema)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, json_format=args.json_logs)

    if args.env_file:
        load_env_file(args.env_file)

    provider: Optional[SchemaProvider] = None
    try:
        options = resolve_options(args)
        provider = open_schema_provider(args)
        writer = TableDefWriter(options, provider, args.table)
        if args.output:
            write_script(writer, args.output)
        else:
            sys.stdout.write(render_script(writer))
    except HiveImportError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Unexpected error: %s", exc, exc_info=args.verbose)
        return 1
    finally:
        if isinstance(provider, OdbcSchemaProvider):
            provider.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
