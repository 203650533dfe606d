"""Hive script rendering.

Joins a table's CREATE TABLE and LOAD DATA statements into a script that
``hive -f`` (or beeline) can run as-is.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from hive_import.lib.table_def import TableDefWriter

logger = logging.getLogger(__name__)

__all__ = ["render_script", "write_script"]


def render_script(writer: TableDefWriter) -> str:
    """Return both statements, each terminated by ``;`` and a newline."""
    statements = [writer.get_create_table_stmt(), writer.get_load_data_stmt()]
    return "".join(f"{stmt};\n" for stmt in statements)


def write_script(writer: TableDefWriter, path: Union[str, Path]) -> Path:
    """Render the script for ``writer`` and write it to ``path``."""
    script = render_script(writer)
    script_path = Path(path)
    script_path.parent.mkdir(parents=True, exist_ok=True)
    script_path.write_text(script, encoding="utf-8")
    logger.info("Wrote Hive script for %s to %s", writer.table, script_path)
    return script_path
