"""Warehouse path helpers: table paths, qualification, and HDFS port repair.

Qualifying a relative path against the default filesystem is delegated to a
:class:`PathResolver`. Some qualification layers drop the namenode port from
``hdfs://`` URIs; Hive cannot load from such a URI, so
:func:`repair_hdfs_port` puts a default port back.
"""

from __future__ import annotations

import getpass
import logging
import posixpath
from abc import ABC, abstractmethod
from typing import Dict, Optional

from fsspec.utils import infer_storage_options

logger = logging.getLogger(__name__)

__all__ = [
    "HDFS_SCHEME",
    "PathResolver",
    "FsspecPathResolver",
    "StaticPathResolver",
    "warehouse_table_path",
    "repair_hdfs_port",
]

HDFS_SCHEME = "hdfs://"


def warehouse_table_path(warehouse_dir: Optional[str], table: str) -> str:
    """Return the (possibly relative) path holding a table's data files.

    Example:
        >>> warehouse_table_path("/user/hive/warehouse", "foo")
        '/user/hive/warehouse/foo'
        >>> warehouse_table_path(None, "foo")
        'foo'
    """
    if not warehouse_dir:
        return table
    if not warehouse_dir.endswith("/"):
        warehouse_dir = warehouse_dir + "/"
    return warehouse_dir + table


def repair_hdfs_port(path: str, default_port: int) -> str:
    """Re-insert a port into an ``hdfs://`` URI whose authority has none.

    The port goes right before the third ``/`` of the string (the one
    closing the authority in ``hdfs://host/...``). Only that slash count is
    used to find the authority, so URIs of other shapes are not recognized.
    When there is no third ``/`` the path is returned unchanged with a
    warning.

    Example:
        >>> repair_hdfs_port("hdfs://namenode/warehouse/foo", 8020)
        'hdfs://namenode:8020/warehouse/foo'
    """
    if not path.startswith(HDFS_SCHEME):
        return path

    insert_point = -1
    for _ in range(3):
        insert_point = path.find("/", insert_point + 1)
        if insert_point == -1:
            break

    authority_end = insert_point if insert_point != -1 else len(path)
    if ":" in path[len(HDFS_SCHEME):authority_end]:
        return path

    if insert_point == -1:
        logger.warning("Fully-qualified HDFS path does not contain a port.")
        logger.warning("This may cause a Hive error.")
        return path

    return path[:insert_point] + ":" + str(default_port) + path[insert_point:]


class PathResolver(ABC):
    """Turns a warehouse-relative path into a fully-qualified location."""

    @abstractmethod
    def canonicalize(self, raw_path: str) -> str:
        """Return the fully-qualified form of ``raw_path``."""


class FsspecPathResolver(PathResolver):
    """Qualify paths against a default filesystem URI.

    The URI is split with fsspec's ``infer_storage_options``; relative paths
    are joined to ``working_dir`` first. Paths that already carry a scheme
    are returned as-is.

    Example:
        >>> resolver = FsspecPathResolver("hdfs://nn:8020", working_dir="/user/etl")
        >>> resolver.canonicalize("orders")
        'hdfs://nn:8020/user/etl/orders'
    """

    def __init__(self, default_fs: str = "file:///", working_dir: Optional[str] = None) -> None:
        self.default_fs = default_fs
        self._working_dir = working_dir

    @property
    def working_dir(self) -> str:
        if self._working_dir is None:
            self._working_dir = f"/user/{getpass.getuser()}"
        return self._working_dir

    def canonicalize(self, raw_path: str) -> str:
        if "://" in raw_path:
            return raw_path

        if raw_path.startswith("/"):
            path = raw_path
        else:
            path = posixpath.join(self.working_dir, raw_path)
        path = posixpath.normpath(path)

        storage = infer_storage_options(self.default_fs)
        protocol = storage["protocol"]
        if protocol == "file":
            return f"file:{path}"

        authority = storage.get("host", "")
        if storage.get("port"):
            authority = f"{authority}:{storage['port']}"
        qualified = f"{protocol}://{authority}{path}"
        logger.debug("Qualified %s as %s", raw_path, qualified)
        return qualified


class StaticPathResolver(PathResolver):
    """Resolve from a fixed table of paths, falling back to a prefix."""

    def __init__(self, paths: Optional[Dict[str, str]] = None, prefix: str = "") -> None:
        self.paths = dict(paths or {})
        self.prefix = prefix

    def canonicalize(self, raw_path: str) -> str:
        if raw_path in self.paths:
            return self.paths[raw_path]
        return self.prefix + raw_path
