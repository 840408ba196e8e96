"""
File path handling utilities.

This module provides centralized functions for building remote paths and
for the destination layout policy: where a listed object lands under the
scope's target directory.
"""

import os
from pathlib import Path
from typing import List, Optional

from ..models.scope import DestinationLayout, PartitionMode, Scope
from .constants import STAGING_DIR_NAME


def join_remote_path(base: str, *parts: str) -> str:
    """
    Join remote path components with single slashes.

    Example:
        >>> join_remote_path("/prd/logs/", "20250401", "app.log")
        '/prd/logs/20250401/app.log'
    """
    path = base.rstrip("/") or ""
    for part in parts:
        part = part.strip("/")
        if part:
            path = f"{path}/{part}"
    return path or "/"


def remote_partition_path(base_path: str, partition: Optional[str]) -> str:
    """
    Remote directory listed for one base path / partition pair.

    Example:
        >>> remote_partition_path("/prd/logs", "20250401")
        '/prd/logs/20250401'
        >>> remote_partition_path("/prd/logs", None)
        '/prd/logs'
    """
    if partition is None:
        return join_remote_path(base_path)
    return join_remote_path(base_path, partition)


def source_name(base_path: str) -> str:
    """
    Directory name used for a base path in the nested-by-basepath layout.

    Example:
        >>> source_name("/prd/logs")
        'logs'
    """
    return base_path.rstrip("/").rsplit("/", 1)[-1]


def destination_dir(scope: Scope, base_path: str, partition: Optional[str]) -> Path:
    """
    Directory an object listed under (base_path, partition) lands in.

    Layouts:
        flat:                <target>/<file>
        nested-by-basepath:  <target>/<source>[/<date>]/<file>
        nested-by-date:      <target>/<date>/<file>

    Args:
        scope: Scope being synchronized
        base_path: Remote base path the object was listed under
        partition: Partition key, None when unpartitioned

    Returns:
        Destination directory
    """
    target = Path(scope.target_dir)

    if scope.layout == DestinationLayout.NESTED_BY_BASEPATH:
        directory = target / source_name(base_path)
        return directory / partition if partition else directory

    if scope.layout == DestinationLayout.NESTED_BY_DATE:
        if not partition:
            raise ValueError("nested-by-date layout requires a partition key")
        return target / partition

    return target


def destination_path(scope: Scope, base_path: str, partition: Optional[str], file_name: str) -> Path:
    """Final landing path of one object."""
    return destination_dir(scope, base_path, partition) / os.path.basename(file_name)


def partition_roots(scope: Scope) -> List[Path]:
    """
    Directories whose immediate children are partition (YYYYMMDD) directories.

    Used by data retention. Layouts without partition directories yield an
    empty list.
    """
    if scope.partitioning == PartitionMode.NONE:
        return []

    target = Path(scope.target_dir)
    if scope.layout == DestinationLayout.NESTED_BY_DATE:
        return [target]
    if scope.layout == DestinationLayout.NESTED_BY_BASEPATH:
        roots: List[Path] = []
        for base_path in scope.base_paths:
            root = target / source_name(base_path)
            if root not in roots:
                roots.append(root)
        return roots
    return []


def staging_root(scope: Scope, staging_dir: Optional[str] = None) -> Path:
    """
    Root of the per-process staging areas.

    Defaults to a hidden directory under the target so that publishing is a
    same-filesystem rename.
    """
    if staging_dir:
        return Path(staging_dir)
    return Path(scope.target_dir) / STAGING_DIR_NAME


def ensure_directory_exists(file_path: str) -> None:
    """
    Ensure the directory containing the file path exists.

    Args:
        file_path: Full path to a file
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)


__all__ = [
    "join_remote_path",
    "remote_partition_path",
    "source_name",
    "destination_dir",
    "destination_path",
    "partition_roots",
    "staging_root",
    "ensure_directory_exists",
]
