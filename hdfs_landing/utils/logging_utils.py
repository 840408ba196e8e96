"""
Logging utilities for consistent diagnostic output.

This module provides standardized formatting helpers shared by the
diagnostic log and the event stream.
"""

import logging
from typing import Optional

from .constants import BYTES_PER_KB, FILE_SIZE_UNITS


def log_operation_start(operation: str, **details) -> None:
    """
    Log the start of an operation with standardized format.

    Args:
        operation: Description of the operation
        **details: Additional details to log as key=value pairs
    """
    if details:
        detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
        logging.info("Starting %s (%s)", operation, detail_str)
    else:
        logging.info("Starting %s", operation)


def log_operation_complete(operation: str, **details) -> None:
    """
    Log the completion of an operation with standardized format.

    Args:
        operation: Description of the operation
        **details: Additional details to log as key=value pairs
    """
    if details:
        detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
        logging.info("Completed %s (%s)", operation, detail_str)
    else:
        logging.info("Completed %s", operation)


def format_count_with_unit(count: int, unit: str, *, singular: Optional[str] = None) -> str:
    """
    Format a count with proper pluralization.

    Examples:
        >>> format_count_with_unit(1, "file")
        '1 file'
        >>> format_count_with_unit(5, "file")
        '5 files'
    """
    if count == 1:
        return f"{count} {singular or unit}"

    plural = unit if unit.endswith("s") else f"{unit}s"
    return f"{count} {plural}"


def format_file_size(size_bytes: Optional[int]) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes, or None when unknown

    Returns:
        Formatted size string (e.g., "1.5 MB", "500 B", "unknown")

    Examples:
        >>> format_file_size(0)
        '0 B'
        >>> format_file_size(1536)
        '1.5 KB'
        >>> format_file_size(None)
        'unknown'
    """
    if size_bytes is None:
        return "unknown"
    if size_bytes == 0:
        return "0 B"

    i = 0
    size_float = float(size_bytes)

    while size_float >= BYTES_PER_KB and i < len(FILE_SIZE_UNITS) - 1:
        size_float /= float(BYTES_PER_KB)
        i += 1

    if i == 0:
        return f"{size_bytes} B"
    return f"{size_float:.1f} {FILE_SIZE_UNITS[i]}"


__all__ = [
    "log_operation_start",
    "log_operation_complete",
    "format_count_with_unit",
    "format_file_size",
]
