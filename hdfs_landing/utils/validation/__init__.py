"""
Validation utilities for hdfs-landing.

This package provides validation for partition keys and date ranges.
"""

from .partition import generate_date_list, parse_date_range, validate_partition_key

__all__ = [
    "generate_date_list",
    "parse_date_range",
    "validate_partition_key",
]
