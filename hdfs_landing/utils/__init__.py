"""
Utility modules for HDFS landing operations.

Modules that depend on the data models (config_manager, log_sink,
path_utils, retention, permissions) are imported from their own
submodules.
"""

from .logger import setup_logging, EventFormatter
from .session import create_session_with_retry
from .lock_manager import LockManager, sanitize_lock_name
from .validation.partition import generate_date_list, parse_date_range, validate_partition_key

from . import error_handling
from . import logging_utils
from . import constants

__all__ = [
    "setup_logging",
    "EventFormatter",
    "create_session_with_retry",
    "LockManager",
    "sanitize_lock_name",
    "generate_date_list",
    "parse_date_range",
    "validate_partition_key",
    "error_handling",
    "logging_utils",
    "constants",
]
