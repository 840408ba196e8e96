"""
Central constants for the hdfs-landing package.

This module consolidates all constants used throughout the codebase
to eliminate magic numbers and strings.
"""

# ============================================================================
# Partitioning and Layout
# ============================================================================

# Partition keys are calendar days in YYYYMMDD form
PARTITION_KEY_FORMAT = "%Y%m%d"

# Regular expression for a partition key directory name
PARTITION_KEY_PATTERN = r"[0-9]{8}"

# Separator between start and end of a date range (YYYYMMDD-YYYYMMDD)
DATE_RANGE_SEPARATOR = "-"

# Name of the staging directory created under the target directory
STAGING_DIR_NAME = ".staging"

# ============================================================================
# Locking Constants
# ============================================================================

# Default ceiling for lock acquisition (seconds) - 5 minutes
DEFAULT_LOCK_MAX_WAIT = 300.0

# Interval between two attempts to create a lock file (seconds)
DEFAULT_LOCK_POLL_INTERVAL = 1.0

# Suffix of lock files inside the lock directory
LOCK_FILE_SUFFIX = ".lock"

# Longest sanitised lock name kept verbatim before hashing
MAX_LOCK_NAME_LENGTH = 120

# Prefixes for the lock names of each shared resource
PUBLISH_LOCK_PREFIX = "publish-"
CONSOLIDATED_LOG_LOCK_PREFIX = "consolidated-log-"
SWEEP_LOCK_PREFIX = "sweep-"

# ============================================================================
# Default Paths
# ============================================================================

# Default configuration file path
DEFAULT_CONFIG_PATH = "~/.config/hdfs-landing/config.toml"

# Default directory for process-local and consolidated logs
DEFAULT_LOG_DIR = "/var/log/hdfs_downloads"

# Default directory for lock files
DEFAULT_LOCK_DIR = "/var/lock/hdfs_landing"

# ============================================================================
# Retention Constants
# ============================================================================

# Age after which orphaned process-local log files are removed (days)
DEFAULT_LOG_RETENTION_DAYS = 7

SECONDS_PER_DAY = 86400

# ============================================================================
# API and Network Constants
# ============================================================================

# Default timeout for WebHDFS requests (seconds) - large files take a while
DEFAULT_TIMEOUT = 300.0

# WebHDFS operations
WEBHDFS_OP_LIST = "LISTSTATUS"
WEBHDFS_OP_OPEN = "OPEN"
WEBHDFS_OP_STATUS = "GETFILESTATUS"

# Streaming chunk size bounds (bytes)
MIN_CHUNK_SIZE = 8192
MAX_CHUNK_SIZE = 65536

# HTTP status codes for special handling
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_NOT_FOUND = 404

# ============================================================================
# Transfer Constants
# ============================================================================

# Per-object retries are off unless configured
DEFAULT_RETRIES = 0

# Base delay for exponential backoff between retries (seconds)
DEFAULT_RETRY_BACKOFF = 0.5

# Mode applied to published files
DEFAULT_FILE_MODE = "644"

# ============================================================================
# Logging Constants
# ============================================================================

# Level names written into the event stream
EVENT_LEVEL_NAMES = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARNING": "WARN",
    "ERROR": "ERROR",
    "CRITICAL": "ERROR",
}

# ============================================================================
# File Size Units
# ============================================================================

FILE_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

BYTES_PER_KB = 1024

# ============================================================================
# Exit Codes
# ============================================================================

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_USER_INTERRUPT = 130  # User pressed Ctrl+C


__all__ = [
    # Partitioning and Layout
    "PARTITION_KEY_FORMAT",
    "PARTITION_KEY_PATTERN",
    "DATE_RANGE_SEPARATOR",
    "STAGING_DIR_NAME",
    # Locking
    "DEFAULT_LOCK_MAX_WAIT",
    "DEFAULT_LOCK_POLL_INTERVAL",
    "LOCK_FILE_SUFFIX",
    "MAX_LOCK_NAME_LENGTH",
    "PUBLISH_LOCK_PREFIX",
    "CONSOLIDATED_LOG_LOCK_PREFIX",
    "SWEEP_LOCK_PREFIX",
    # Default Paths
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LOG_DIR",
    "DEFAULT_LOCK_DIR",
    # Retention
    "DEFAULT_LOG_RETENTION_DAYS",
    "SECONDS_PER_DAY",
    # API and Network
    "DEFAULT_TIMEOUT",
    "WEBHDFS_OP_LIST",
    "WEBHDFS_OP_OPEN",
    "WEBHDFS_OP_STATUS",
    "MIN_CHUNK_SIZE",
    "MAX_CHUNK_SIZE",
    "HTTP_STATUS_UNAUTHORIZED",
    "HTTP_STATUS_FORBIDDEN",
    "HTTP_STATUS_NOT_FOUND",
    # Transfer
    "DEFAULT_RETRIES",
    "DEFAULT_RETRY_BACKOFF",
    "DEFAULT_FILE_MODE",
    # Logging
    "EVENT_LEVEL_NAMES",
    # File Size
    "FILE_SIZE_UNITS",
    "BYTES_PER_KB",
    # Exit Codes
    "EXIT_SUCCESS",
    "EXIT_GENERAL_ERROR",
    "EXIT_CONFIG_ERROR",
    "EXIT_USER_INTERRUPT",
]
