"""
HDFS landing - concurrency-safe landing of WebHDFS files.

This package lists remote directories through a WebHDFS gateway, downloads
files into a private staging area and publishes them atomically into a
local partitioned tree, with structured JSON event logs and age-based
retention.
"""

from ._version import __version__

# Import main classes and functions for easy access
from .api import WebHdfsClient
from .models import RunContext, Scope, Settings
from .services import SyncService
from .transfer import ObjectFetcher, Publisher, TransferOrchestrator
from .utils import LockManager, create_session_with_retry, setup_logging
from .utils.log_sink import LogSink
from .utils.retention import RetentionSweeper
from .cli import main as cli_main, cli as cli_group

__all__ = [
    "__version__",
    "WebHdfsClient",
    "RunContext",
    "Scope",
    "Settings",
    "SyncService",
    "ObjectFetcher",
    "Publisher",
    "TransferOrchestrator",
    "LockManager",
    "LogSink",
    "RetentionSweeper",
    "create_session_with_retry",
    "setup_logging",
    "cli_main",
    "cli_group",
]
