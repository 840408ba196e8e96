"""
Transfer operations for landing remote objects locally.

This package lists remote directories, streams objects into a private
staging area and publishes them atomically into the destination tree.

Modules:
    - fetch: Streaming remote objects into staging
    - publish: Lock-guarded atomic publishing
    - orchestrator: Per-scope driver of the transfer lifecycle
    - reporting: Summary events
"""

from .fetch import ObjectFetcher
from .publish import Publisher
from .orchestrator import TransferOrchestrator
from .reporting import log_pair_summary, log_scope_start, log_scope_summary

__all__ = [
    "ObjectFetcher",
    "Publisher",
    "TransferOrchestrator",
    "log_pair_summary",
    "log_scope_start",
    "log_scope_summary",
]
