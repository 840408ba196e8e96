"""
Pydantic models for hdfs-landing.

This package contains all Pydantic models used in the application:
- scope: Scope and its partitioning / layout options
- transfer: RemoteObject, TransferUnit and the transfer state machine
- context: RunContext carried through one invocation
- retention: RetentionPolicy
- results: Pair, scope and sweep summaries
- settings: Configuration file sections
"""

from .base import LandingBaseModel
from .context import RunContext, make_process_id
from .retention import EntryType, RetentionPolicy
from .results import PairSummary, ScopeSummary, SweepResult
from .scope import DestinationLayout, PartitionMode, Scope
from .settings import (
    LockingSettings,
    OwnershipSettings,
    PathSettings,
    RetentionSettings,
    Settings,
    TransferSettings,
    WebHdfsSettings,
)
from .transfer import PublishOutcome, RemoteObject, TransferState, TransferUnit

__all__ = [
    "LandingBaseModel",
    "RunContext",
    "make_process_id",
    "EntryType",
    "RetentionPolicy",
    "PairSummary",
    "ScopeSummary",
    "SweepResult",
    "DestinationLayout",
    "PartitionMode",
    "Scope",
    "LockingSettings",
    "OwnershipSettings",
    "PathSettings",
    "RetentionSettings",
    "Settings",
    "TransferSettings",
    "WebHdfsSettings",
    "PublishOutcome",
    "RemoteObject",
    "TransferState",
    "TransferUnit",
]
