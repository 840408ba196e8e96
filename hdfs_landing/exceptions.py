"""
Exception types for hdfs-landing.

Per-object failures (FetchError, PublishError) are caught by the transfer
orchestrator and turned into a failed TransferUnit. ConfigurationError is
raised before any transfer work starts and aborts the whole invocation.
"""


class HdfsLandingError(Exception):
    """Base class for all hdfs-landing errors."""


class ConfigurationError(HdfsLandingError, ValueError):
    """Invalid or incomplete configuration (bad partition key, missing scope parameters)."""


class FetchError(HdfsLandingError):
    """A remote object could not be streamed into staging, or the staged file is empty."""

    def __init__(self, remote_path: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {remote_path}: {reason}")
        self.remote_path = remote_path
        self.reason = reason


class PublishError(HdfsLandingError):
    """A staged file could not be moved into its destination."""

    def __init__(self, dest_path: str, reason: str) -> None:
        super().__init__(f"Failed to publish {dest_path}: {reason}")
        self.dest_path = dest_path
        self.reason = reason


class TargetDirectoryError(HdfsLandingError):
    """The local target directory cannot be created or is not writable."""

    def __init__(self, directory: str, reason: str) -> None:
        super().__init__(f"Target directory {directory}: {reason}")
        self.directory = directory
        self.reason = reason


__all__ = [
    "HdfsLandingError",
    "ConfigurationError",
    "FetchError",
    "PublishError",
    "TargetDirectoryError",
]
