"""Configuration file models."""

from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..exceptions import ConfigurationError
from ..utils.constants import (
    DEFAULT_FILE_MODE,
    DEFAULT_LOCK_DIR,
    DEFAULT_LOCK_MAX_WAIT,
    DEFAULT_LOCK_POLL_INTERVAL,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_RETENTION_DAYS,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_BACKOFF,
    DEFAULT_TIMEOUT,
)
from .base import LandingBaseModel
from .scope import Scope


class WebHdfsSettings(LandingBaseModel):
    """
    Connection settings for the WebHDFS gateway.

    Attributes:
        base_url: URL up to and including the webhdfs/v1 prefix
        user: Basic auth user
        password: Basic auth password
        verify_ssl: Verify the gateway certificate
        timeout: Request timeout in seconds
    """

    base_url: str = Field(min_length=1)
    user: Optional[str] = None
    password: Optional[str] = None
    verify_ssl: bool = False
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"WebHDFS base_url must be an http(s) URL: '{v}'")
        return v.rstrip("/")


class PathSettings(LandingBaseModel):
    """Local directories used by the tool."""

    log_dir: str = DEFAULT_LOG_DIR
    lock_dir: str = DEFAULT_LOCK_DIR
    staging_dir: Optional[str] = None

    @field_validator("staging_dir")
    @classmethod
    def empty_staging_dir_is_default(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class LockingSettings(LandingBaseModel):
    """Bounds for lock acquisition."""

    max_wait: float = Field(default=DEFAULT_LOCK_MAX_WAIT, ge=0)
    poll_interval: float = Field(default=DEFAULT_LOCK_POLL_INTERVAL, gt=0)


class RetentionSettings(LandingBaseModel):
    """Age thresholds for the retention sweeps; data retention is off unless set."""

    log_days: float = Field(default=DEFAULT_LOG_RETENTION_DAYS, gt=0)
    data_days: Optional[float] = Field(default=None, gt=0)


class OwnershipSettings(LandingBaseModel):
    """
    Ownership and mode applied to landed files and the consolidated log.

    Attributes:
        user: Owner user name, left unchanged when not set
        group: Owner group name, left unchanged when not set
        file_mode: Octal permission string
    """

    user: Optional[str] = None
    group: Optional[str] = None
    file_mode: str = DEFAULT_FILE_MODE

    @field_validator("file_mode")
    @classmethod
    def validate_file_mode(cls, v: str) -> str:
        try:
            mode = int(v, 8)
        except ValueError as e:
            raise ValueError(f"file_mode must be an octal string such as '644': '{v}'") from e
        if not 0 <= mode <= 0o7777:
            raise ValueError(f"file_mode out of range: '{v}'")
        return v

    @property
    def mode_bits(self) -> int:
        """Permission bits as an integer."""
        return int(self.file_mode, 8)


class TransferSettings(LandingBaseModel):
    """Per-object retry behaviour (retries=0 disables retrying)."""

    retries: int = Field(default=DEFAULT_RETRIES, ge=0, le=10)
    retry_backoff: float = Field(default=DEFAULT_RETRY_BACKOFF, ge=0)


class Settings(LandingBaseModel):
    """
    Parsed configuration file.

    Only the ``webhdfs`` section is needed to transfer; every other section
    has defaults.
    """

    webhdfs: Optional[WebHdfsSettings] = None
    paths: PathSettings = Field(default_factory=PathSettings)
    locking: LockingSettings = Field(default_factory=LockingSettings)
    retention: RetentionSettings = Field(default_factory=RetentionSettings)
    ownership: OwnershipSettings = Field(default_factory=OwnershipSettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    scopes: List[Scope] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_scope_names(self) -> "Settings":
        names = [scope.name for scope in self.scopes]
        if any(name is None for name in names):
            raise ValueError("Every configured scope needs a name")
        duplicates = sorted({name for name in names if names.count(name) > 1})  # type: ignore[misc]
        if duplicates:
            raise ValueError(f"Duplicate scope name(s): {', '.join(duplicates)}")
        return self

    def get_scope(self, name: str) -> Scope:
        """
        Look up a configured scope by name.

        Raises:
            ConfigurationError: If no scope has that name
        """
        for scope in self.scopes:
            if scope.name == name:
                return scope
        known = ", ".join(s.name for s in self.scopes if s.name) or "none"
        raise ConfigurationError(f"Unknown scope '{name}' (configured: {known})")

    def require_webhdfs(self) -> WebHdfsSettings:
        """
        Return the WebHDFS section.

        Raises:
            ConfigurationError: If the configuration has no [webhdfs] section
        """
        if self.webhdfs is None:
            raise ConfigurationError("Missing [webhdfs] section in configuration")
        return self.webhdfs


__all__ = [
    "WebHdfsSettings",
    "PathSettings",
    "LockingSettings",
    "RetentionSettings",
    "OwnershipSettings",
    "TransferSettings",
    "Settings",
]
