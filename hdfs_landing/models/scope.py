"""Scope models: what one invocation synchronizes and where it lands."""

import re
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from ..utils.validation.partition import generate_date_list, parse_date_range, validate_partition_key
from .base import LandingBaseModel

# App names end up in log file names and lock names
_APP_NAME_RE = re.compile(r"[A-Za-z0-9._-]+")


class PartitionMode(str, Enum):
    """How the remote base paths are partitioned by date."""

    NONE = "none"
    SINGLE_DATE = "single-date"
    DATE_RANGE = "date-range"


class DestinationLayout(str, Enum):
    """How landed files are arranged under the target directory."""

    FLAT = "flat"
    NESTED_BY_BASEPATH = "nested-by-basepath"
    NESTED_BY_DATE = "nested-by-date"


class Scope(LandingBaseModel):
    """
    One synchronization unit.

    Attributes:
        name: Optional label (the configured scope name)
        app: Application name, used for log files and log records
        base_paths: Remote base paths to synchronize
        partitioning: Partitioning mode of the base paths
        date: Partition key for single-date partitioning (YYYYMMDD)
        date_range: Partition range for date-range partitioning (YYYYMMDD-YYYYMMDD)
        target_dir: Local destination root
        layout: Destination directory layout
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    app: str
    base_paths: List[str] = Field(min_length=1)
    partitioning: PartitionMode = PartitionMode.NONE
    date: Optional[str] = None
    date_range: Optional[str] = None
    target_dir: str = Field(min_length=1)
    layout: DestinationLayout = DestinationLayout.FLAT

    @field_validator("app")
    @classmethod
    def validate_app(cls, v: str) -> str:
        """App names must be usable inside file names."""
        if not _APP_NAME_RE.fullmatch(v):
            raise ValueError(f"Invalid app name '{v}'. Use letters, digits, '.', '_' or '-'")
        return v

    @field_validator("base_paths")
    @classmethod
    def validate_base_paths(cls, v: List[str]) -> List[str]:
        """Normalize base paths and reject relative or root paths."""
        normalized = []
        for path in v:
            path = path.strip()
            if not path.startswith("/"):
                raise ValueError(f"Remote base path must be absolute: '{path}'")
            path = path.rstrip("/")
            if not path:
                raise ValueError("Remote base path must name a directory below '/'")
            normalized.append(path)
        return normalized

    @model_validator(mode="after")
    def validate_partitioning(self) -> "Scope":
        """Check that the partition parameters match the partitioning mode."""
        if self.partitioning == PartitionMode.NONE:
            if self.date or self.date_range:
                raise ValueError("A date or date range was given but partitioning is 'none'")
        elif self.partitioning == PartitionMode.SINGLE_DATE:
            if not self.date:
                raise ValueError("Partitioning 'single-date' requires a date")
            if self.date_range:
                raise ValueError("Partitioning 'single-date' does not accept a date range")
            validate_partition_key(self.date)
        else:
            if not self.date_range:
                raise ValueError("Partitioning 'date-range' requires a date range")
            if self.date:
                raise ValueError("Partitioning 'date-range' does not accept a single date")
            parse_date_range(self.date_range)

        if self.layout == DestinationLayout.NESTED_BY_DATE and self.partitioning == PartitionMode.NONE:
            raise ValueError("Layout 'nested-by-date' requires date partitioning")

        return self

    @property
    def label(self) -> str:
        """Name used to identify the scope in logs."""
        return self.name or self.app

    def partition_keys(self) -> List[Optional[str]]:
        """
        List the partition keys to process, in order.

        Returns:
            [None] when unpartitioned, otherwise one YYYYMMDD key per day
        """
        if self.partitioning == PartitionMode.SINGLE_DATE:
            return [self.date]
        if self.partitioning == PartitionMode.DATE_RANGE:
            start, end = parse_date_range(self.date_range)  # type: ignore[arg-type]
            return list(generate_date_list(start, end))
        return [None]


__all__ = ["PartitionMode", "DestinationLayout", "Scope"]
