"""Retention policy model."""

import re
from enum import Enum

from pydantic import ConfigDict, Field, field_validator

from .base import LandingBaseModel


class EntryType(str, Enum):
    """Kind of directory entry a retention policy may delete."""

    FILE = "file"
    DIRECTORY = "directory"
    ANY = "any"


class RetentionPolicy(LandingBaseModel):
    """
    Which aged artifacts to delete.

    Only immediate children of ``root`` are considered. An entry is deleted
    when its whole name matches ``name_pattern``, its type matches
    ``entry_type`` and its last modification is older than ``max_age_days``.

    Attributes:
        name: Policy name, also used to name the sweep lock
        root: Directory whose children are swept
        max_age_days: Age threshold in days
        name_pattern: Regular expression the entry name must fully match
        entry_type: Kind of entries eligible for deletion
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    root: str = Field(min_length=1)
    max_age_days: float = Field(gt=0)
    name_pattern: str = Field(min_length=1)
    entry_type: EntryType = EntryType.ANY

    @field_validator("name_pattern")
    @classmethod
    def validate_name_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid name pattern '{v}': {e}") from e
        return v

    def matches_name(self, name: str) -> bool:
        """Whether an entry name is selected by this policy."""
        return re.fullmatch(self.name_pattern, name) is not None


__all__ = ["EntryType", "RetentionPolicy"]
