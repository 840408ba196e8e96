"""Base models for hdfs-landing."""

from pydantic import BaseModel, ConfigDict


class LandingBaseModel(BaseModel):
    """Base model for all hdfs-landing models."""

    model_config = ConfigDict(
        extra="forbid",  # Don't allow extra fields
        frozen=False,  # Allow modification (can be changed per model)
        validate_assignment=True,  # Validate on attribute assignment
    )


__all__ = ["LandingBaseModel"]
