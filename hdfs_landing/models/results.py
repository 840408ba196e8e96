"""Result models for transfer and retention runs."""

from typing import List, Optional

from pydantic import Field

from ..utils.constants import EXIT_GENERAL_ERROR, EXIT_SUCCESS
from .base import LandingBaseModel
from .transfer import TransferState


class PairSummary(LandingBaseModel):
    """
    Outcome of one base path x partition key combination.

    Attributes:
        base_path: Remote base path
        partition: Partition key, None when unpartitioned
        remote_path: Fully qualified remote directory that was listed
        published: Objects landed by this process
        skipped: Objects whose destination already existed
        failed: Objects that failed to fetch or publish
        listing_failed: Whether listing the remote directory raised an error
    """

    base_path: str
    partition: Optional[str] = None
    remote_path: str
    published: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    listing_failed: bool = False

    @property
    def total(self) -> int:
        """Number of objects listed."""
        return self.published + self.skipped + self.failed

    @property
    def succeeded(self) -> int:
        """Objects that ended PUBLISHED or SKIPPED."""
        return self.published + self.skipped

    @property
    def is_success(self) -> bool:
        """True when the listing worked and every object succeeded."""
        return not self.listing_failed and self.succeeded == self.total

    def record(self, state: TransferState) -> None:
        """Count one unit in its terminal state."""
        if state == TransferState.PUBLISHED:
            self.published += 1
        elif state == TransferState.SKIPPED:
            self.skipped += 1
        elif state == TransferState.FAILED:
            self.failed += 1
        else:
            raise ValueError(f"Cannot record non-terminal state {state.value}")


class ScopeSummary(LandingBaseModel):
    """
    Outcome of one scope.

    Attributes:
        scope: Scope label
        pairs: Per base path / partition results, in processing order
    """

    scope: str
    pairs: List[PairSummary] = Field(default_factory=list)

    @property
    def total(self) -> int:
        """Objects listed across all pairs."""
        return sum(pair.total for pair in self.pairs)

    @property
    def succeeded(self) -> int:
        """Objects that ended PUBLISHED or SKIPPED across all pairs."""
        return sum(pair.succeeded for pair in self.pairs)

    @property
    def processed_pairs(self) -> int:
        return len(self.pairs)

    @property
    def successful_pairs(self) -> int:
        return sum(1 for pair in self.pairs if pair.is_success)

    @property
    def is_success(self) -> bool:
        """True when every pair succeeded."""
        return all(pair.is_success for pair in self.pairs)

    @property
    def exit_status(self) -> int:
        """Process exit status for the external scheduler."""
        return EXIT_SUCCESS if self.is_success else EXIT_GENERAL_ERROR


class SweepResult(LandingBaseModel):
    """
    Outcome of one retention sweep.

    Attributes:
        policy: Name of the retention policy
        removed: Paths deleted by the sweep
        skipped: True when the sweep lock could not be acquired
        errors: Number of entries that could not be deleted
    """

    policy: str
    removed: List[str] = Field(default_factory=list)
    skipped: bool = False
    errors: int = Field(default=0, ge=0)

    @property
    def removed_count(self) -> int:
        return len(self.removed)


__all__ = ["PairSummary", "ScopeSummary", "SweepResult"]
