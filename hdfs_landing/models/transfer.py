"""Transfer unit models and their state machine."""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import Field

from .base import LandingBaseModel


class TransferState(str, Enum):
    """Lifecycle states of a TransferUnit."""

    LISTED = "listed"
    FETCHING = "fetching"
    FETCHED = "fetched"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    SKIPPED = "skipped"
    FAILED = "failed"


# PUBLISHING -> SKIPPED covers a concurrent process landing the same name first
_TRANSITIONS: Dict[TransferState, FrozenSet[TransferState]] = {
    TransferState.LISTED: frozenset({TransferState.FETCHING, TransferState.SKIPPED, TransferState.FAILED}),
    TransferState.FETCHING: frozenset({TransferState.FETCHED, TransferState.FAILED}),
    TransferState.FETCHED: frozenset({TransferState.PUBLISHING, TransferState.FAILED}),
    TransferState.PUBLISHING: frozenset({TransferState.PUBLISHED, TransferState.SKIPPED, TransferState.FAILED}),
    TransferState.PUBLISHED: frozenset(),
    TransferState.SKIPPED: frozenset(),
    TransferState.FAILED: frozenset(),
}

TERMINAL_STATES = frozenset({TransferState.PUBLISHED, TransferState.SKIPPED, TransferState.FAILED})


class PublishOutcome(str, Enum):
    """Result of a successful publish call."""

    PUBLISHED = "published"
    ALREADY_PRESENT = "already_present"


class RemoteObject(LandingBaseModel):
    """
    One item under a scope's listing.

    Attributes:
        path: Fully qualified remote path
        size: Advisory byte length, only used for display
    """

    path: str = Field(min_length=1)
    size: Optional[int] = Field(default=None, ge=0)

    @property
    def name(self) -> str:
        """Final path component."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]


class TransferUnit(LandingBaseModel):
    """
    Binds a remote object to its staging and destination paths.

    Attributes:
        remote: The remote object
        partition: Partition key the object was listed under, if any
        staging_path: Private staging file for this process
        destination_path: Final landing path
        state: Current lifecycle state
        error: Failure reason once the unit is FAILED
    """

    remote: RemoteObject
    partition: Optional[str] = None
    staging_path: str
    destination_path: str
    state: TransferState = TransferState.LISTED
    error: Optional[str] = None

    @property
    def file_name(self) -> str:
        """Name the object lands under."""
        return self.remote.name

    @property
    def is_terminal(self) -> bool:
        """Whether the unit reached PUBLISHED, SKIPPED or FAILED."""
        return self.state in TERMINAL_STATES

    def advance(self, state: TransferState, error: Optional[str] = None) -> None:
        """
        Move the unit to a new state.

        Args:
            state: Target state
            error: Failure reason, recorded when moving to FAILED

        Raises:
            ValueError: If the transition is not allowed from the current state
        """
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(f"Illegal transition {self.state.value} -> {state.value} for {self.remote.path}")
        self.state = state
        if state == TransferState.FAILED:
            self.error = error


__all__ = [
    "TransferState",
    "TERMINAL_STATES",
    "PublishOutcome",
    "RemoteObject",
    "TransferUnit",
]
