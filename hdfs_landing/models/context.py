"""Run context carried through every component of one invocation."""

import os
import time
from typing import Optional

from pydantic import ConfigDict, Field

from .base import LandingBaseModel


def make_process_id() -> str:
    """
    Build an identifier unique to this process instance.

    Combines the OS pid with a nanosecond timestamp so that a recycled pid
    never maps to an earlier run's staging area or log file.
    """
    return f"{os.getpid()}_{time.time_ns()}"


class RunContext(LandingBaseModel):
    """
    Identity of one invocation, stamped onto every log record.

    Attributes:
        app: Application name of the scope being synchronized
        scope: Optional scope label (the configured scope name)
        process_id: Unique per-process identifier
    """

    model_config = ConfigDict(frozen=True)

    app: str = Field(min_length=1)
    scope: Optional[str] = None
    process_id: str = Field(default_factory=make_process_id, min_length=1)


__all__ = ["RunContext", "make_process_id"]
