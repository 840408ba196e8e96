"""
Logging configuration and utilities for hdfs-landing.

This module provides logging setup and the custom formatter used by the
event stream. Two channels exist:

- diagnostic logging through the root logger, on stderr, controlled by -d
- the structured event stream (see ``log_sink``), one JSON object per line
  on stdout and in the log files
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict

from .constants import EVENT_LEVEL_NAMES

if TYPE_CHECKING:
    from ..models.context import RunContext

# Attribute of a LogRecord carrying the structured fields of an event
EVENT_FIELDS_ATTR = "event_fields"

# Keys every event record starts with; event fields never override them
CORE_FIELDS = ("timestamp", "level", "app", "scope", "process_id", "message")

# ============================================================================
# Custom Formatters
# ============================================================================


def format_timestamp(created: float) -> str:
    """
    Format an epoch timestamp as UTC with millisecond precision.

    Example:
        >>> format_timestamp(0.25)
        '1970-01-01T00:00:00.250Z'
    """
    moment = datetime.fromtimestamp(created, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class EventFormatter(logging.Formatter):
    """
    Formatter that renders a log record as one JSON line.

    The run context (app, scope, process id) is given explicitly at
    construction so records never depend on ambient state.
    """

    def __init__(self, context: "RunContext") -> None:
        """
        Initialize the event formatter.

        Args:
            context: Run context stamped onto every record
        """
        super().__init__()
        self.context = context

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as a JSON object.

        Args:
            record: Log record to format

        Returns:
            A single line of JSON
        """
        event: Dict[str, Any] = {
            "timestamp": format_timestamp(record.created),
            "level": EVENT_LEVEL_NAMES.get(record.levelname, record.levelname),
            "app": self.context.app,
        }
        if self.context.scope:
            event["scope"] = self.context.scope
        event["process_id"] = self.context.process_id
        event["message"] = record.getMessage()

        fields = getattr(record, EVENT_FIELDS_ATTR, None) or {}
        for key, value in fields.items():
            if key not in CORE_FIELDS:
                event[key] = value

        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)

        return json.dumps(event, default=str)


# ============================================================================
# Logging Setup Functions
# ============================================================================


def setup_logging(verbosity: int = 0) -> None:
    """
    Setup diagnostic logging with multi-level verbosity.

    Diagnostics go to stderr; stdout carries the JSON event stream that the
    scheduler captures.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with HTTP logs)

    Example:
        >>> from hdfs_landing.utils.logger import setup_logging
        >>> setup_logging(0)  # WARNING level (default)
        >>> setup_logging(2)  # DEBUG level
    """
    # Map verbosity count to logging level
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # 2 or higher
        level = logging.DEBUG

    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s", stream=sys.stderr)

    # httpx logs every HTTP request at INFO level which clutters the output
    if verbosity < 3:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
    else:
        logging.getLogger("httpx").setLevel(logging.DEBUG)
        logging.getLogger("httpcore").setLevel(logging.DEBUG)


__all__ = [
    "EVENT_FIELDS_ATTR",
    "CORE_FIELDS",
    "format_timestamp",
    "EventFormatter",
    "setup_logging",
]
