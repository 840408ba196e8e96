"""
Structured event log for one process.

Every event is written as one JSON line to a process-local file and mirrored
to stdout for the job scheduler. At teardown the whole process-local file is
appended to the scope's consolidated log under a lock, so records from
concurrent processes never interleave mid-line and none are lost.
"""

import itertools
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from ..models.context import RunContext
from ..models.settings import OwnershipSettings
from .constants import CONSOLIDATED_LOG_LOCK_PREFIX
from .lock_manager import LockManager
from .logger import EVENT_FIELDS_ATTR, EventFormatter
from .permissions import apply_ownership

# Distinguishes sinks created for the same process id within one interpreter
_sink_counter = itertools.count()


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


class LogSink:
    """
    Append-only JSON event log with a cross-process consolidated file.

    File layout inside ``log_dir``:
        <app>_<process_id>.log   process-local, deleted after consolidation
        <app>.log                consolidated, shared by every process of the app
    """

    def __init__(
        self,
        context: RunContext,
        log_dir: str,
        lock_manager: LockManager,
        stream: Optional[TextIO] = None,
        max_wait: Optional[float] = None,
        ownership: Optional[OwnershipSettings] = None,
    ) -> None:
        """
        Initialize the sink and open the process-local log file.

        Args:
            context: Run context stamped onto every record
            log_dir: Directory for process-local and consolidated logs
            lock_manager: Lock manager guarding the consolidated file
            stream: Mirror stream (defaults to sys.stdout)
            max_wait: Ceiling for the consolidation lock (defaults to the manager's)
            ownership: Ownership applied to the consolidated file
        """
        self.context = context
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.local_path = self.log_dir / f"{context.app}_{context.process_id}.log"
        self.consolidated_path = self.log_dir / f"{context.app}.log"

        self._lock_manager = lock_manager
        self._max_wait = max_wait
        self._ownership = ownership
        self._closed = False

        self._logger = logging.getLogger(f"hdfs_landing.events.{context.process_id}.{next(_sink_counter)}")
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False

        formatter = EventFormatter(context)
        self._file_handler = logging.FileHandler(self.local_path, mode="a", encoding="utf-8")
        self._file_handler.setFormatter(formatter)
        self._stream_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        self._stream_handler.setFormatter(formatter)
        self._logger.addHandler(self._file_handler)
        self._logger.addHandler(self._stream_handler)

    @property
    def lock_name(self) -> str:
        """Name of the lock guarding the consolidated log."""
        return f"{CONSOLIDATED_LOG_LOCK_PREFIX}{self.context.app}"

    def emit(self, level: Union[int, str], message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        """
        Record one event.

        Args:
            level: Logging level (int) or name ("INFO", "WARN", "ERROR", ...)
            message: Event message
            fields: Extra structured fields for this event

        Raises:
            RuntimeError: If the sink was already flushed to the consolidated log
        """
        if self._closed:
            raise RuntimeError("LogSink is closed; events can no longer be recorded")
        self._logger.log(_resolve_level(level), message, extra={EVENT_FIELDS_ATTR: dict(fields or {})})

    def debug(self, message: str, **fields: Any) -> None:
        self.emit(logging.DEBUG, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        self.emit(logging.INFO, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.emit(logging.WARNING, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self.emit(logging.ERROR, message, fields)

    def _close_handlers(self) -> None:
        for handler in (self._file_handler, self._stream_handler):
            handler.flush()
            self._logger.removeHandler(handler)
        # StreamHandler.close() leaves the stream itself open
        self._file_handler.close()
        self._stream_handler.close()
        self._closed = True

    def flush_to_consolidated(self) -> bool:
        """
        Append the process-local log to the consolidated log and delete it.

        Called once at process teardown. When the consolidation lock cannot
        be acquired the process-local file is kept so no record is lost.

        Returns:
            True if the records were consolidated, False otherwise
        """
        if self._closed:
            return False

        if not self._lock_manager.acquire(self.lock_name, self._max_wait):
            self.warning(
                "Consolidated log is locked, keeping process log",
                log_file=str(self.local_path),
                consolidated_log=str(self.consolidated_path),
            )
            self._close_handlers()
            return False

        try:
            self._close_handlers()
            data = self.local_path.read_bytes() if self.local_path.exists() else b""
            if data:
                with open(self.consolidated_path, "ab") as f:
                    f.write(data)
        except OSError as e:
            logging.error("Failed to consolidate %s into %s: %s", self.local_path, self.consolidated_path, e)
            return False
        finally:
            self._lock_manager.release(self.lock_name)

        if self.consolidated_path.exists():
            try:
                apply_ownership(str(self.consolidated_path), self._ownership, set_mode=False)
            except (OSError, LookupError) as e:
                logging.warning("Could not set ownership of %s: %s", self.consolidated_path, e)

        self.local_path.unlink(missing_ok=True)
        logging.debug("Consolidated %d bytes into %s", len(data), self.consolidated_path)
        return True


__all__ = ["LogSink"]
