"""
Filesystem-backed named locks shared by unrelated processes.

A lock is a file created with ``O_CREAT | O_EXCL``: the creation either
succeeds or fails, with no intermediate state. Releasing a lock removes the
file. There is no expiry and no ownership check; a holder killed inside its
critical section leaves the lock held until an operator removes it
(``hdfs-landing locks --release NAME``). The owner record written into the
file exists only to help that operator.
"""

import hashlib
import json
import logging
import os
import re
import socket
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .constants import DEFAULT_LOCK_MAX_WAIT, DEFAULT_LOCK_POLL_INTERVAL, LOCK_FILE_SUFFIX, MAX_LOCK_NAME_LENGTH

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def sanitize_lock_name(name: str) -> str:
    """
    Turn an arbitrary lock name into a safe file name.

    Characters outside ``[A-Za-z0-9._-]`` are replaced. When characters were
    replaced, or the name is too long, a short hash of the original name is
    appended so two different names never share a lock file.

    Example:
        >>> sanitize_lock_name("sweep-logs")
        'sweep-logs'
    """
    if not name:
        raise ValueError("Lock name must not be empty")

    safe = _UNSAFE_CHARS_RE.sub("_", name).strip("._") or "lock"
    if safe == name and len(safe) <= MAX_LOCK_NAME_LENGTH:
        return safe

    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()[:12]
    tail = safe[-(MAX_LOCK_NAME_LENGTH - len(digest) - 1) :].lstrip("._") or "lock"
    return f"{tail}-{digest}"


class LockManager:
    """
    Named mutual exclusion across processes sharing one filesystem.

    Callers treat a failed ``acquire`` as a soft failure: skip the protected
    operation and carry on, except where the operation is mandatory (publish),
    in which case the affected unit fails.
    """

    def __init__(
        self,
        lock_dir: str,
        poll_interval: float = DEFAULT_LOCK_POLL_INTERVAL,
        max_wait: float = DEFAULT_LOCK_MAX_WAIT,
        process_id: Optional[str] = None,
    ) -> None:
        """
        Initialize the lock manager.

        Args:
            lock_dir: Directory holding the lock files (created if missing)
            poll_interval: Seconds between two creation attempts
            max_wait: Default ceiling for acquire, in seconds
            process_id: Identifier written into the owner record
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.lock_dir = Path(lock_dir)
        self.poll_interval = poll_interval
        self.max_wait = max_wait
        self.process_id = process_id
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    def lock_path(self, name: str) -> Path:
        """Path of the lock file for a lock name."""
        return self.lock_dir / f"{sanitize_lock_name(name)}{LOCK_FILE_SUFFIX}"

    def _try_create(self, path: Path) -> bool:
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        except FileExistsError:
            return False

        owner = {
            "pid": os.getpid(),
            "host": socket.gethostname(),
            "process_id": self.process_id,
            "acquired_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            os.write(fd, json.dumps(owner).encode("utf-8"))
        except OSError as e:
            # The lock is held either way; the owner record is informational
            logging.debug("Could not write owner record to %s: %s", path, e)
        finally:
            os.close(fd)
        return True

    def acquire(self, name: str, max_wait: Optional[float] = None) -> bool:
        """
        Acquire a named lock, polling until it is free or the wait is exhausted.

        Args:
            name: Lock name
            max_wait: Ceiling in seconds (defaults to the manager's max_wait)

        Returns:
            True if the lock is now held by the caller, False on timeout
        """
        max_wait = self.max_wait if max_wait is None else max_wait
        path = self.lock_path(name)
        deadline = time.monotonic() + max_wait

        while True:
            if self._try_create(path):
                logging.debug("Acquired lock %s", name)
                return True

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logging.debug("Timed out after %.1fs waiting for lock %s", max_wait, name)
                return False
            time.sleep(min(self.poll_interval, remaining))

    def release(self, name: str) -> None:
        """Release a named lock. Releasing a lock that is not held is a no-op."""
        try:
            self.lock_path(name).unlink()
            logging.debug("Released lock %s", name)
        except FileNotFoundError:
            logging.debug("Lock %s was already released", name)

    def is_held(self, name: str) -> bool:
        """Whether any process currently holds the named lock."""
        return self.lock_path(name).exists()

    @contextmanager
    def hold(self, name: str, max_wait: Optional[float] = None) -> Iterator[bool]:
        """
        Context manager around acquire/release.

        Yields whether the lock was acquired; only an acquired lock is released.

        Example:
            >>> with lock_manager.hold("sweep-logs") as acquired:  # doctest: +SKIP
            ...     if acquired:
            ...         sweep()
        """
        acquired = self.acquire(name, max_wait)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(name)

    def list_locks(self) -> List[Dict[str, Any]]:
        """
        Describe every lock file currently present.

        Returns:
            One dict per lock with its file name, age in seconds and owner record
        """
        locks = []
        now = time.time()
        for path in sorted(self.lock_dir.glob(f"*{LOCK_FILE_SUFFIX}")):
            try:
                age = now - path.stat().st_mtime
                raw = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                continue  # released while listing
            try:
                owner = json.loads(raw) if raw else {}
            except json.JSONDecodeError:
                owner = {}
            locks.append({"name": path.name[: -len(LOCK_FILE_SUFFIX)], "age_seconds": age, "owner": owner})
        return locks


__all__ = ["LockManager", "sanitize_lock_name"]
