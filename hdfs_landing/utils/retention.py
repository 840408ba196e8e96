"""
Age-based retention sweeps.

A sweep deletes aged children of one root directory under a lock dedicated
to that policy. When the lock is busy the whole sweep is skipped for this
run; stale entries are simply removed by a later run.
"""

import os
import re
import shutil
import time
from typing import Callable, List, Optional

from ..models.results import SweepResult
from ..models.retention import EntryType, RetentionPolicy
from ..models.scope import Scope
from .constants import PARTITION_KEY_PATTERN, SECONDS_PER_DAY, SWEEP_LOCK_PREFIX
from .lock_manager import LockManager
from .log_sink import LogSink
from .path_utils import partition_roots


def log_retention_policy(app: str, log_dir: str, max_age_days: float) -> RetentionPolicy:
    """
    Policy removing orphaned process-local log files of one app.

    Consolidated logs (``<app>.log``) do not match and are never removed.
    """
    return RetentionPolicy(
        name=f"logs-{app}",
        root=log_dir,
        max_age_days=max_age_days,
        name_pattern=rf"{re.escape(app)}_[0-9]+_[0-9]+\.log",
        entry_type=EntryType.FILE,
    )


def data_retention_policies(scope: Scope, max_age_days: float) -> List[RetentionPolicy]:
    """
    Policies removing aged partition directories of a scope.

    Only directories named like a partition key are selected, so the staging
    root and any other reserved subtree are left alone.
    """
    policies = []
    for root in partition_roots(scope):
        policies.append(
            RetentionPolicy(
                name=f"data-{root}",
                root=str(root),
                max_age_days=max_age_days,
                name_pattern=PARTITION_KEY_PATTERN,
                entry_type=EntryType.DIRECTORY,
            )
        )
    return policies


class RetentionSweeper:
    """Deletes aged artifacts selected by a RetentionPolicy."""

    def __init__(
        self,
        lock_manager: LockManager,
        events: LogSink,
        max_wait: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the sweeper.

        Args:
            lock_manager: Lock manager providing the per-policy sweep lock
            events: Event log
            max_wait: Ceiling for the sweep lock (defaults to the manager's)
            clock: Source of the current epoch time
        """
        self._lock_manager = lock_manager
        self._events = events
        self._max_wait = max_wait
        self._clock = clock

    @staticmethod
    def lock_name(policy: RetentionPolicy) -> str:
        return f"{SWEEP_LOCK_PREFIX}{policy.name}"

    @staticmethod
    def _matches_type(entry: os.DirEntry, entry_type: EntryType) -> bool:
        is_dir = entry.is_dir(follow_symlinks=False)
        if entry_type == EntryType.DIRECTORY:
            return is_dir
        if entry_type == EntryType.FILE:
            return not is_dir
        return True

    def _select(self, policy: RetentionPolicy, result: SweepResult) -> List[os.DirEntry]:
        threshold = self._clock() - policy.max_age_days * SECONDS_PER_DAY
        selected = []
        with os.scandir(policy.root) as entries:
            for entry in entries:
                if not policy.matches_name(entry.name):
                    continue
                try:
                    if not self._matches_type(entry, policy.entry_type):
                        continue
                    mtime = entry.stat(follow_symlinks=False).st_mtime
                except FileNotFoundError:
                    continue
                except OSError as e:
                    result.errors += 1
                    self._events.warning("Could not inspect entry", path=entry.path, error=str(e))
                    continue
                if mtime < threshold:
                    selected.append(entry)
        return selected

    def _remove_expired(self, policy: RetentionPolicy, result: SweepResult) -> None:
        try:
            selected = self._select(policy, result)
        except OSError as e:
            result.errors += 1
            self._events.warning("Could not scan retention root", policy=policy.name, root=policy.root, error=str(e))
            return

        for entry in selected:
            try:
                if entry.is_dir(follow_symlinks=False):
                    shutil.rmtree(entry.path)
                else:
                    os.unlink(entry.path)
            except FileNotFoundError:
                continue
            except OSError as e:
                result.errors += 1
                self._events.warning("Could not remove expired entry", path=entry.path, error=str(e))
                continue
            result.removed.append(entry.path)

    def sweep(self, policy: RetentionPolicy) -> SweepResult:
        """
        Run one sweep of a policy's root.

        Args:
            policy: Retention policy to apply

        Returns:
            SweepResult listing what was removed, or marked skipped on lock timeout
        """
        result = SweepResult(policy=policy.name)

        if not os.path.isdir(policy.root):
            return result

        try:
            with self._lock_manager.hold(self.lock_name(policy), self._max_wait) as acquired:
                if acquired:
                    self._remove_expired(policy, result)
        except OSError as e:
            self._events.warning(
                "Retention sweep skipped, lock unavailable", policy=policy.name, root=policy.root, error=str(e)
            )
            result.skipped = True
            return result

        if not acquired:
            self._events.warning("Retention sweep skipped, lock unavailable", policy=policy.name, root=policy.root)
            result.skipped = True
            return result

        if result.removed or result.errors:
            self._events.info(
                "Retention sweep completed",
                policy=policy.name,
                root=policy.root,
                removed=result.removed_count,
                errors=result.errors,
            )
        return result


__all__ = ["RetentionSweeper", "log_retention_policy", "data_retention_policies"]
