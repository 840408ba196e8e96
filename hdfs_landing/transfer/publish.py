"""
Publish operations: move staged files into the destination tree.

Publishing is serialised per destination path by a named lock. Under the
lock the existence check and the rename happen together, so at most one
process lands a given name and a destination never holds partial bytes.
"""

import errno
import logging
import os
import shutil
import tempfile
from typing import Callable, Optional

from ..exceptions import PublishError
from ..models.settings import OwnershipSettings
from ..models.transfer import PublishOutcome
from ..utils.constants import PUBLISH_LOCK_PREFIX
from ..utils.lock_manager import LockManager
from ..utils.path_utils import ensure_directory_exists
from ..utils.permissions import apply_ownership


def _copy_then_replace(staging_path: str, dest_path: str, prepare: Callable[[str], None]) -> None:
    """
    Cross-filesystem publish.

    The staged bytes are copied next to the destination under a hidden name,
    prepared (owner and mode) and renamed into place, so the final step is
    still an atomic rename.
    """
    dest_dir = os.path.dirname(dest_path) or "."
    fd, tmp_path = tempfile.mkstemp(prefix=f".{os.path.basename(dest_path)}.", suffix=".tmp", dir=dest_dir)
    try:
        with os.fdopen(fd, "wb") as dst, open(staging_path, "rb") as src:
            shutil.copyfileobj(src, dst)
            dst.flush()
            os.fsync(dst.fileno())
        prepare(tmp_path)
        os.replace(tmp_path, dest_path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        raise
    os.unlink(staging_path)


class Publisher:
    """Moves complete staged files into their final destination."""

    def __init__(
        self,
        lock_manager: LockManager,
        ownership: Optional[OwnershipSettings] = None,
        max_wait: Optional[float] = None,
    ) -> None:
        """
        Initialize the publisher.

        Args:
            lock_manager: Lock manager providing per-destination locks
            ownership: Owner and mode applied to published files
            max_wait: Ceiling for the publish lock (defaults to the manager's)
        """
        self._lock_manager = lock_manager
        self._ownership = ownership
        self._max_wait = max_wait

    @staticmethod
    def lock_name(dest_path: str) -> str:
        """Lock serialising publishes of one destination path."""
        return f"{PUBLISH_LOCK_PREFIX}{os.path.abspath(dest_path)}"

    def _move(self, staging_path: str, dest_path: str) -> None:
        ensure_directory_exists(dest_path)
        try:
            os.replace(staging_path, dest_path)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            logging.debug("Staging and destination differ in filesystem, copying %s", dest_path)
            _copy_then_replace(staging_path, dest_path, lambda path: self._normalise(path, dest_path))

    def _normalise(self, path: str, dest_path: str) -> None:
        try:
            apply_ownership(path, self._ownership)
        except (OSError, LookupError) as e:
            logging.warning("Publishing %s without ownership or mode: %s", dest_path, e)

    def publish(self, staging_path: str, dest_path: str) -> PublishOutcome:
        """
        Publish one staged file.

        Args:
            staging_path: Complete staged file
            dest_path: Final landing path

        Returns:
            PublishOutcome.PUBLISHED, or PublishOutcome.ALREADY_PRESENT when
            the destination existed by the time the lock was held (the staged
            file is then left for the caller to discard)

        Raises:
            PublishError: On lock timeout or when the move fails; the
                destination is left untouched
        """
        lock_name = self.lock_name(dest_path)
        try:
            acquired = self._lock_manager.acquire(lock_name, self._max_wait)
        except OSError as e:
            raise PublishError(dest_path, f"cannot take the publish lock: {e}") from e
        if not acquired:
            raise PublishError(dest_path, "timed out waiting for the publish lock")

        try:
            if os.path.exists(dest_path):
                logging.debug("Destination %s appeared while waiting, not publishing", dest_path)
                return PublishOutcome.ALREADY_PRESENT
            # Owner and mode are set before the rename, never on a visible file
            self._normalise(staging_path, dest_path)
            try:
                self._move(staging_path, dest_path)
            except OSError as e:
                raise PublishError(dest_path, str(e)) from e
        finally:
            self._lock_manager.release(lock_name)

        logging.debug("Published %s", dest_path)
        return PublishOutcome.PUBLISHED


__all__ = ["Publisher"]
