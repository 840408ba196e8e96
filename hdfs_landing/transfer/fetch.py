"""
Fetch operations: stream remote objects into a private staging area.

Each process stages into ``<staging_root>/<process_id>``, so concurrent
processes never write to the same staging file. A staged file is only
handed to the publisher once it is complete.
"""

import logging
import os
import shutil
from pathlib import Path

import httpx

from ..exceptions import FetchError
from ..protocols import Reader


class ObjectFetcher:
    """Streams remote objects into per-process staging files."""

    def __init__(self, reader: Reader, staging_root: str, process_id: str) -> None:
        """
        Initialize the fetcher.

        Args:
            reader: Remote store reader
            staging_root: Directory holding the staging areas of all processes
            process_id: Identifier of this process, names the private staging area
        """
        self._reader = reader
        self.staging_root = Path(staging_root)
        self.staging_dir = self.staging_root / process_id

    def staging_path(self, file_name: str) -> str:
        """Private staging path for an object name."""
        return str(self.staging_dir / os.path.basename(file_name))

    @staticmethod
    def discard(staging_path: str) -> None:
        """Remove a staged file if it is still there."""
        try:
            os.unlink(staging_path)
        except FileNotFoundError:
            pass

    def fetch(self, remote_path: str, staging_path: str) -> int:
        """
        Stream one remote object into its staging file.

        Args:
            remote_path: Fully qualified remote path
            staging_path: Destination inside this process's staging area

        Returns:
            Number of bytes staged

        Raises:
            FetchError: If the transfer fails or produces an empty file; the
                partial staging file has been removed
        """
        try:
            self.staging_dir.mkdir(parents=True, exist_ok=True)
            with open(staging_path, "wb") as sink:
                self._reader.read(remote_path, sink)
            size = os.path.getsize(staging_path)
        except httpx.HTTPError as e:
            self.discard(staging_path)
            raise FetchError(remote_path, f"{type(e).__name__}: {e}") from e
        except OSError as e:
            self.discard(staging_path)
            raise FetchError(remote_path, str(e)) from e

        if size == 0:
            self.discard(staging_path)
            raise FetchError(remote_path, "downloaded file is empty")

        logging.debug("Staged %s into %s (%d bytes)", remote_path, staging_path, size)
        return size

    def cleanup(self) -> None:
        """Remove this process's staging area and anything left in it."""
        if self.staging_dir.exists():
            shutil.rmtree(self.staging_dir, ignore_errors=True)
            logging.debug("Removed staging directory %s", self.staging_dir)
        try:
            self.staging_root.rmdir()
        except OSError:
            # Still in use by another process, or already gone
            pass


__all__ = ["ObjectFetcher"]
