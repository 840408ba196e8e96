"""
Remote store protocols.

This module defines the three capabilities taken from the remote
hierarchical store. WebHdfsClient implements all of them.
"""

from typing import BinaryIO, List, Optional, Protocol

from ..models.transfer import RemoteObject


class Lister(Protocol):
    """Lists the objects directly under a remote directory."""

    def list_children(self, remote_path: str) -> List[RemoteObject]:
        """
        List the file children of a remote directory.

        Args:
            remote_path: Fully qualified remote directory

        Returns:
            RemoteObject entries; an absent directory yields an empty list

        Raises:
            httpx.HTTPError: If the listing itself fails
        """
        ...


class Reader(Protocol):
    """Streams the bytes of a remote object."""

    def read(self, remote_path: str, sink: BinaryIO) -> int:
        """
        Copy a remote object into an open binary sink.

        Args:
            remote_path: Fully qualified remote path
            sink: Writable binary file object

        Returns:
            Number of bytes written
        """
        ...


class StatusProvider(Protocol):
    """Reports metadata of a remote object."""

    def get_size(self, remote_path: str) -> Optional[int]:
        """
        Byte length of a remote object.

        Returns:
            Size in bytes, or None when the store does not report it
        """
        ...


__all__ = ["Lister", "Reader", "StatusProvider"]
