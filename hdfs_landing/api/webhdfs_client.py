"""
WebHDFS client for listing and downloading remote objects.

This module provides a client for the WebHDFS REST API as exposed by a
Knox gateway (``.../gateway/<topology>/webhdfs/v1``). It implements the
Lister, Reader and StatusProvider protocols.
"""

# Standard library imports
import logging
from typing import Any, BinaryIO, Dict, List, Optional

# Third-party imports
import httpx

# Local imports
from ..models.transfer import RemoteObject
from ..utils import create_session_with_retry
from ..utils.constants import (
    DEFAULT_TIMEOUT,
    HTTP_STATUS_NOT_FOUND,
    MAX_CHUNK_SIZE,
    MIN_CHUNK_SIZE,
    WEBHDFS_OP_LIST,
    WEBHDFS_OP_OPEN,
    WEBHDFS_OP_STATUS,
)
from ..utils.path_utils import join_remote_path


def _chunk_size_for(content_length: Optional[str]) -> int:
    """Use larger chunks for bigger files, within [MIN_CHUNK_SIZE, MAX_CHUNK_SIZE]."""
    if not content_length:
        return MIN_CHUNK_SIZE
    try:
        file_size = int(content_length)
    except ValueError:
        return MIN_CHUNK_SIZE
    return min(max(MIN_CHUNK_SIZE, file_size // 100), MAX_CHUNK_SIZE)


class WebHdfsClient:
    """Client for the WebHDFS REST API."""

    def __init__(
        self,
        base_url: str,
        user: Optional[str] = None,
        password: Optional[str] = None,
        verify_ssl: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the WebHDFS client.

        Args:
            base_url: WebHDFS root URL, ending in ``/webhdfs/v1``
            user: Gateway user for basic authentication
            password: Gateway password
            verify_ssl: Verify the gateway's TLS certificate
            timeout: Request timeout in seconds
            session: Pre-built httpx client (mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        auth = (user, password or "") if user else None
        self.session = session or create_session_with_retry(auth=auth, verify=verify_ssl, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Any) -> "WebHdfsClient":
        """Build a client from WebHdfsSettings."""
        return cls(
            base_url=settings.base_url,
            user=settings.user,
            password=settings.password,
            verify_ssl=settings.verify_ssl,
            timeout=settings.timeout,
        )

    def _url(self, remote_path: str) -> str:
        return f"{self.base_url}{join_remote_path('/', remote_path)}"

    def _get_json(self, remote_path: str, op: str) -> Dict[str, Any]:
        response = self.session.get(self._url(remote_path), params={"op": op})
        response.raise_for_status()
        return response.json()

    def list_children(self, remote_path: str) -> List[RemoteObject]:
        """List the files directly under a remote directory.

        Args:
            remote_path: Fully qualified remote directory

        Returns:
            RemoteObject entries in listing order; directories are ignored and
            a missing directory yields an empty list

        Raises:
            httpx.HTTPError: If the request fails for any other reason
        """
        logging.debug("Listing %s", remote_path)
        try:
            data = self._get_json(remote_path, WEBHDFS_OP_LIST)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == HTTP_STATUS_NOT_FOUND:
                logging.debug("Remote directory %s does not exist", remote_path)
                return []
            raise

        statuses = data.get("FileStatuses", {}).get("FileStatus", []) or []
        children = []
        for status in statuses:
            if status.get("type") != "FILE":
                continue
            name = status.get("pathSuffix")
            if not name:
                continue
            children.append(RemoteObject(path=join_remote_path(remote_path, name), size=status.get("length")))
        return children

    def read(self, remote_path: str, sink: BinaryIO) -> int:
        """Stream a remote object into a binary sink.

        Args:
            remote_path: Fully qualified remote path
            sink: Writable binary file object

        Returns:
            Number of bytes written

        Raises:
            httpx.HTTPError: If the request or the transfer fails
        """
        logging.debug("Opening %s", remote_path)
        written = 0
        with self.session.stream("GET", self._url(remote_path), params={"op": WEBHDFS_OP_OPEN}) as response:
            response.raise_for_status()
            chunk_size = _chunk_size_for(response.headers.get("content-length"))
            for chunk in response.iter_bytes(chunk_size=chunk_size):
                sink.write(chunk)
                written += len(chunk)
        return written

    def get_size(self, remote_path: str) -> Optional[int]:
        """Byte length of a remote object as reported by GETFILESTATUS."""
        data = self._get_json(remote_path, WEBHDFS_OP_STATUS)
        length = data.get("FileStatus", {}).get("length")
        return int(length) if length is not None else None

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> "WebHdfsClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


__all__ = ["WebHdfsClient"]
