"""
Session utilities for WebHDFS operations.

This module provides utilities for creating and configuring HTTP clients
with retry strategies and connection pooling.
"""

import logging
from typing import Optional, Tuple

import httpx
from httpx import HTTPTransport

from .constants import DEFAULT_TIMEOUT

# ============================================================================
# HTTP Configuration Constants
# ============================================================================

# Connection-level retries (connect errors only; httpx does not retry responses)
MAX_RETRIES = 3


def create_session_with_retry(
    auth: Optional[Tuple[str, str]] = None,
    verify: bool = True,
    timeout: float = DEFAULT_TIMEOUT,
    max_connections: int = 10,
) -> httpx.Client:
    """
    Create an httpx client with retry strategy and connection pooling.

    Args:
        auth: Optional (user, password) tuple for basic authentication
        verify: Verify TLS certificates (the gateway often uses an internal CA)
        timeout: Total timeout in seconds
        max_connections: Maximum number of connections in the pool

    Returns:
        Configured httpx.Client object with:
        - Automatic connection retries
        - Redirect following (WebHDFS OPEN redirects to a datanode)
        - Timeout configuration
        - Optional basic authentication

    Example:
        >>> client = create_session_with_retry(auth=("user", "secret"), verify=False)
        >>> response = client.get("https://knox.example.com/gateway/webhdfs/v1/tmp?op=LISTSTATUS")
    """
    limits = httpx.Limits(
        max_connections=max_connections,
        max_keepalive_connections=max(2, max_connections // 2),
    )

    # Configure timeout (total, connect)
    timeout_config = httpx.Timeout(timeout, connect=min(timeout, 30.0))

    transport = HTTPTransport(
        limits=limits,
        retries=MAX_RETRIES,
        verify=verify,
    )

    if not verify:
        logging.debug("TLS certificate verification is disabled")

    return httpx.Client(
        transport=transport,
        timeout=timeout_config,
        follow_redirects=True,
        auth=httpx.BasicAuth(*auth) if auth else None,
    )


__all__ = ["create_session_with_retry"]
