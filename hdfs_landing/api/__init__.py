"""
Remote store API client modules.

This package provides the client for the WebHDFS REST interface exposed
through a Knox gateway.
"""

from .webhdfs_client import WebHdfsClient

__all__ = ["WebHdfsClient"]
