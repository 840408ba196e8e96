"""
Service layer for landing operations.

This package provides the high-level service that coordinates the
components of one invocation.
"""

from .sync_service import SyncService

__all__ = ["SyncService"]
