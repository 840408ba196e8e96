"""
Protocols for type safety.

This package provides protocols that define the interfaces the transfer
layer needs from a remote store, so orchestration can be tested with
in-memory fakes.
"""

from .collaborator_protocol import Lister, Reader, StatusProvider

__all__ = ["Lister", "Reader", "StatusProvider"]
