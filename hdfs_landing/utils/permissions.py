"""
Ownership and permission normalisation for landed files.

Landed data and the consolidated logs are read by a separate log shipper,
so files are handed to a configured user/group with a fixed mode.
"""

import logging
import os
import shutil
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..models.settings import OwnershipSettings


def apply_ownership(path: str, ownership: Optional["OwnershipSettings"], *, set_mode: bool = True) -> None:
    """
    Apply the configured owner and mode to a path.

    Args:
        path: File to update
        ownership: Ownership settings; None leaves the file untouched
        set_mode: Also apply the configured permission bits

    Raises:
        OSError: If chmod/chown is not permitted
        LookupError: If the configured user or group does not exist
    """
    if ownership is None:
        return

    if set_mode:
        os.chmod(path, ownership.mode_bits)

    if ownership.user or ownership.group:
        shutil.chown(path, user=ownership.user, group=ownership.group)
        logging.debug("Set owner of %s to %s:%s", path, ownership.user or "-", ownership.group or "-")


__all__ = ["apply_ownership"]
