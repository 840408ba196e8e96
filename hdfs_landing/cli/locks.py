"""
Locks command for hdfs-landing CLI.

Lists the held named locks and lets an operator release the lock of a
process that died while holding it.
"""

import json
import sys
from typing import Optional

import click

from ..exceptions import ConfigurationError
from ..utils import LockManager, setup_logging
from ..utils.config_manager import load_settings
from ..utils.constants import EXIT_CONFIG_ERROR, EXIT_GENERAL_ERROR
from ..utils.error_handling import with_error_handling


@click.command()
@click.option("--release", "release_name", metavar="NAME", help="Remove the named lock (crashed holder only)")
@click.pass_context
@with_error_handling("lock administration")
def locks(ctx: click.Context, release_name: Optional[str]) -> None:
    """List held locks, or release one left behind by a crashed process."""
    setup_logging(ctx.obj["debug"])

    try:
        settings = load_settings(ctx.obj["config"], required=False)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    lock_manager = LockManager(
        settings.paths.lock_dir,
        poll_interval=settings.locking.poll_interval,
        max_wait=settings.locking.max_wait,
    )

    if release_name:
        if not lock_manager.is_held(release_name):
            click.echo(f"Lock {release_name} is not held", err=True)
            sys.exit(EXIT_GENERAL_ERROR)
        lock_manager.release(release_name)
        click.echo(f"Released lock {release_name}")
        return

    held = lock_manager.list_locks()
    if not held:
        click.echo("No locks held")
        return

    for lock in held:
        click.echo(f"{lock['name']}\t{lock['age_seconds']:.0f}s\t{json.dumps(lock['owner'], sort_keys=True)}")


__all__ = ["locks"]
