"""
Sweep command for hdfs-landing CLI.

Runs only the retention sweeps of a scope, without contacting WebHDFS.
"""

import sys
from typing import Optional, Tuple

import click

from ..exceptions import ConfigurationError
from ..services import SyncService
from ..utils import setup_logging
from ..utils.config_manager import load_settings
from ..utils.constants import EXIT_CONFIG_ERROR, EXIT_GENERAL_ERROR
from ..utils.error_handling import with_error_handling
from ..utils.logging_utils import format_count_with_unit
from .scope_options import resolve_scope, scope_options


@click.command()
@scope_options
@click.pass_context
@with_error_handling("retention sweep")
def sweep(  # pylint: disable=too-many-positional-arguments
    ctx: click.Context,
    scope_name: Optional[str],
    app: Optional[str],
    base_paths: Tuple[str, ...],
    date: Optional[str],
    date_range: Optional[str],
    target_dir: Optional[str],
    layout: Optional[str],
) -> None:
    """Delete expired process logs and partition directories of a scope."""
    setup_logging(ctx.obj["debug"])

    try:
        settings = load_settings(ctx.obj["config"], required=False)
        scope = resolve_scope(settings, scope_name, app, base_paths, date, date_range, target_dir, layout)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    results = SyncService(settings).sweep(scope)
    removed = sum(result.removed_count for result in results)
    click.echo(f"Removed {format_count_with_unit(removed, 'expired entries', singular='expired entry')}", err=True)

    if any(result.skipped or result.errors for result in results):
        sys.exit(EXIT_GENERAL_ERROR)


__all__ = ["sweep"]
