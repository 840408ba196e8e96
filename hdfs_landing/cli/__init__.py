"""
Unified CLI entry point for hdfs-landing using Click.

This module provides the main CLI group and shared options.
"""

import sys
from typing import Optional

import click

from . import locks, sweep, sync
from .._version import __version__
from ..utils.constants import DEFAULT_CONFIG_PATH, EXIT_USER_INTERRUPT

# ============================================================================
# CLI Group
# ============================================================================


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="hdfs-landing")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
)
@click.option(
    "-d",
    "--debug",
    count=True,
    help="Increase verbosity (use -d for INFO, -dd for DEBUG, -ddd for DEBUG with HTTP logs)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], debug: int) -> None:
    """HDFS landing - Land files from WebHDFS into a local partitioned tree."""
    # Store shared options in context for subcommands to access
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["debug"] = debug


# Register subcommands
cli.add_command(sync.sync)
cli.add_command(sweep.sweep)
cli.add_command(locks.locks)


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()  # pylint: disable=no-value-for-parameter  # Click handles parameters
    except KeyboardInterrupt:
        click.echo("\n\nOperation cancelled by user", err=True)
        sys.exit(EXIT_USER_INTERRUPT)


__all__ = ["cli", "main"]
