"""
Scope selection options shared by the sync and sweep commands.

A scope comes either from the configuration file (``--scope NAME``) or
entirely from the command line. Command-line values override the fields
of a configured scope.
"""

from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

import click
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from ..models.scope import DestinationLayout, PartitionMode, Scope
from ..models.settings import Settings

F = TypeVar("F", bound=Callable[..., Any])


def scope_options(func: F) -> F:
    """Attach the scope selection options to a command."""
    options = [
        click.option("--scope", "scope_name", help="Name of a scope defined in the config file"),
        click.option("--app", help="Application name (log file prefix)"),
        click.option(
            "--base-path",
            "base_paths",
            multiple=True,
            help="Remote base path, e.g. /prd/logs (repeatable)",
        ),
        click.option("--date", help="Single partition to land (YYYYMMDD)"),
        click.option("--date-range", help="Inclusive partition range (YYYYMMDD-YYYYMMDD)"),
        click.option("--target-dir", type=click.Path(file_okay=False), help="Local destination directory"),
        click.option(
            "--layout",
            type=click.Choice([layout.value for layout in DestinationLayout]),
            help="Destination layout (default: flat)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_scope(
    settings: Settings,
    scope_name: Optional[str],
    app: Optional[str],
    base_paths: Tuple[str, ...],
    date: Optional[str],
    date_range: Optional[str],
    target_dir: Optional[str],
    layout: Optional[str],
) -> Scope:
    """
    Build the Scope selected on the command line.

    Raises:
        ConfigurationError: If the options are contradictory or incomplete
    """
    if date and date_range:
        raise ConfigurationError("--date and --date-range are mutually exclusive")

    fields: Dict[str, Any] = {}
    if scope_name:
        fields = settings.get_scope(scope_name).model_dump()
    elif not (app and base_paths and target_dir):
        raise ConfigurationError("Either --scope or all of --app, --base-path and --target-dir must be provided")

    if app:
        fields["app"] = app
    if base_paths:
        fields["base_paths"] = list(base_paths)
    if target_dir:
        fields["target_dir"] = target_dir
    if layout:
        fields["layout"] = layout
    if date:
        fields.update(partitioning=PartitionMode.SINGLE_DATE, date=date, date_range=None)
    elif date_range:
        fields.update(partitioning=PartitionMode.DATE_RANGE, date=None, date_range=date_range)

    try:
        return Scope.model_validate(fields)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scope: {e}") from e


__all__ = ["scope_options", "resolve_scope"]
