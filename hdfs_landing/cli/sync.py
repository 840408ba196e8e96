"""
Sync command for hdfs-landing CLI.

This module provides the sync command that lands one scope (or every
configured scope) from WebHDFS into the local tree.
"""

import logging
import sys
from typing import List, Optional, Tuple

import click
import httpx

from ..exceptions import ConfigurationError, HdfsLandingError
from ..models.scope import Scope
from ..services import SyncService
from ..utils import setup_logging
from ..utils.config_manager import load_settings
from ..utils.constants import EXIT_CONFIG_ERROR, EXIT_GENERAL_ERROR, EXIT_SUCCESS
from ..utils.error_handling import handle_generic_error, handle_http_error
from .scope_options import resolve_scope, scope_options


@click.command()
@scope_options
@click.option("--all-scopes", is_flag=True, help="Run every scope of the config file, in order")
@click.option("--retries", type=click.IntRange(0, 10), help="Extra download attempts per file (overrides config)")
@click.pass_context
def sync(  # pylint: disable=too-many-positional-arguments
    ctx: click.Context,
    scope_name: Optional[str],
    app: Optional[str],
    base_paths: Tuple[str, ...],
    date: Optional[str],
    date_range: Optional[str],
    target_dir: Optional[str],
    layout: Optional[str],
    all_scopes: bool,
    retries: Optional[int],
) -> None:
    """Land remote files of a scope into the local target directory."""
    config = ctx.obj["config"]
    debug = ctx.obj["debug"]

    setup_logging(debug)

    try:
        settings = load_settings(config)
        if all_scopes:
            if scope_name or app or base_paths or date or date_range or target_dir or layout:
                raise ConfigurationError("--all-scopes cannot be combined with scope options")
            if not settings.scopes:
                raise ConfigurationError("No scopes are configured")
            scopes: List[Scope] = list(settings.scopes)
        else:
            scopes = [resolve_scope(settings, scope_name, app, base_paths, date, date_range, target_dir, layout)]
        settings.require_webhdfs()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    service = SyncService(settings)
    failed_scopes = []
    for scope in scopes:
        try:
            summary = service.sync(scope, retries=retries)
        except HdfsLandingError as e:
            logging.error("Scope %s failed: %s", scope.label, e)
            failed_scopes.append(scope.label)
            continue
        except httpx.HTTPError as e:
            handle_http_error(e, f"sync of scope {scope.label}")
            failed_scopes.append(scope.label)
            continue
        except Exception as e:  # pylint: disable=broad-exception-caught
            handle_generic_error(e, f"sync of scope {scope.label}")
            failed_scopes.append(scope.label)
            continue

        if not summary.is_success:
            failed_scopes.append(scope.label)

    if failed_scopes:
        logging.error("Sync completed with errors in scope(s): %s", ", ".join(failed_scopes))
        sys.exit(EXIT_GENERAL_ERROR)

    logging.info("All scopes completed successfully")
    sys.exit(EXIT_SUCCESS)


__all__ = ["sync"]
