"""
Reporting utilities for transfer runs.

This module emits the summary events of a run: one when a scope starts,
one per base path / partition pair and one for the whole scope.
"""

import logging
from typing import Any, Dict

from ..models.results import PairSummary, ScopeSummary
from ..models.scope import Scope
from ..utils.log_sink import LogSink


def pair_fields(pair: PairSummary) -> Dict[str, Any]:
    """Identifying fields of a pair for event records."""
    fields: Dict[str, Any] = {}
    if pair.partition is not None:
        fields["date"] = pair.partition
    fields["path"] = pair.remote_path
    return fields


def log_scope_start(events: LogSink, scope: Scope) -> None:
    """Emit the event opening a scope run."""
    fields: Dict[str, Any] = {
        "hdfs_paths": list(scope.base_paths),
        "partitioning": scope.partitioning.value,
        "target_dir": scope.target_dir,
        "layout": scope.layout.value,
    }
    if scope.date:
        fields["date"] = scope.date
    if scope.date_range:
        fields["date_range"] = scope.date_range
    events.info("Starting HDFS download process", **fields)


def log_pair_summary(events: LogSink, pair: PairSummary) -> None:
    """Emit the per pair completion event."""
    message = "Date processing completed" if pair.partition is not None else "Path processing completed"
    events.info(message, **pair_fields(pair), total_files=pair.total, successful=pair.succeeded)


def log_scope_summary(events: LogSink, summary: ScopeSummary) -> None:
    """
    Emit the scope completion events.

    A failed pair adds an ERROR record counting the failed pairs.
    """
    events.info(
        "Process completed",
        total=summary.total,
        succeeded=summary.succeeded,
        processed_dates=summary.processed_pairs,
        successful_dates=summary.successful_pairs,
    )
    if not summary.is_success:
        events.error(
            "Some dates failed processing",
            failed_dates=summary.processed_pairs - summary.successful_pairs,
        )

    failed = summary.total - summary.succeeded
    if failed > 0:
        logging.info("Scope %s: %d/%d objects successful (%d failed)", summary.scope, summary.succeeded, summary.total, failed)
    else:
        logging.info("Scope %s: %d objects successful", summary.scope, summary.total)


__all__ = ["pair_fields", "log_scope_start", "log_pair_summary", "log_scope_summary"]
