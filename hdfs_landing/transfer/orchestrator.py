"""
Transfer orchestration for one scope.

For every base path and partition key the remote directory is listed and
each object is driven through the TransferUnit lifecycle:

    LISTED -> FETCHING -> FETCHED -> PUBLISHING -> PUBLISHED
    LISTED -> SKIPPED                    (destination already present)
    PUBLISHING -> SKIPPED                (another process published first)
    any non-terminal -> FAILED

Per-object failures are recorded and never abort the run.
"""

import logging
import os
import time
from typing import Any, Callable, Dict, Optional

import httpx

from ..exceptions import FetchError, PublishError
from ..models.results import PairSummary, ScopeSummary
from ..models.scope import Scope
from ..models.transfer import PublishOutcome, RemoteObject, TransferState, TransferUnit
from ..protocols import Lister, StatusProvider
from ..utils.constants import DEFAULT_RETRIES, DEFAULT_RETRY_BACKOFF
from ..utils.error_handling import describe_http_error, handle_http_error
from ..utils.log_sink import LogSink
from ..utils.logging_utils import format_file_size
from ..utils.path_utils import destination_path, remote_partition_path
from .fetch import ObjectFetcher
from .publish import Publisher
from .reporting import log_pair_summary, log_scope_start, log_scope_summary, pair_fields


class TransferOrchestrator:
    """Drives listing, fetching and publishing for one scope."""

    def __init__(
        self,
        lister: Lister,
        fetcher: ObjectFetcher,
        publisher: Publisher,
        events: LogSink,
        status: Optional[StatusProvider] = None,
        retries: int = DEFAULT_RETRIES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            lister: Lists remote directories
            fetcher: Streams objects into staging
            publisher: Moves staged files into place
            events: Event log
            status: Optional size lookup used when the listing carries no size
            retries: Extra fetch attempts per object after a failure
            retry_backoff: Base delay in seconds, doubled after every attempt
            sleep: Sleep function used between retries
        """
        if retries < 0:
            raise ValueError("retries must not be negative")
        self._lister = lister
        self._fetcher = fetcher
        self._publisher = publisher
        self._events = events
        self._status = status
        self._retries = retries
        self._retry_backoff = retry_backoff
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Scope and pair level
    # ------------------------------------------------------------------

    def run(self, scope: Scope) -> ScopeSummary:
        """
        Synchronize one scope.

        Partition keys are processed in order, and for each key every base
        path in configuration order.

        Args:
            scope: Scope to synchronize

        Returns:
            ScopeSummary with one PairSummary per base path / partition pair
        """
        summary = ScopeSummary(scope=scope.label)
        log_scope_start(self._events, scope)

        for partition in scope.partition_keys():
            for base_path in scope.base_paths:
                summary.pairs.append(self._process_pair(scope, base_path, partition))

        log_scope_summary(self._events, summary)
        return summary

    def _process_pair(self, scope: Scope, base_path: str, partition: Optional[str]) -> PairSummary:
        pair = PairSummary(
            base_path=base_path,
            partition=partition,
            remote_path=remote_partition_path(base_path, partition),
        )
        fields = pair_fields(pair)
        self._events.info("Processing date" if partition is not None else "Processing path", **fields)

        try:
            children = self._lister.list_children(pair.remote_path)
        except httpx.HTTPError as e:
            handle_http_error(e, f"listing {pair.remote_path}", log_traceback=False)
            self._events.error("Listing failed", **fields, error=describe_http_error(e))
            pair.listing_failed = True
            log_pair_summary(self._events, pair)
            return pair
        except ValueError as e:
            logging.error("Invalid listing response for %s: %s", pair.remote_path, e)
            self._events.error("Listing failed", **fields, error=str(e))
            pair.listing_failed = True
            log_pair_summary(self._events, pair)
            return pair

        if not children:
            self._events.warning("No files found for date" if partition is not None else "No files found", **fields)
            return pair

        for remote in children:
            unit = self._build_unit(scope, base_path, partition, remote)
            self._process_unit(unit)
            pair.record(unit.state)

        log_pair_summary(self._events, pair)
        return pair

    # ------------------------------------------------------------------
    # Object level
    # ------------------------------------------------------------------

    def _build_unit(self, scope: Scope, base_path: str, partition: Optional[str], remote: RemoteObject) -> TransferUnit:
        return TransferUnit(
            remote=remote,
            partition=partition,
            staging_path=self._fetcher.staging_path(remote.name),
            destination_path=str(destination_path(scope, base_path, partition, remote.name)),
        )

    @staticmethod
    def _unit_fields(unit: TransferUnit) -> Dict[str, Any]:
        fields: Dict[str, Any] = {"file": unit.file_name}
        if unit.partition is not None:
            fields["date"] = unit.partition
        fields["path"] = unit.remote.path
        return fields

    def _remote_size(self, remote: RemoteObject) -> Optional[int]:
        if remote.size is not None:
            return remote.size
        if self._status is None:
            return None
        try:
            return self._status.get_size(remote.path)
        except (httpx.HTTPError, ValueError) as e:
            logging.debug("Could not get size of %s: %s", remote.path, e)
            return None

    def _fetch_with_retry(self, unit: TransferUnit) -> None:
        fields = self._unit_fields(unit)
        attempt = 0
        while True:
            try:
                self._fetcher.fetch(unit.remote.path, unit.staging_path)
                return
            except FetchError as e:
                if attempt >= self._retries:
                    raise
                delay = self._retry_backoff * (2**attempt)
                attempt += 1
                self._events.warning(
                    "Retrying download",
                    **fields,
                    attempt=attempt,
                    max_retries=self._retries,
                    delay_seconds=delay,
                    error=e.reason,
                )
                self._sleep(delay)

    def _process_unit(self, unit: TransferUnit) -> None:
        fields = self._unit_fields(unit)

        if os.path.exists(unit.destination_path):
            unit.advance(TransferState.SKIPPED)
            self._events.info("File already exists", **fields, status="skipped")
            return

        size = format_file_size(self._remote_size(unit.remote))
        self._events.info("Starting download", **fields, size=size)
        started = time.monotonic()

        try:
            unit.advance(TransferState.FETCHING)
            try:
                self._fetch_with_retry(unit)
            except FetchError as e:
                unit.advance(TransferState.FAILED, e.reason)
                self._events.error("Download failed", **fields, error=e.reason)
                return
            unit.advance(TransferState.FETCHED)

            unit.advance(TransferState.PUBLISHING)
            try:
                outcome = self._publisher.publish(unit.staging_path, unit.destination_path)
            except PublishError as e:
                unit.advance(TransferState.FAILED, e.reason)
                self._events.error("Publish failed", **fields, destination=unit.destination_path, error=e.reason)
                return

            if outcome == PublishOutcome.ALREADY_PRESENT:
                unit.advance(TransferState.SKIPPED)
                self._events.info("File already exists", **fields, status="skipped")
                return

            unit.advance(TransferState.PUBLISHED)
            self._events.info(
                "Download completed",
                **fields,
                destination=unit.destination_path,
                duration_seconds=round(time.monotonic() - started, 3),
            )
        finally:
            ObjectFetcher.discard(unit.staging_path)


__all__ = ["TransferOrchestrator"]
