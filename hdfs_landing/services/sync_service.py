"""
Sync service for high-level landing operations.

This module wires the components of one invocation together: run context,
locks, event log, retention sweeps, staging, the WebHDFS client and the
transfer orchestrator. Teardown (staging removal, log consolidation) runs
even when the transfer raises.
"""

import logging
import os
from typing import Callable, List, Optional, TextIO

from ..api import WebHdfsClient
from ..exceptions import TargetDirectoryError
from ..models.context import RunContext
from ..models.results import ScopeSummary, SweepResult
from ..models.scope import Scope
from ..models.settings import Settings, WebHdfsSettings
from ..transfer import ObjectFetcher, Publisher, TransferOrchestrator
from ..utils.lock_manager import LockManager
from ..utils.log_sink import LogSink
from ..utils.logging_utils import log_operation_complete, log_operation_start
from ..utils.path_utils import staging_root
from ..utils.retention import RetentionSweeper, data_retention_policies, log_retention_policy

ClientFactory = Callable[[WebHdfsSettings], WebHdfsClient]


class SyncService:
    """
    High-level service for landing scopes.

    One SyncService may run several scopes; each scope gets its own run
    context, event log and staging area.
    """

    def __init__(
        self,
        settings: Settings,
        stream: Optional[TextIO] = None,
        client_factory: ClientFactory = WebHdfsClient.from_settings,
    ) -> None:
        """
        Initialize the sync service.

        Args:
            settings: Validated configuration
            stream: Mirror stream for events (defaults to stdout)
            client_factory: Builds the remote store client
        """
        self.settings = settings
        self._stream = stream
        self._client_factory = client_factory

    def _lock_manager(self, context: RunContext) -> LockManager:
        return LockManager(
            self.settings.paths.lock_dir,
            poll_interval=self.settings.locking.poll_interval,
            max_wait=self.settings.locking.max_wait,
            process_id=context.process_id,
        )

    def _event_sink(self, context: RunContext, lock_manager: LockManager) -> LogSink:
        return LogSink(
            context,
            self.settings.paths.log_dir,
            lock_manager,
            stream=self._stream,
            max_wait=self.settings.locking.max_wait,
            ownership=self.settings.ownership,
        )

    def _run_sweeps(self, scope: Scope, lock_manager: LockManager, events: LogSink) -> List[SweepResult]:
        sweeper = RetentionSweeper(lock_manager, events, max_wait=self.settings.locking.max_wait)
        policies = [log_retention_policy(scope.app, self.settings.paths.log_dir, self.settings.retention.log_days)]
        if self.settings.retention.data_days is not None:
            policies.extend(data_retention_policies(scope, self.settings.retention.data_days))
        return [sweeper.sweep(policy) for policy in policies]

    @staticmethod
    def _prepare_target_dir(scope: Scope, events: LogSink) -> None:
        try:
            os.makedirs(scope.target_dir, exist_ok=True)
        except OSError as e:
            events.error("Cannot create target directory", directory=scope.target_dir, error=str(e))
            raise TargetDirectoryError(scope.target_dir, f"cannot be created: {e}") from e
        if not os.access(scope.target_dir, os.W_OK):
            events.error("Target directory is not writable", directory=scope.target_dir)
            raise TargetDirectoryError(scope.target_dir, "is not writable")

    def sync(self, scope: Scope, retries: Optional[int] = None) -> ScopeSummary:
        """
        Land every object of a scope.

        Args:
            scope: Scope to synchronize
            retries: Overrides the configured per-object retries

        Returns:
            ScopeSummary of the run

        Raises:
            ConfigurationError: If no WebHDFS endpoint is configured
            TargetDirectoryError: If the target directory is unusable
        """
        webhdfs = self.settings.require_webhdfs()
        context = RunContext(app=scope.app, scope=scope.name)
        log_operation_start(f"sync of scope {scope.label}", process_id=context.process_id)

        lock_manager = self._lock_manager(context)
        events = self._event_sink(context, lock_manager)
        client: Optional[WebHdfsClient] = None
        fetcher: Optional[ObjectFetcher] = None
        try:
            self._run_sweeps(scope, lock_manager, events)
            self._prepare_target_dir(scope, events)

            client = self._client_factory(webhdfs)
            fetcher = ObjectFetcher(client, str(staging_root(scope, self.settings.paths.staging_dir)), context.process_id)
            orchestrator = TransferOrchestrator(
                client,
                fetcher,
                Publisher(lock_manager, self.settings.ownership, max_wait=self.settings.locking.max_wait),
                events,
                status=client,
                retries=self.settings.transfer.retries if retries is None else retries,
                retry_backoff=self.settings.transfer.retry_backoff,
            )
            summary = orchestrator.run(scope)
        finally:
            if fetcher is not None:
                fetcher.cleanup()
            if client is not None:
                client.close()
            events.flush_to_consolidated()

        log_operation_complete(f"sync of scope {scope.label}", exit_status=summary.exit_status)
        return summary

    def sweep(self, scope: Scope) -> List[SweepResult]:
        """
        Run only the retention sweeps of a scope.

        Args:
            scope: Scope whose log and data retention is applied

        Returns:
            One SweepResult per policy
        """
        context = RunContext(app=scope.app, scope=scope.name)
        lock_manager = self._lock_manager(context)
        events = self._event_sink(context, lock_manager)
        try:
            results = self._run_sweeps(scope, lock_manager, events)
        finally:
            events.flush_to_consolidated()

        for result in results:
            if result.skipped:
                logging.warning("Sweep %s skipped: lock unavailable", result.policy)
            else:
                logging.info("Sweep %s removed %d entries", result.policy, result.removed_count)
        return results


__all__ = ["SyncService"]
