"""
Test fixtures and fakes for hdfs-landing tests.

This module provides common fixtures, an in-memory remote store and
utilities for testing the hdfs-landing package.

Best Practices for Temporary Files in Tests:
1. Prefer pytest's tmp_path fixture (or the landing_dirs fixture built on it)
2. Never point a test at the default /var/log or /var/lock locations
"""

import io
import json
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Set

import httpx
import pytest
import respx

from hdfs_landing.models import RemoteObject, RunContext, Scope, Settings
from hdfs_landing.utils.lock_manager import LockManager
from hdfs_landing.utils.log_sink import LogSink

WEBHDFS_URL = "https://knox.example.com:9443/gateway/cdp-proxy-api/webhdfs/v1"


class FakeRemoteStore:
    """
    In-memory stand-in for WebHDFS implementing Lister, Reader and StatusProvider.

    Files are registered by full remote path. Failures can be injected per
    path: ``failing_listings`` raise on list_children, ``read_failures``
    maps a path to the number of read attempts that raise before one succeeds
    (-1 for always).
    """

    def __init__(self, files: Optional[Dict[str, bytes]] = None) -> None:
        self.files: Dict[str, bytes] = dict(files or {})
        self.failing_listings: Set[str] = set()
        self.read_failures: Dict[str, int] = {}
        self.reads: List[str] = []
        self.listings: List[str] = []
        self.closed = False

    def add(self, remote_path: str, data: bytes) -> None:
        self.files[remote_path] = data

    def list_children(self, remote_path: str) -> List[RemoteObject]:
        self.listings.append(remote_path)
        if remote_path in self.failing_listings:
            request = httpx.Request("GET", f"{WEBHDFS_URL}{remote_path}")
            raise httpx.ConnectError("connection refused", request=request)
        prefix = remote_path.rstrip("/") + "/"
        return [
            RemoteObject(path=path, size=len(data))
            for path, data in sorted(self.files.items())
            if path.startswith(prefix) and "/" not in path[len(prefix) :]
        ]

    def read(self, remote_path: str, sink: BinaryIO) -> int:
        self.reads.append(remote_path)
        remaining = self.read_failures.get(remote_path, 0)
        if remaining:
            if remaining > 0:
                self.read_failures[remote_path] = remaining - 1
            request = httpx.Request("GET", f"{WEBHDFS_URL}{remote_path}")
            raise httpx.ReadError("connection reset", request=request)
        data = self.files[remote_path]
        sink.write(data)
        return len(data)

    def get_size(self, remote_path: str) -> Optional[int]:
        data = self.files.get(remote_path)
        return len(data) if data is not None else None

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def httpx_mock():
    """Provide respx mock for HTTP mocking."""
    with respx.mock:
        yield respx


@pytest.fixture
def landing_dirs(tmp_path: Path) -> Dict[str, Path]:
    """Target, log and lock directories under a temporary root."""
    dirs = {
        "target": tmp_path / "target",
        "logs": tmp_path / "logs",
        "locks": tmp_path / "locks",
    }
    for path in dirs.values():
        path.mkdir()
    return dirs


@pytest.fixture
def lock_manager(landing_dirs) -> LockManager:
    """Lock manager with short polling suited to tests."""
    return LockManager(str(landing_dirs["locks"]), poll_interval=0.01, max_wait=1.0, process_id="test_1")


@pytest.fixture
def run_context() -> RunContext:
    """Run context with a fixed process id."""
    return RunContext(app="myapp", scope="myapp-logs", process_id="4242_1700000000000000000")


@pytest.fixture
def event_stream() -> io.StringIO:
    """Captures the stdout mirror of the event log."""
    return io.StringIO()


@pytest.fixture
def log_sink(run_context, landing_dirs, lock_manager, event_stream):
    """LogSink writing into the temporary log directory."""
    sink = LogSink(run_context, str(landing_dirs["logs"]), lock_manager, stream=event_stream, max_wait=0.5)
    yield sink
    if not sink._closed:
        sink._close_handlers()


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    """Remote store with two files for one day under /prd/logs."""
    return FakeRemoteStore(
        {
            "/prd/logs/20250401/a.log": b"alpha\n",
            "/prd/logs/20250401/b.log": b"bravo\n",
        }
    )


@pytest.fixture
def make_scope(landing_dirs) -> Callable[..., Scope]:
    """Factory for scopes landing into the temporary target directory."""

    def _make(**overrides: Any) -> Scope:
        fields: Dict[str, Any] = {
            "name": "myapp-logs",
            "app": "myapp",
            "base_paths": ["/prd/logs"],
            "partitioning": "single-date",
            "date": "20250401",
            "target_dir": str(landing_dirs["target"]),
            "layout": "flat",
        }
        fields.update(overrides)
        return Scope.model_validate(fields)

    return _make


@pytest.fixture
def settings(landing_dirs) -> Settings:
    """Settings pointing every directory at the temporary root."""
    return Settings.model_validate(
        {
            "webhdfs": {"base_url": WEBHDFS_URL, "user": "svc_user", "password": "secret"},
            "paths": {"log_dir": str(landing_dirs["logs"]), "lock_dir": str(landing_dirs["locks"])},
            "locking": {"max_wait": 1.0, "poll_interval": 0.01},
        }
    )


@pytest.fixture
def read_events() -> Callable[[Any], List[Dict[str, Any]]]:
    """Parse JSON-lines event output from a path or a StringIO."""

    def _read(source: Any) -> List[Dict[str, Any]]:
        if isinstance(source, io.StringIO):
            text = source.getvalue()
        else:
            text = Path(source).read_text(encoding="utf-8")
        return [json.loads(line) for line in text.splitlines() if line.strip()]

    return _read
