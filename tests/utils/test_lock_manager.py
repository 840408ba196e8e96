"""Tests for LockManager."""

import json
import multiprocessing
import time

import pytest

from hdfs_landing.utils.constants import MAX_LOCK_NAME_LENGTH
from hdfs_landing.utils.lock_manager import LockManager, sanitize_lock_name


def _hold_lock(lock_dir, name, acquired_event, release_event):
    manager = LockManager(lock_dir, poll_interval=0.01, max_wait=5.0)
    assert manager.acquire(name)
    acquired_event.set()
    release_event.wait(10)
    manager.release(name)


class TestSanitizeLockName:
    """Test lock name sanitising."""

    def test_safe_name_unchanged(self):
        """Test names made of safe characters are kept."""
        assert sanitize_lock_name("sweep-logs-myapp") == "sweep-logs-myapp"

    def test_unsafe_characters_get_digest(self):
        """Test replaced characters add a digest so names stay distinct."""
        first = sanitize_lock_name("publish-/data/a b")
        second = sanitize_lock_name("publish-/data/a_b")
        assert "/" not in first and " " not in first
        assert first != second

    def test_long_names_bounded(self):
        """Test long names are truncated with a digest."""
        name = sanitize_lock_name("publish-" + "x" * 500)
        assert len(name) <= MAX_LOCK_NAME_LENGTH

    def test_idempotent(self):
        """Test sanitising a sanitised name does not change it."""
        for raw in ("publish-/data/landing/20250401/a.log", "publish-" + "/deep" * 60):
            once = sanitize_lock_name(raw)
            assert sanitize_lock_name(once) == once

    def test_empty_name(self):
        """Test empty names are rejected."""
        with pytest.raises(ValueError):
            sanitize_lock_name("")


class TestLockManager:
    """Test acquire/release semantics."""

    def test_acquire_and_release(self, lock_manager):
        """Test a free lock is acquired and released."""
        assert lock_manager.acquire("alpha")
        assert lock_manager.is_held("alpha")
        lock_manager.release("alpha")
        assert not lock_manager.is_held("alpha")

    def test_owner_record(self, lock_manager):
        """Test the lock file carries an informational owner record."""
        lock_manager.acquire("alpha")
        owner = json.loads(lock_manager.lock_path("alpha").read_text())
        assert owner["process_id"] == "test_1"
        assert "pid" in owner and "host" in owner

    def test_release_unheld_is_noop(self, lock_manager):
        """Test releasing a missing lock does not raise."""
        lock_manager.release("never-acquired")

    def test_second_acquire_times_out(self, lock_manager):
        """Test a held lock cannot be acquired again until released."""
        assert lock_manager.acquire("alpha")
        assert not lock_manager.acquire("alpha", max_wait=0.05)
        lock_manager.release("alpha")
        assert lock_manager.acquire("alpha", max_wait=0.05)

    def test_wait_is_bounded(self, landing_dirs):
        """Test acquire returns False within the ceiling plus one poll."""
        manager = LockManager(str(landing_dirs["locks"]), poll_interval=0.05, max_wait=0.2)
        manager.acquire("busy")

        started = time.monotonic()
        assert not manager.acquire("busy")
        elapsed = time.monotonic() - started

        assert elapsed >= 0.2
        assert elapsed < 0.2 + 0.05 + 0.5

    def test_failed_acquire_leaves_holder_intact(self, lock_manager):
        """Test a timed out acquire does not disturb the holder's lock."""
        lock_manager.acquire("alpha")
        before = lock_manager.lock_path("alpha").read_text()
        lock_manager.acquire("alpha", max_wait=0.02)
        assert lock_manager.lock_path("alpha").read_text() == before

    def test_hold_context_manager(self, lock_manager):
        """Test hold releases only what it acquired."""
        with lock_manager.hold("alpha") as acquired:
            assert acquired
            with lock_manager.hold("alpha", max_wait=0.02) as nested:
                assert not nested
            assert lock_manager.is_held("alpha")
        assert not lock_manager.is_held("alpha")

    def test_hold_releases_on_error(self, lock_manager):
        """Test the lock is released when the body raises."""
        with pytest.raises(RuntimeError):
            with lock_manager.hold("alpha"):
                raise RuntimeError("boom")
        assert not lock_manager.is_held("alpha")

    def test_list_locks(self, lock_manager):
        """Test held locks are listed with their owner."""
        lock_manager.acquire("alpha")
        lock_manager.acquire("beta")
        listed = lock_manager.list_locks()
        assert [lock["name"] for lock in listed] == ["alpha", "beta"]
        assert listed[0]["owner"]["process_id"] == "test_1"
        assert listed[0]["age_seconds"] >= 0

    def test_invalid_poll_interval(self, landing_dirs):
        """Test a non-positive poll interval is rejected."""
        with pytest.raises(ValueError):
            LockManager(str(landing_dirs["locks"]), poll_interval=0)

    def test_cross_process_exclusion(self, landing_dirs):
        """Test a lock held by another process blocks this one until released."""
        ctx = multiprocessing.get_context("fork")
        acquired, release = ctx.Event(), ctx.Event()
        holder = ctx.Process(target=_hold_lock, args=(str(landing_dirs["locks"]), "shared", acquired, release))
        holder.start()
        try:
            assert acquired.wait(10)
            manager = LockManager(str(landing_dirs["locks"]), poll_interval=0.01, max_wait=0.1)
            assert not manager.acquire("shared")
        finally:
            release.set()
            holder.join(10)

        assert holder.exitcode == 0
        assert manager.acquire("shared", max_wait=1.0)
