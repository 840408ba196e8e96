"""Tests for LogSink."""

import io
import json
import logging
import multiprocessing

import pytest

from hdfs_landing.models import OwnershipSettings, RunContext
from hdfs_landing.utils.lock_manager import LockManager
from hdfs_landing.utils.log_sink import LogSink


def _write_events(log_dir, lock_dir, index, count):
    lock_manager = LockManager(lock_dir, poll_interval=0.01, max_wait=30.0)
    context = RunContext(app="myapp", process_id=f"{index}_{index}")
    sink = LogSink(context, log_dir, lock_manager, stream=io.StringIO())
    for sequence in range(count):
        sink.info("Tick", writer=index, sequence=sequence, padding="x" * 200)
    assert sink.flush_to_consolidated()


class TestLogSinkRecords:
    """Test the record format."""

    def test_record_fields(self, log_sink, event_stream, read_events):
        """Test core fields come first, in order, followed by event fields."""
        log_sink.info("Download completed", file="a.log", duration_seconds=1.5)

        record = read_events(event_stream)[0]
        assert list(record)[:6] == ["timestamp", "level", "app", "scope", "process_id", "message"]
        assert record["level"] == "INFO"
        assert record["app"] == "myapp"
        assert record["scope"] == "myapp-logs"
        assert record["process_id"] == "4242_1700000000000000000"
        assert record["message"] == "Download completed"
        assert record["file"] == "a.log"
        assert record["duration_seconds"] == 1.5
        assert record["timestamp"].endswith("Z")

    def test_warning_level_name(self, log_sink, event_stream, read_events):
        """Test warnings are written as WARN."""
        log_sink.warning("No files found for date", date="20250401")
        assert read_events(event_stream)[0]["level"] == "WARN"

    def test_emit_by_level_name(self, log_sink, event_stream, read_events):
        """Test emit accepts level names."""
        log_sink.emit("ERROR", "Download failed", {"file": "a.log"})
        log_sink.emit(logging.DEBUG, "Detail")
        levels = [record["level"] for record in read_events(event_stream)]
        assert levels == ["ERROR", "DEBUG"]

    def test_unknown_level(self, log_sink):
        """Test unknown level names are rejected."""
        with pytest.raises(ValueError):
            log_sink.emit("LOUD", "x")

    def test_fields_never_override_core(self, log_sink, event_stream, read_events):
        """Test event fields cannot replace core fields."""
        log_sink.emit("INFO", "Real message", {"message": "fake", "app": "other", "level": "DEBUG"})
        record = read_events(event_stream)[0]
        assert record["message"] == "Real message"
        assert record["app"] == "myapp"
        assert record["level"] == "INFO"

    def test_file_and_stream_match(self, log_sink, event_stream, read_events):
        """Test the process-local file and the stream carry the same records."""
        log_sink.info("One")
        log_sink.error("Two")
        assert read_events(log_sink.local_path) == read_events(event_stream)

    def test_not_propagated_to_root(self, log_sink, caplog):
        """Test events do not leak into the diagnostic log."""
        with caplog.at_level(logging.DEBUG):
            log_sink.info("Private")
        assert "Private" not in caplog.text

    def test_scope_omitted_when_unset(self, landing_dirs, lock_manager, read_events):
        """Test records carry no scope field without a scope."""
        stream = io.StringIO()
        sink = LogSink(RunContext(app="myapp", process_id="1_1"), str(landing_dirs["logs"]), lock_manager, stream=stream)
        sink.info("Hello")
        sink.flush_to_consolidated()
        assert "scope" not in read_events(stream)[0]


class TestConsolidation:
    """Test flush_to_consolidated."""

    def test_flush_appends_and_removes_local(self, log_sink, landing_dirs, read_events):
        """Test records move to the consolidated file."""
        log_sink.info("One")
        log_sink.info("Two")

        assert log_sink.flush_to_consolidated()

        consolidated = landing_dirs["logs"] / "myapp.log"
        assert [r["message"] for r in read_events(consolidated)] == ["One", "Two"]
        assert not log_sink.local_path.exists()

    def test_flush_appends_after_existing_content(self, log_sink, landing_dirs, read_events):
        """Test earlier consolidated records are preserved."""
        consolidated = landing_dirs["logs"] / "myapp.log"
        consolidated.write_text(json.dumps({"message": "Earlier"}) + "\n")
        log_sink.info("Later")
        log_sink.flush_to_consolidated()
        assert [r["message"] for r in read_events(consolidated)] == ["Earlier", "Later"]

    def test_flush_idempotent(self, log_sink):
        """Test a second flush does nothing."""
        log_sink.info("One")
        assert log_sink.flush_to_consolidated()
        assert not log_sink.flush_to_consolidated()

    def test_emit_after_flush_raises(self, log_sink):
        """Test the sink is closed after flushing."""
        log_sink.flush_to_consolidated()
        with pytest.raises(RuntimeError):
            log_sink.info("Too late")

    def test_lock_timeout_keeps_local_file(self, log_sink, lock_manager, landing_dirs, read_events):
        """Test a busy consolidation lock keeps every record in the local file."""
        log_sink.info("Kept")
        lock_manager.acquire(log_sink.lock_name)

        assert not log_sink.flush_to_consolidated()

        assert not (landing_dirs["logs"] / "myapp.log").exists()
        records = read_events(log_sink.local_path)
        assert [r["message"] for r in records] == ["Kept", "Consolidated log is locked, keeping process log"]
        assert records[1]["level"] == "WARN"

    def test_lock_released_after_flush(self, log_sink, lock_manager):
        """Test the consolidation lock is released."""
        log_sink.info("One")
        log_sink.flush_to_consolidated()
        assert not lock_manager.is_held(log_sink.lock_name)

    def test_ownership_failure_is_warning(self, run_context, landing_dirs, lock_manager, mocker, caplog):
        """Test an ownership failure does not lose the consolidation."""
        mocker.patch("hdfs_landing.utils.log_sink.apply_ownership", side_effect=PermissionError("not permitted"))
        sink = LogSink(
            run_context,
            str(landing_dirs["logs"]),
            lock_manager,
            stream=io.StringIO(),
            ownership=OwnershipSettings(user="splunk", group="splunk"),
        )
        sink.info("One")
        with caplog.at_level(logging.WARNING):
            assert sink.flush_to_consolidated()
        assert "Could not set ownership" in caplog.text

    def test_concurrent_writers_lose_nothing(self, landing_dirs, read_events):
        """Test K processes writing M records each produce K*M intact lines."""
        writers, per_writer = 4, 50
        ctx = multiprocessing.get_context("fork")
        processes = [
            ctx.Process(
                target=_write_events,
                args=(str(landing_dirs["logs"]), str(landing_dirs["locks"]), index, per_writer),
            )
            for index in range(writers)
        ]
        for process in processes:
            process.start()
        for process in processes:
            process.join(60)
            assert process.exitcode == 0

        records = read_events(landing_dirs["logs"] / "myapp.log")
        assert len(records) == writers * per_writer
        seen = {(r["writer"], r["sequence"]) for r in records}
        assert seen == {(w, s) for w in range(writers) for s in range(per_writer)}
        assert list(landing_dirs["logs"].glob("myapp_*.log")) == []
