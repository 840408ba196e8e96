"""Tests for ObjectFetcher."""

import pytest

from hdfs_landing.exceptions import FetchError
from hdfs_landing.transfer import ObjectFetcher


@pytest.fixture
def fetcher(remote_store, tmp_path):
    return ObjectFetcher(remote_store, str(tmp_path / "staging"), "4242_1")


class TestObjectFetcher:
    """Test staging and fetching."""

    def test_staging_path_is_private(self, fetcher, tmp_path):
        """Test staging paths live in the per-process directory."""
        assert fetcher.staging_path("a.log") == str(tmp_path / "staging" / "4242_1" / "a.log")
        assert fetcher.staging_path("../x/a.log").endswith("/4242_1/a.log")

    def test_fetch(self, fetcher):
        """Test a successful fetch writes the whole object."""
        staging = fetcher.staging_path("a.log")
        assert fetcher.fetch("/prd/logs/20250401/a.log", staging) == 6
        with open(staging, "rb") as f:
            assert f.read() == b"alpha\n"

    def test_transport_failure_removes_partial(self, fetcher, remote_store):
        """Test a failed transfer leaves no staging file."""
        remote_store.read_failures["/prd/logs/20250401/a.log"] = -1
        staging = fetcher.staging_path("a.log")

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch("/prd/logs/20250401/a.log", staging)

        assert exc_info.value.remote_path == "/prd/logs/20250401/a.log"
        assert "ReadError" in exc_info.value.reason
        assert not fetcher.staging_dir.joinpath("a.log").exists()

    def test_empty_object_is_failure(self, fetcher, remote_store):
        """Test an empty download is treated as failed."""
        remote_store.add("/prd/logs/20250401/empty.log", b"")
        staging = fetcher.staging_path("empty.log")

        with pytest.raises(FetchError, match="empty"):
            fetcher.fetch("/prd/logs/20250401/empty.log", staging)
        assert not fetcher.staging_dir.joinpath("empty.log").exists()

    def test_local_write_failure(self, fetcher, mocker):
        """Test local I/O errors become FetchError."""
        mocker.patch.object(fetcher._reader, "read", side_effect=OSError(28, "No space left on device"))
        with pytest.raises(FetchError, match="No space left"):
            fetcher.fetch("/prd/logs/20250401/a.log", fetcher.staging_path("a.log"))

    def test_unusable_staging_area(self, remote_store, tmp_path):
        """Test a staging area that cannot be created fails the fetch."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        fetcher = ObjectFetcher(remote_store, str(blocker / "staging"), "4242_1")

        with pytest.raises(FetchError):
            fetcher.fetch("/prd/logs/20250401/a.log", fetcher.staging_path("a.log"))
        assert remote_store.reads == []

    def test_cleanup(self, fetcher, tmp_path):
        """Test cleanup removes this process's staging area."""
        fetcher.fetch("/prd/logs/20250401/a.log", fetcher.staging_path("a.log"))
        fetcher.cleanup()
        assert not (tmp_path / "staging" / "4242_1").exists()
        assert not (tmp_path / "staging").exists()

    def test_cleanup_keeps_other_processes(self, fetcher, tmp_path):
        """Test cleanup leaves other processes' staging areas alone."""
        other = tmp_path / "staging" / "9999_1"
        other.mkdir(parents=True)
        fetcher.fetch("/prd/logs/20250401/a.log", fetcher.staging_path("a.log"))
        fetcher.cleanup()
        assert other.exists()

    def test_cleanup_without_fetch(self, fetcher):
        """Test cleanup is safe when nothing was staged."""
        fetcher.cleanup()
