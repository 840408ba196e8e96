"""Tests for error handling utilities."""

import logging

import httpx
import pytest

from hdfs_landing.utils.error_handling import (
    describe_http_error,
    handle_generic_error,
    handle_http_error,
    http_status_of,
    with_error_handling,
)


def status_error(status_code):
    request = httpx.Request("GET", "https://knox.example.com/webhdfs/v1/prd?op=LISTSTATUS")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"{status_code} error", request=request, response=response)


class TestDescribeHttpError:
    """Test HTTP error descriptions."""

    @pytest.mark.parametrize(
        "status,fragment",
        [(401, "Authentication failed"), (403, "Access denied"), (404, "Not found"), (503, "Server error (503)"), (418, "HTTP error (418)")],
    )
    def test_status_errors(self, status, fragment):
        """Test status-specific messages."""
        assert fragment in describe_http_error(status_error(status))

    def test_transport_error(self):
        """Test errors without a response."""
        error = httpx.ConnectError("refused", request=httpx.Request("GET", "https://x"))
        assert http_status_of(error) == 0
        assert describe_http_error(error) == "ConnectError: refused"


class TestHandlers:
    """Test the logging handlers."""

    def test_handle_http_error(self, caplog):
        """Test HTTP errors are logged with their description."""
        with caplog.at_level(logging.ERROR):
            handle_http_error(status_error(401), "listing /prd/logs", log_traceback=False)
        assert "Authentication failed (401)" in caplog.text
        assert "listing /prd/logs" in caplog.text

    def test_handle_generic_error(self, caplog):
        """Test generic errors are logged."""
        with caplog.at_level(logging.ERROR):
            handle_generic_error(RuntimeError("boom"), "sync", log_traceback=False)
        assert "Unexpected error during sync: boom" in caplog.text

    def test_with_error_handling(self, caplog):
        """Test the decorator turns OSError into exit 1."""

        @with_error_handling("list locks")
        def failing():
            raise PermissionError("denied")

        with pytest.raises(SystemExit) as exc_info:
            failing()
        assert exc_info.value.code == 1
        assert "list locks" in caplog.text

    def test_with_error_handling_passes_result(self):
        """Test the decorator is transparent on success."""

        @with_error_handling("noop")
        def ok():
            return 42

        assert ok() == 42
