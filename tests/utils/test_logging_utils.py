"""Tests for logging utility helpers."""

import logging

import pytest

from hdfs_landing.utils.logging_utils import (
    format_count_with_unit,
    format_file_size,
    log_operation_complete,
    log_operation_start,
)


@pytest.mark.parametrize(
    "size,expected",
    [(None, "unknown"), (0, "0 B"), (500, "500 B"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5.0 MB")],
)
def test_format_file_size(size, expected):
    """Test human-readable sizes."""
    assert format_file_size(size) == expected


def test_format_count_with_unit():
    """Test pluralization."""
    assert format_count_with_unit(1, "file") == "1 file"
    assert format_count_with_unit(3, "file") == "3 files"
    assert format_count_with_unit(1, "expired entries", singular="expired entry") == "1 expired entry"


def test_operation_logging(caplog):
    """Test start and completion messages."""
    with caplog.at_level(logging.INFO):
        log_operation_start("sync of scope s", process_id="1_2")
        log_operation_complete("sync of scope s")
    assert "Starting sync of scope s (process_id=1_2)" in caplog.text
    assert "Completed sync of scope s" in caplog.text
