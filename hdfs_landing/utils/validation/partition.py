"""
Partition key validation.

Partition keys name one calendar day as YYYYMMDD. A date range is written
as two keys joined by a dash, both ends inclusive.
"""

import re
from datetime import datetime, timedelta
from typing import List, Tuple

from ..constants import DATE_RANGE_SEPARATOR, PARTITION_KEY_FORMAT, PARTITION_KEY_PATTERN

_PARTITION_KEY_RE = re.compile(PARTITION_KEY_PATTERN)
_DATE_RANGE_RE = re.compile(f"({PARTITION_KEY_PATTERN}){re.escape(DATE_RANGE_SEPARATOR)}({PARTITION_KEY_PATTERN})")


def validate_partition_key(key: str) -> str:
    """
    Validate that a string is a real calendar day in YYYYMMDD form.

    Args:
        key: Candidate partition key

    Returns:
        The key unchanged

    Raises:
        ValueError: If the key has the wrong shape or is not a valid date

    Example:
        >>> validate_partition_key("20250401")
        '20250401'
    """
    if not _PARTITION_KEY_RE.fullmatch(key):
        raise ValueError(f"Invalid date format '{key}'. Expected YYYYMMDD")
    try:
        datetime.strptime(key, PARTITION_KEY_FORMAT)
    except ValueError as e:
        raise ValueError(f"Invalid date '{key}': {e}") from e
    return key


def parse_date_range(date_range: str) -> Tuple[str, str]:
    """
    Split a YYYYMMDD-YYYYMMDD range into its validated start and end keys.

    Args:
        date_range: Range string

    Returns:
        Tuple of (start_key, end_key)

    Raises:
        ValueError: If the format is wrong or start is after end
    """
    match = _DATE_RANGE_RE.fullmatch(date_range)
    if not match:
        raise ValueError(f"Invalid date range format '{date_range}'. Expected YYYYMMDD-YYYYMMDD")

    start, end = match.group(1), match.group(2)
    validate_partition_key(start)
    validate_partition_key(end)

    if start > end:
        raise ValueError(f"Start date {start} must be before or equal to end date {end}")

    return start, end


def generate_date_list(start: str, end: str) -> List[str]:
    """
    List every partition key from start to end, inclusive.

    Example:
        >>> generate_date_list("20250130", "20250202")
        ['20250130', '20250131', '20250201', '20250202']
    """
    current = datetime.strptime(start, PARTITION_KEY_FORMAT)
    last = datetime.strptime(end, PARTITION_KEY_FORMAT)

    dates = []
    while current <= last:
        dates.append(current.strftime(PARTITION_KEY_FORMAT))
        current += timedelta(days=1)
    return dates


__all__ = ["validate_partition_key", "parse_date_range", "generate_date_list"]
