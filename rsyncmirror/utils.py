"""Utility functions for rsync-mirror."""

import re
from datetime import datetime, timezone
from typing import Optional

# =============================================================================
# Constants for archive naming
# =============================================================================

# Prefix and extension of every archive created by a run
ARCHIVE_PREFIX: str = "backup"
ARCHIVE_EXTENSION: str = ".zip"

# Filename-safe timestamp embedded in archive names (e.g. 2019-12-27_22-58-02)
ARCHIVE_TIMESTAMP_FORMAT: str = "%Y-%m-%d_%H-%M-%S"

ARCHIVE_TIMESTAMP_PATTERN: str = r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}"


# =============================================================================
# Timestamp utilities
# =============================================================================


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_archive_timestamp(when: datetime) -> str:
    """Format a datetime for use inside an archive file name.

    Aware datetimes are converted to UTC first. Sub-second precision is
    dropped and colons are replaced so the result is filename-safe.

    Args:
        when: Point in time to format

    Returns:
        Timestamp string such as "2019-12-27_22-58-02"

    Examples:
        >>> format_archive_timestamp(datetime(2019, 12, 27, 22, 58, 2, 786000))
        '2019-12-27_22-58-02'
    """
    if when.tzinfo is not None:
        when = when.astimezone(timezone.utc)
    return when.strftime(ARCHIVE_TIMESTAMP_FORMAT)


def parse_archive_timestamp(value: str) -> Optional[datetime]:
    """Parse a timestamp produced by format_archive_timestamp.

    Args:
        value: Timestamp string from an archive file name

    Returns:
        Naive datetime (UTC wall clock) or None if the value is malformed

    Examples:
        >>> parse_archive_timestamp("2019-12-27_22-58-02")
        datetime.datetime(2019, 12, 27, 22, 58, 2)
        >>> parse_archive_timestamp("2019-13-27_22-58-02") is None
        True
    """
    if not re.fullmatch(ARCHIVE_TIMESTAMP_PATTERN, value):
        return None
    try:
        return datetime.strptime(value, ARCHIVE_TIMESTAMP_FORMAT)
    except ValueError:
        return None


def format_iso_timestamp(when: datetime) -> str:
    """Format a datetime as ISO 8601 with second precision."""
    return when.isoformat(timespec="seconds")


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
