"""Archive file naming.

Archives are named ``backup_<serverId>_<YYYY-MM-DD_HH-MM-SS>_<passed|failed>.zip``.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from ..utils import (
    ARCHIVE_EXTENSION,
    ARCHIVE_PREFIX,
    ARCHIVE_TIMESTAMP_PATTERN,
    format_archive_timestamp,
    parse_archive_timestamp,
)


class ArchiveCategory(str, Enum):
    """Outcome of the run that produced an archive."""

    PASSED = "passed"
    FAILED = "failed"

    @classmethod
    def from_passed(cls, passed: bool) -> "ArchiveCategory":
        return cls.PASSED if passed else cls.FAILED


ARCHIVE_NAME_PATTERN = re.compile(
    rf"^{ARCHIVE_PREFIX}_(?P<server_id>.+)_(?P<timestamp>{ARCHIVE_TIMESTAMP_PATTERN})"
    rf"_(?P<category>passed|failed){re.escape(ARCHIVE_EXTENSION)}$"
)


@dataclass(frozen=True)
class ArchiveEntry:
    """An archive file found in the archive directory."""

    file_name: str
    """File name without directory"""

    category: ArchiveCategory
    """Passed or failed run"""

    server_id: str
    """Server the archive was taken from"""

    timestamp: datetime
    """Creation time parsed from the file name"""

    sort_key: tuple[datetime, str] = field(init=False, repr=False, compare=False)
    """Chronological ordering key, ties broken by file name"""

    def __post_init__(self) -> None:
        object.__setattr__(self, "sort_key", (self.timestamp, self.file_name))

    @classmethod
    def from_file_name(cls, file_name: str) -> Optional["ArchiveEntry"]:
        """Create ArchiveEntry from a file name.

        Args:
            file_name: Name as found in the archive directory

        Returns:
            ArchiveEntry, or None if the name is not a recognized archive name
        """
        match = ARCHIVE_NAME_PATTERN.match(file_name)
        if match is None:
            return None

        timestamp = parse_archive_timestamp(match.group("timestamp"))
        if timestamp is None:
            return None

        return cls(
            file_name=file_name,
            category=ArchiveCategory(match.group("category")),
            server_id=match.group("server_id"),
            timestamp=timestamp,
        )


def archive_file_name(server_id: str, when: datetime, passed: bool) -> str:
    """Build the file name for a new archive.

    Examples:
        >>> archive_file_name("example.org", datetime(2019, 12, 27, 22, 58, 2), True)
        'backup_example.org_2019-12-27_22-58-02_passed.zip'
    """
    category = ArchiveCategory.from_passed(passed)
    return (
        f"{ARCHIVE_PREFIX}_{server_id}_{format_archive_timestamp(when)}"
        f"_{category.value}{ARCHIVE_EXTENSION}"
    )
