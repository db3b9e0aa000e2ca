"""Archive naming, retention and storage."""

from .entry import ArchiveCategory, ArchiveEntry, archive_file_name
from .retention import (
    ArchiveRetentionPolicy,
    CategoryRetention,
    RetentionOutcome,
    apply_retention,
    parse_archive_listing,
)
from .store import ArchiveStore

__all__ = [
    "ArchiveCategory",
    "ArchiveEntry",
    "ArchiveRetentionPolicy",
    "ArchiveStore",
    "CategoryRetention",
    "RetentionOutcome",
    "apply_retention",
    "archive_file_name",
    "parse_archive_listing",
]
