"""Retention policy for archive files.

The newest ``keep_passed`` archives of passed runs and the newest
``keep_failed`` archives of failed runs are kept; older ones are deleted.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .entry import ArchiveCategory, ArchiveEntry

logger = logging.getLogger(__name__)


@dataclass
class CategoryRetention:
    """Kept and deleted archives of one category, newest first."""

    kept: list[ArchiveEntry] = field(default_factory=list)
    deleted: list[ArchiveEntry] = field(default_factory=list)


@dataclass
class RetentionOutcome:
    """Result of applying the retention policy to an archive listing."""

    passed: CategoryRetention = field(default_factory=CategoryRetention)
    """Archives of passed runs"""

    failed: CategoryRetention = field(default_factory=CategoryRetention)
    """Archives of failed runs"""

    skipped: list[str] = field(default_factory=list)
    """Names not recognized as archives; never pruned"""

    @property
    def kept(self) -> list[ArchiveEntry]:
        """Kept archives of both categories, sorted by file name."""
        return sorted(
            self.passed.kept + self.failed.kept, key=lambda entry: entry.file_name
        )

    @property
    def deleted(self) -> list[ArchiveEntry]:
        """Deleted archives of both categories, sorted by file name."""
        return sorted(
            self.passed.deleted + self.failed.deleted,
            key=lambda entry: entry.file_name,
        )

    def for_category(self, category: ArchiveCategory) -> CategoryRetention:
        if category == ArchiveCategory.PASSED:
            return self.passed
        return self.failed


def parse_archive_listing(
    names: Iterable[str],
) -> tuple[list[ArchiveEntry], list[str]]:
    """Split a directory listing into archive entries and unrecognized names.

    Args:
        names: File names found in the archive directory

    Returns:
        Tuple of (entries, skipped_names)
    """
    entries: list[ArchiveEntry] = []
    skipped: list[str] = []

    for name in names:
        entry = ArchiveEntry.from_file_name(name)
        if entry is None:
            logger.warning(f"Ignoring unrecognized file in archive directory: {name}")
            skipped.append(name)
        else:
            entries.append(entry)

    return entries, sorted(skipped)


class ArchiveRetentionPolicy:
    """Partitions archives into kept and deleted by retention counts."""

    def __init__(self, keep_passed: int, keep_failed: int):
        """Initialize retention policy.

        Args:
            keep_passed: Number of newest passed archives to keep
            keep_failed: Number of newest failed archives to keep
        """
        self.keep_passed = keep_passed
        self.keep_failed = keep_failed

    def keep_count(self, category: ArchiveCategory) -> int:
        if category == ArchiveCategory.PASSED:
            return self.keep_passed
        return self.keep_failed

    def apply(self, entries: Iterable[ArchiveEntry]) -> RetentionOutcome:
        """Apply the policy to parsed archive entries.

        Args:
            entries: Archive entries in any order

        Returns:
            RetentionOutcome with per-category kept/deleted lists
        """
        outcome = RetentionOutcome()
        newest_first = sorted(entries, key=lambda entry: entry.sort_key, reverse=True)

        for category in ArchiveCategory:
            in_category = [e for e in newest_first if e.category == category]
            keep = max(self.keep_count(category), 0)
            retention = outcome.for_category(category)
            retention.kept = in_category[:keep]
            retention.deleted = in_category[keep:]
            logger.debug(
                "%s archives: keeping %d, deleting %d",
                category.value,
                len(retention.kept),
                len(retention.deleted),
            )

        return outcome

    def apply_to_names(self, names: Iterable[str]) -> RetentionOutcome:
        """Apply the policy to a raw directory listing.

        Unrecognized names are reported in ``RetentionOutcome.skipped`` and
        are neither kept nor deleted. This includes names that end in a
        ``_passed.zip`` / ``_failed.zip`` suffix but carry a malformed
        timestamp (e.g. ``backup_x_2019-12-27_passed.zip``): without a
        parsed date they cannot be ordered, so they are never pruned.
        """
        entries, skipped = parse_archive_listing(names)
        outcome = self.apply(entries)
        outcome.skipped = skipped
        return outcome


def apply_retention(
    entries: Iterable[ArchiveEntry], keep_passed: int, keep_failed: int
) -> RetentionOutcome:
    """Apply an ArchiveRetentionPolicy built from the given counts."""
    return ArchiveRetentionPolicy(keep_passed, keep_failed).apply(entries)
