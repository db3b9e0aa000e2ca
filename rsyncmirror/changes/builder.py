"""Fold rsync output lines into a change set."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from ..exceptions import ChangeParseError
from .parser import (
    ChangeKind,
    ChangeLineParser,
    DeletedRecord,
    ParseFailure,
    TransferredRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class ChangeSet:
    """Files changed by one rsync run, in the order rsync reported them."""

    deleted: list[str] = field(default_factory=list)
    """Deleted entries (files and directories)"""

    added: list[str] = field(default_factory=list)
    """Newly transferred regular files"""

    modified: list[str] = field(default_factory=list)
    """Re-transferred regular files"""

    @property
    def total(self) -> int:
        """Total number of classified entries."""
        return len(self.deleted) + len(self.added) + len(self.modified)

    def to_dict(self) -> dict:
        """Convert change set to dictionary for JSON serialization."""
        return {
            "deleted": list(self.deleted),
            "added": list(self.added),
            "modified": list(self.modified),
        }


def split_output(output: str) -> list[str]:
    """Split rsync stdout into lines.

    rsync terminates every line with a newline, so splitting yields one
    trailing empty segment. Exactly that one segment is removed; any other
    empty line is kept and will fail classification.

    Examples:
        >>> split_output("a\\nb\\n")
        ['a', 'b']
        >>> split_output("")
        []
    """
    lines = output.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class ChangeSetBuilder:
    """Builds a ChangeSet from rsync output lines, failing fast."""

    def __init__(self, parser: Optional[ChangeLineParser] = None):
        """Initialize change set builder.

        Args:
            parser: Line parser to use (a default parser if omitted)
        """
        self.parser = parser or ChangeLineParser()

    def build(self, lines: Iterable[str]) -> ChangeSet:
        """Classify lines in order.

        Args:
            lines: rsync output lines without line terminators

        Returns:
            The accumulated ChangeSet

        Raises:
            ChangeParseError: On the first line that cannot be parsed
        """
        change_set = ChangeSet()
        ignored = 0

        for line in lines:
            result = self.parser.parse(line)

            if isinstance(result, ParseFailure):
                raise ChangeParseError(result.line, result.reason)

            if isinstance(result, DeletedRecord):
                change_set.deleted.append(result.path)
            elif isinstance(result, TransferredRecord):
                if result.kind == ChangeKind.ADDED:
                    change_set.added.append(result.path)
                else:
                    change_set.modified.append(result.path)
            else:
                ignored += 1

        logger.debug(
            "Classified %d deleted, %d added, %d modified (%d lines ignored)",
            len(change_set.deleted),
            len(change_set.added),
            len(change_set.modified),
            ignored,
        )
        return change_set

    def build_from_output(self, output: str) -> ChangeSet:
        """Classify raw rsync stdout."""
        return self.build(split_output(output))


def build_change_set(output: str) -> ChangeSet:
    """Classify raw rsync stdout with a default builder."""
    return ChangeSetBuilder().build_from_output(output)
