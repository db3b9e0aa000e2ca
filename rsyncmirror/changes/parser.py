"""Line parser for rsync itemized-change output.

Understands the output of ``rsync --itemize-changes --delete``. See the
rsync(1) man page, sections ``--itemize-changes`` and ``--delete``.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

# "*deleting   path/to/entry" (see --delete)
DELETED_PATTERN = re.compile(r"^\*deleting\s+(?P<path>.*)$")

# "YXcstpoguax path" (see --itemize-changes)
ITEMIZED_PATTERN = re.compile(
    r"^(?P<update_type>[>c.])(?P<file_type>[fd])"
    r"(?P<attributes>[+.cstTpoguax]{9}) (?P<path>.*)$"
)

# Attribute string rsync prints for a freshly created item
CREATED_ATTRIBUTES = "+" * 9


class UpdateType(str, Enum):
    """Update types of an itemized line that the parser accepts."""

    RECEIVED = ">"
    """Item is being transferred to the local host"""

    LOCAL_CHANGE = "c"
    """Local change or creation (e.g. a new directory)"""

    NO_UPDATE = "."
    """Item is not being updated, only attributes may change"""


class FileType(str, Enum):
    """File types of an itemized line that the parser accepts."""

    FILE = "f"
    """Regular file"""

    DIRECTORY = "d"
    """Directory"""


class ChangeKind(str, Enum):
    """Classification of a transferred regular file."""

    ADDED = "added"
    """File did not exist in the mirror before"""

    MODIFIED = "modified"
    """File existed and was transferred again"""


@dataclass(frozen=True)
class DeletedRecord:
    """An entry removed from the mirror (file or directory)."""

    path: str
    """Path relative to the mirror root"""


@dataclass(frozen=True)
class TransferredRecord:
    """A regular file received from the server."""

    path: str
    """Path relative to the mirror root"""

    kind: ChangeKind
    """Whether the file was added or modified"""


ChangeRecord = Union[DeletedRecord, TransferredRecord]


@dataclass(frozen=True)
class ParseFailure:
    """A line that matches none of the recognized shapes."""

    line: str
    """The offending line"""

    reason: str
    """Human-readable reason"""


ParseResult = Union[ChangeRecord, ParseFailure, None]


class ChangeLineParser:
    """Parses single lines of rsync output into change records.

    ``parse`` returns a ``DeletedRecord`` or ``TransferredRecord`` for lines
    that describe a change, ``None`` for recognized lines that carry no
    file change (directories, attribute-only updates) and a
    ``ParseFailure`` for everything else.

    Examples:
        >>> parser = ChangeLineParser()
        >>> parser.parse(">f+++++++++ www/index.php")
        TransferredRecord(path='www/index.php', kind=<ChangeKind.ADDED: 'added'>)
        >>> parser.parse(".d..t...... www/") is None
        True
    """

    def parse(self, line: str) -> ParseResult:
        """Parse one line of rsync output.

        Args:
            line: Line without its trailing newline

        Returns:
            Change record, None for ignored lines, or ParseFailure
        """
        deleted = DELETED_PATTERN.match(line)
        if deleted is not None:
            return DeletedRecord(path=deleted.group("path"))

        itemized = ITEMIZED_PATTERN.match(line)
        if itemized is not None:
            return self._classify_itemized(
                UpdateType(itemized.group("update_type")),
                FileType(itemized.group("file_type")),
                itemized.group("attributes"),
                itemized.group("path"),
            )

        return ParseFailure(line=line, reason=self._failure_reason(line))

    def _classify_itemized(
        self,
        update_type: UpdateType,
        file_type: FileType,
        attributes: str,
        path: str,
    ) -> Optional[TransferredRecord]:
        """Classify an itemized line; only received regular files count."""
        if update_type != UpdateType.RECEIVED or file_type != FileType.FILE:
            return None

        if attributes == CREATED_ATTRIBUTES:
            return TransferredRecord(path=path, kind=ChangeKind.ADDED)
        return TransferredRecord(path=path, kind=ChangeKind.MODIFIED)

    def _failure_reason(self, line: str) -> str:
        if not line:
            return "empty line"
        if len(line) > 12 and line[11] == " ":
            update_type = line[0]
            if update_type not in {u.value for u in UpdateType}:
                return f"unrecognized update type {update_type!r}"
            file_type = line[1]
            if file_type not in {t.value for t in FileType}:
                return f"unrecognized file type {file_type!r}"
            return "unrecognized attribute flags"
        return "unrecognized line"


_default_parser = ChangeLineParser()


def parse_line(line: str) -> ParseResult:
    """Parse a single line with a shared ChangeLineParser."""
    return _default_parser.parse(line)
