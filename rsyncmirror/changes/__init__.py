"""Classification of rsync itemized-change output."""

from .builder import ChangeSet, ChangeSetBuilder, build_change_set, split_output
from .parser import (
    ChangeKind,
    ChangeLineParser,
    ChangeRecord,
    DeletedRecord,
    FileType,
    ParseFailure,
    TransferredRecord,
    UpdateType,
    parse_line,
)

__all__ = [
    "ChangeKind",
    "ChangeLineParser",
    "ChangeRecord",
    "ChangeSet",
    "ChangeSetBuilder",
    "DeletedRecord",
    "FileType",
    "ParseFailure",
    "TransferredRecord",
    "UpdateType",
    "build_change_set",
    "parse_line",
    "split_output",
]
