"""rsync-mirror - mirror a server with rsync, archive the mirror, report by mail."""

from .archive import (
    ArchiveCategory,
    ArchiveEntry,
    ArchiveRetentionPolicy,
    RetentionOutcome,
    archive_file_name,
)
from .changes import (
    ChangeKind,
    ChangeLineParser,
    ChangeSet,
    ChangeSetBuilder,
    DeletedRecord,
    ParseFailure,
    TransferredRecord,
    build_change_set,
)
from .config import MirrorConfig, load_config
from .exceptions import (
    ChangeParseError,
    MirrorCommandError,
    MirrorConfigError,
    MirrorError,
    MirrorMailError,
)
from .pipeline import MirrorPipeline, MirrorRunResult
from .report import ReportComposer, RunMetadata
from .verdict import RequiredFileChecker, VerdictResult, check_required_files

__all__ = [
    "ArchiveCategory",
    "ArchiveEntry",
    "ArchiveRetentionPolicy",
    "ChangeKind",
    "ChangeLineParser",
    "ChangeParseError",
    "ChangeSet",
    "ChangeSetBuilder",
    "DeletedRecord",
    "MirrorCommandError",
    "MirrorConfig",
    "MirrorConfigError",
    "MirrorError",
    "MirrorMailError",
    "MirrorPipeline",
    "MirrorRunResult",
    "ParseFailure",
    "ReportComposer",
    "RequiredFileChecker",
    "RetentionOutcome",
    "RunMetadata",
    "TransferredRecord",
    "VerdictResult",
    "archive_file_name",
    "build_change_set",
    "check_required_files",
    "load_config",
]
