"""Plain-text report composition for the status mail."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .archive import RetentionOutcome
from .changes import ChangeSet
from .utils import format_iso_timestamp
from .verdict import VerdictResult


@dataclass(frozen=True)
class RunMetadata:
    """Information about the run that is shown in the report."""

    server_id: str
    """Server the mirror was taken from"""

    started_at: datetime
    """Start of the run"""

    archive_directory: Path
    """Directory holding the archives"""

    sender: str = "rsync-mirror"
    """Program name shown in the footer"""


def _listing(title: str, items: list[str]) -> list[str]:
    return [f"{title} ({len(items)}):", *(f"- {item}" for item in items), ""]


class ReportComposer:
    """Renders a run's results into report lines. Has no side effects."""

    def compose(
        self,
        change_set: ChangeSet,
        verdict: VerdictResult,
        retention: RetentionOutcome,
        metadata: RunMetadata,
        pattern: str,
    ) -> list[str]:
        """Compose the report of a completed run.

        Args:
            change_set: Classified rsync changes
            verdict: Required-file verdict
            retention: Result of archive pruning
            metadata: Run metadata
            pattern: Required-file pattern, shown when the verdict failed

        Returns:
            Report lines (join with newlines for the mail body)
        """
        lines = self.verdict_lines(verdict, metadata, pattern)
        lines.extend(self.change_lines(change_set))
        lines.extend(self.retention_lines(retention, metadata.archive_directory))
        lines.append(self.footer(metadata))
        return lines

    def verdict_lines(
        self, verdict: VerdictResult, metadata: RunMetadata, pattern: str
    ) -> list[str]:
        if verdict.passed:
            return [
                f"Mirroring the {metadata.server_id} server data was successful.",
                "These are the required files that were downloaded today:",
                *(f"- {path}" for path in verdict.matched_required_files),
                "",
            ]
        return [
            f"Mirroring the {metadata.server_id} server data has failed, as there "
            "was no file added that matches the following regex:",
            f"/{pattern}/",
            "",
        ]

    def change_lines(self, change_set: ChangeSet) -> list[str]:
        return [
            *_listing("Deleted files", change_set.deleted),
            *_listing("Added files", change_set.added),
            *_listing("Modified files", change_set.modified),
        ]

    def retention_lines(
        self, retention: RetentionOutcome, archive_directory: Path
    ) -> list[str]:
        lines = [
            f"Latest zips in {archive_directory}:",
            *(f"- {entry.file_name}" for entry in retention.kept),
            "",
        ]
        deleted = retention.deleted
        if deleted:
            lines.extend(
                [
                    f"Deleted old zips in {archive_directory}:",
                    *(f"- {entry.file_name}" for entry in deleted),
                    "",
                ]
            )
        if retention.skipped:
            lines.extend(
                [
                    f"Unrecognized files in {archive_directory} (never pruned):",
                    *(f"- {name}" for name in retention.skipped),
                    "",
                ]
            )
        return lines

    def footer(self, metadata: RunMetadata) -> str:
        return (
            f"This email was sent by {metadata.sender} "
            f"(run started {format_iso_timestamp(metadata.started_at)})"
        )

    def compose_failure(self, error: BaseException, details: str, sender: str) -> str:
        """Compose the body of a failure notification.

        Args:
            error: The error that aborted the run
            details: Formatted traceback
            sender: Program name
        """
        return f"Script {sender} failed with following error:\n{error}\n\n{details}"


def mail_subject(label: str, server_id: str) -> str:
    """Subject line of the status mail.

    Examples:
        >>> mail_subject("PASS", "example.org")
        '[PASS] example.org mirror'
    """
    return f"[{label}] {server_id} mirror"
