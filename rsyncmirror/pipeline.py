"""Mirror run orchestration."""

import logging
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from .archive import (
    ArchiveRetentionPolicy,
    ArchiveStore,
    RetentionOutcome,
    archive_file_name,
)
from .changes import ChangeSet, ChangeSetBuilder
from .commands import RsyncRunner, ZipArchiver
from .config import MirrorConfig
from .mailer import Mailer
from .output import OutputFormatter
from .report import ReportComposer, RunMetadata
from .utils import format_iso_timestamp, format_size, utc_now
from .verdict import RequiredFileChecker, VerdictResult

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "rsync-mirror"


@dataclass
class MirrorRunResult:
    """Terminal outcome of a mirror run."""

    passed: bool
    """Whether the required files were fetched"""

    report: str
    """Body of the mail that was sent"""

    change_set: Optional[ChangeSet] = None
    verdict: Optional[VerdictResult] = None
    retention: Optional[RetentionOutcome] = None
    archive_path: Optional[Path] = None

    error: Optional[BaseException] = None
    """Error that aborted the run, if any"""

    @property
    def exit_code(self) -> int:
        """Process exit code: 0 unless the run was aborted by an error."""
        return 0 if self.error is None else 1


class MirrorPipeline:
    """Runs rsync, classifies changes, archives, prunes and reports."""

    def __init__(
        self,
        config: MirrorConfig,
        output: Optional[OutputFormatter] = None,
        runner: Optional[RsyncRunner] = None,
        archiver: Optional[ZipArchiver] = None,
        store: Optional[ArchiveStore] = None,
        mailer: Optional[Mailer] = None,
        clock: Callable[[], datetime] = utc_now,
        sender: str = DEFAULT_SENDER,
    ):
        """Initialize mirror pipeline.

        Collaborators default to the real implementations configured from
        ``config`` (including its debug options).

        Args:
            config: Mirror configuration
            output: Output formatter for displaying progress/status
            runner: rsync collaborator
            archiver: zip collaborator
            store: Archive directory access
            mailer: Mail collaborator
            clock: Returns the current time
            sender: Program name shown in mails
        """
        self.config = config
        self.output = output or OutputFormatter()
        self.runner = runner or RsyncRunner(
            config.server,
            config.mirror_directory,
            timeout=config.rsync_timeout,
            mock=config.debug.mock_rsync,
        )
        self.archiver = archiver or ZipArchiver(
            config.mirror_directory, mock=config.debug.mock_zip
        )
        self.store = store or ArchiveStore(config.archive.directory)
        self.mailer = mailer or Mailer(
            config.email, config.server_id, skip_sending=config.debug.skip_email
        )
        self.clock = clock
        self.sender = sender
        self.composer = ReportComposer()

    @contextmanager
    def _step(self, description: str) -> Iterator[None]:
        """Show a spinner while a blocking step runs."""
        if self.output.quiet:
            yield
            return
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description, total=None)
            yield

    def run(self) -> MirrorRunResult:
        """Execute one mirror run.

        Returns:
            MirrorRunResult of the successful run

        Raises:
            MirrorError: If any stage fails
        """
        config = self.config
        started_at = self.clock()
        self.output.info(f"rsync-mirror at {format_iso_timestamp(started_at)}")

        with self._step(f"Mirroring {config.server_id}..."):
            rsync_output = self.runner.run()
        logger.debug("rsync stdout:\n%s", rsync_output)
        self.output.info("rsync finished without errors.")

        change_set = ChangeSetBuilder().build_from_output(rsync_output)
        self.output.info(
            f"Deleted: {len(change_set.deleted)}, added: {len(change_set.added)}, "
            f"modified: {len(change_set.modified)}"
        )

        verdict = RequiredFileChecker(config.required_pattern).check(change_set.added)
        if verdict.passed:
            self.output.success(
                f"Found {len(verdict.matched_required_files)} required file(s)"
            )
        else:
            self.output.warning(
                f"No added file matches required pattern {config.required_file_regex}"
            )

        self.store.ensure_directory()
        archive_path = self.store.path_for(
            archive_file_name(config.server_id, started_at, verdict.passed)
        )
        with self._step(f"Archiving mirror to {archive_path.name}..."):
            self.archiver.create(archive_path)
        size = format_size(archive_path.stat().st_size)
        self.output.info(f"Created {archive_path} ({size})")

        policy = ArchiveRetentionPolicy(
            config.archive.keep_passed, config.archive.keep_failed
        )
        retention = policy.apply_to_names(self.store.list_names())
        for path in self.store.delete(retention.deleted):
            self.output.info(f"Deleted {path}")

        metadata = RunMetadata(
            server_id=config.server_id,
            started_at=started_at,
            archive_directory=config.archive.directory,
            sender=self.sender,
        )
        report = "\n".join(
            self.composer.compose(
                change_set, verdict, retention, metadata, config.required_file_regex
            )
        )

        self.mailer.send(verdict.label, report)
        self.output.info(f"Done at {format_iso_timestamp(self.clock())}.")

        return MirrorRunResult(
            passed=verdict.passed,
            report=report,
            change_set=change_set,
            verdict=verdict,
            retention=retention,
            archive_path=archive_path,
        )

    def run_safely(self) -> MirrorRunResult:
        """Execute one mirror run and notify about any failure.

        Never raises for run failures; the returned result carries the error
        and a non-zero exit code. A failing notification is logged.
        """
        try:
            return self.run()
        except Exception as e:
            logger.debug("Mirror run failed", exc_info=True)
            self.output.error(f"Mirror run failed: {e}")
            body = self.composer.compose_failure(e, traceback.format_exc(), self.sender)
            try:
                self.mailer.send("FAIL", body)
            except Exception as mail_error:
                logger.error(f"Could not send failure notification: {mail_error}")
                self.output.error(f"Could not send failure notification: {mail_error}")
            return MirrorRunResult(passed=False, report=body, error=e)
