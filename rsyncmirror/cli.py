"""CLI interface for rsync-mirror."""

import logging
from pathlib import Path
from typing import Any, Optional, TextIO

import click

from .archive import ArchiveRetentionPolicy, ArchiveStore
from .changes import ChangeSetBuilder
from .config import MirrorConfig, load_config
from .exceptions import ChangeParseError, MirrorConfigError
from .output import OutputFormatter
from .pipeline import MirrorPipeline
from .verdict import check_required_files

logger = logging.getLogger(__name__)


def _load_config_or_exit(ctx: Any, config_path: str) -> MirrorConfig:
    out: OutputFormatter = ctx.obj["out"]
    try:
        config = load_config(Path(config_path))
    except MirrorConfigError as e:
        out.error(f"Could not read config file: {e}")
        ctx.exit(1)
    out.info(f"Using config file: {config.config_path}")
    return config


@click.group()
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="rsyncmirror")
@click.pass_context
def main(ctx: Any, quiet: bool, json: bool, verbose: bool) -> None:
    """rsync-mirror - Mirror a server with rsync, archive it and report by mail."""
    ctx.ensure_object(dict)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)
    ctx.obj["verbose"] = verbose

    # Configure logging based on verbose flag
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("rsyncmirror").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def run(ctx: Any, config_path: str) -> None:
    """Mirror the configured server, archive the mirror and send a report.

    CONFIG_PATH: JSON configuration file. Relative directories in it are
    resolved against the file's directory.

    Exits with status 1 if the run fails; a FAIL mail is sent in that case.
    """
    out: OutputFormatter = ctx.obj["out"]
    config = _load_config_or_exit(ctx, config_path)

    try:
        result = MirrorPipeline(config, output=out).run_safely()
    except KeyboardInterrupt:
        out.warning("\nMirror run cancelled by user")
        ctx.exit(130)  # Standard exit code for SIGINT

    if result.error is None:
        out.print_summary(
            "Mirror Complete",
            [
                ("Status", "PASS" if result.passed else "FAIL"),
                ("Archive", str(result.archive_path)),
            ],
        )
    ctx.exit(result.exit_code)


@main.command()
@click.argument("rsync_output", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "--required-regex",
    "-r",
    default=None,
    help="Also check the added files against this regular expression",
)
@click.pass_context
def classify(ctx: Any, rsync_output: TextIO, required_regex: Optional[str]) -> None:
    """Classify saved rsync --itemize-changes output.

    RSYNC_OUTPUT: File with rsync stdout (default: stdin)

    Examples:
        rsync -ri --delete host:/www mirror | rsync-mirror classify
        rsync-mirror classify rsync.log -r 'backup.*\\.zip$'
    """
    out: OutputFormatter = ctx.obj["out"]

    try:
        change_set = ChangeSetBuilder().build_from_output(rsync_output.read())
    except ChangeParseError as e:
        out.error(str(e))
        ctx.exit(1)

    verdict = None
    if required_regex is not None:
        try:
            verdict = check_required_files(change_set.added, required_regex)
        except MirrorConfigError as e:
            out.error(str(e))
            ctx.exit(1)

    if out.json_output:
        data = change_set.to_dict()
        if verdict is not None:
            data["passed"] = verdict.passed
            data["matched_required_files"] = verdict.matched_required_files
        out.output_json(data)
        return

    for title, paths in (
        ("Deleted files", change_set.deleted),
        ("Added files", change_set.added),
        ("Modified files", change_set.modified),
    ):
        out.print(f"{title} ({len(paths)}):")
        for path in paths:
            out.print(f"- {path}")
        out.print("")

    if verdict is not None:
        if verdict.passed:
            out.success(f"PASS: {len(verdict.matched_required_files)} required file(s)")
        else:
            out.warning(f"FAIL: no added file matches {required_regex}")


@main.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--dry-run", is_flag=True, help="Show what would be deleted without deleting"
)
@click.pass_context
def prune(ctx: Any, config_path: str, dry_run: bool) -> None:
    """Apply the archive retention policy without mirroring.

    Keeps the newest archive.keepPassed passed and archive.keepFailed
    failed archives and deletes the rest.
    """
    out: OutputFormatter = ctx.obj["out"]
    config = _load_config_or_exit(ctx, config_path)

    store = ArchiveStore(config.archive.directory)
    policy = ArchiveRetentionPolicy(
        config.archive.keep_passed, config.archive.keep_failed
    )
    retention = policy.apply_to_names(store.list_names())

    for entry in retention.kept:
        out.info(f"Keep:   {entry.file_name}")
    for entry in retention.deleted:
        out.info(f"Delete: {entry.file_name}")
    for name in retention.skipped:
        out.warning(f"Unrecognized, not pruned: {name}")

    if dry_run:
        out.warning("Dry run mode - no archives were deleted.")
    else:
        store.delete(retention.deleted)

    out.print_summary(
        "Prune Complete",
        [
            ("Kept", str(len(retention.kept))),
            ("Would delete" if dry_run else "Deleted", str(len(retention.deleted))),
            ("Skipped", str(len(retention.skipped))),
        ],
    )


if __name__ == "__main__":
    main()
