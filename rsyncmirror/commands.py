"""External commands: rsync for mirroring and zip for archiving."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from .config import ServerConfig
from .exceptions import MirrorCommandError

logger = logging.getLogger(__name__)

# Canned output used when rsync is mocked
MOCK_RSYNC_OUTPUT = """\
*deleting   www/wp/wordpress/test/e
.d..t...... www/wp/wordpress/test/
>f+++++++++ www/wp/wordpress/test/a
>f.st...... www/wp/wordpress/test/d
cd+++++++++ www/wp/wordpress/test/newdir/
>f+++++++++ www/wp/wordpress/test/newdir/xxx
>f+++++++++ www/wp/wordpress/wp-content/backupwordpress-d200fbdae6-backups/297344-webhosting75-1blu-de-1441741582-database-2019-12-27-10-58-54.zip
"""

# Subdirectory archived when zip is mocked
MOCK_ZIP_SOURCE = "./www/wp/wordpress/wp-admin/"


def _run(
    command: list[str], cwd: Optional[Path] = None, timeout: Optional[float] = None
) -> str:
    """Run a command and return its stdout.

    Raises:
        MirrorCommandError: If the command cannot be started, times out or
            exits with a non-zero status
    """
    logger.debug("Running %s (cwd: %s)", command, cwd)
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            encoding="utf-8",
            timeout=timeout,
            check=True,
        )
    except FileNotFoundError as e:
        raise MirrorCommandError(
            f"Command not found: {command[0]}", command=command
        ) from e
    except subprocess.TimeoutExpired as e:
        raise MirrorCommandError(
            f"{command[0]} timed out after {timeout}s", command=command
        ) from e
    except subprocess.CalledProcessError as e:
        raise MirrorCommandError(
            f"{command[0]} failed with exit code {e.returncode}:\n{e.stderr or ''}",
            command=command,
            returncode=e.returncode,
            output=e.stdout or "",
        ) from e

    if result.stderr:
        logger.debug("%s stderr: %s", command[0], result.stderr)
    return result.stdout


class RsyncRunner:
    """Mirrors a remote directory with rsync and returns its itemized output."""

    def __init__(
        self,
        server: ServerConfig,
        mirror_directory: Path,
        timeout: Optional[float] = None,
        mock: bool = False,
    ):
        """Initialize rsync runner.

        Args:
            server: Remote server settings
            mirror_directory: Local mirror directory
            timeout: Optional timeout in seconds for the rsync process
            mock: If True, return canned output instead of running rsync
        """
        self.server = server
        self.mirror_directory = mirror_directory
        self.timeout = timeout
        self.mock = mock

    def build_command(self) -> list[str]:
        """Build the rsync argument list."""
        command = [
            "rsync",
            "--recursive",
            f"--exclude={self.server.exclude_pattern}",
            "--times",
            "--itemize-changes",
            "--delete",
            "--copy-links",
        ]
        if self.server.port is not None:
            command.append(f"--rsh=ssh -p {self.server.port}")
        command.append(
            f"{self.server.username}@{self.server.url}:{self.server.root_directory}"
        )
        command.append(str(self.mirror_directory))
        return command

    def run(self) -> str:
        """Run rsync.

        Returns:
            rsync stdout

        Raises:
            MirrorCommandError: If rsync fails
        """
        self.mirror_directory.mkdir(parents=True, exist_ok=True)
        if self.mock:
            logger.warning("rsync is mocked, using canned output")
            return MOCK_RSYNC_OUTPUT
        return _run(self.build_command(), timeout=self.timeout)


class ZipArchiver:
    """Creates a zip archive of the mirror directory."""

    def __init__(self, mirror_directory: Path, mock: bool = False):
        """Initialize zip archiver.

        Args:
            mirror_directory: Directory to archive (used as working directory)
            mock: If True, only archive a small subdirectory
        """
        self.mirror_directory = mirror_directory
        self.mock = mock

    def build_command(self, archive_path: Path) -> list[str]:
        source = MOCK_ZIP_SOURCE if self.mock else "."
        return ["zip", "--quiet", "-r", str(archive_path), source]

    def create(self, archive_path: Path) -> Path:
        """Archive the mirror directory.

        Args:
            archive_path: Absolute path of the archive to create

        Returns:
            The archive path

        Raises:
            MirrorCommandError: If zip fails or prints anything to stdout
        """
        archive_path.parent.mkdir(parents=True, exist_ok=True)
        command = self.build_command(archive_path)
        output = _run(command, cwd=self.mirror_directory)
        if output != "":
            raise MirrorCommandError(
                f"Unexpected stdout from zip command:\n{output}",
                command=command,
                output=output,
            )
        return archive_path
