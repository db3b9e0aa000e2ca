"""Archive directory access."""

import logging
from collections.abc import Iterable
from pathlib import Path

from .entry import ArchiveEntry

logger = logging.getLogger(__name__)


class ArchiveStore:
    """Lists and deletes archive files in a directory."""

    def __init__(self, directory: Path):
        """Initialize archive store.

        Args:
            directory: Directory holding the archives
        """
        self.directory = directory

    def ensure_directory(self) -> Path:
        """Create the archive directory if needed."""
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def path_for(self, file_name: str) -> Path:
        return self.directory / file_name

    def list_names(self) -> list[str]:
        """Names of all regular files in the archive directory.

        Returns:
            Sorted file names, empty if the directory does not exist
        """
        if not self.directory.is_dir():
            logger.debug(f"Archive directory {self.directory} does not exist")
            return []
        return sorted(item.name for item in self.directory.iterdir() if item.is_file())

    def delete(self, entries: Iterable[ArchiveEntry]) -> list[Path]:
        """Delete archive files.

        Args:
            entries: Entries to delete

        Returns:
            Paths that were deleted
        """
        deleted: list[Path] = []
        for entry in entries:
            path = self.path_for(entry.file_name)
            logger.info(f"Deleting {path}")
            path.unlink()
            deleted.append(path)
        return deleted
