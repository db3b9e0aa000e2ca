"""Exceptions raised by rsync-mirror."""

from typing import Optional


class MirrorError(Exception):
    """Base exception for all mirror run failures."""


class MirrorConfigError(MirrorError):
    """Raised when the configuration is missing or invalid."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        if key:
            message = f"{key}: {message}"
        super().__init__(message)


class ChangeParseError(MirrorError):
    """Raised when a line of rsync output cannot be classified.

    The whole classification is aborted; no partial change set exists.
    """

    def __init__(self, line: str, reason: str = "unrecognized line"):
        self.line = line
        self.reason = reason
        super().__init__(f"Unable to handle rsync output ({reason}):\n{line}")


class MirrorCommandError(MirrorError):
    """Raised when an external command (rsync, zip) fails."""

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class MirrorMailError(MirrorError):
    """Raised when the report mail cannot be sent."""
