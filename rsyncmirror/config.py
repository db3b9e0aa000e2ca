"""Configuration loading for rsync-mirror.

The configuration is a JSON file. Relative directories in it are resolved
against the directory containing the file.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .exceptions import MirrorConfigError
from .verdict import compile_required_pattern

logger = logging.getLogger(__name__)

# Environment variable that can supply the SMTP password
SMTP_PASSWORD_ENV = "RSYNC_MIRROR_SMTP_PASSWORD"


def _require(data: dict, key: str, expected: type, prefix: str = "") -> Any:
    full_key = f"{prefix}{key}"
    if key not in data:
        raise MirrorConfigError("missing required value", key=full_key)
    value = data[key]
    # bool is a subclass of int, reject it for numeric settings
    if not isinstance(value, expected) or (
        expected is int and isinstance(value, bool)
    ):
        raise MirrorConfigError(
            f"expected {expected.__name__}, got {type(value).__name__}", key=full_key
        )
    return value


def _section(data: dict, key: str) -> dict:
    return _require(data, key, dict)


@dataclass(frozen=True)
class ServerConfig:
    """Remote server to mirror."""

    url: str
    """Host name, also used as server identifier in names and mails"""

    username: str
    """SSH user for rsync"""

    root_directory: str
    """Remote directory to mirror"""

    exclude_pattern: str = ""
    """rsync --exclude pattern"""

    port: Optional[int] = None
    """SSH port, rsync default if None"""

    @classmethod
    def from_dict(cls, data: dict) -> "ServerConfig":
        prefix = "server."
        port = data.get("port")
        if port is not None and (not isinstance(port, int) or isinstance(port, bool)):
            raise MirrorConfigError("expected int", key="server.port")
        return cls(
            url=_require(data, "url", str, prefix),
            username=_require(data, "username", str, prefix),
            root_directory=_require(data, "rootDirectory", str, prefix),
            exclude_pattern=data.get("excludePattern") or "",
            port=port,
        )


@dataclass(frozen=True)
class ArchiveConfig:
    """Where archives go and how many are kept."""

    directory: Path
    keep_passed: int
    keep_failed: int

    @classmethod
    def from_dict(cls, data: dict, base_dir: Path) -> "ArchiveConfig":
        prefix = "archive."
        keep_passed = _require(data, "keepPassed", int, prefix)
        keep_failed = _require(data, "keepFailed", int, prefix)
        for key, value in (("keepPassed", keep_passed), ("keepFailed", keep_failed)):
            if value < 0:
                raise MirrorConfigError("must not be negative", key=prefix + key)
        return cls(
            directory=base_dir / _require(data, "directory", str, prefix),
            keep_passed=keep_passed,
            keep_failed=keep_failed,
        )


@dataclass(frozen=True)
class MailerConfig:
    """SMTP connection settings."""

    host: str
    port: int
    username: str
    password: str = field(repr=False)
    secure: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "MailerConfig":
        prefix = "email.mailer."
        password = data.get("password") or os.environ.get(SMTP_PASSWORD_ENV)
        if not password:
            raise MirrorConfigError(
                f"missing required value (or set {SMTP_PASSWORD_ENV})",
                key=prefix + "password",
            )
        return cls(
            host=_require(data, "host", str, prefix),
            port=_require(data, "port", int, prefix),
            username=_require(data, "username", str, prefix),
            password=password,
            secure=bool(data.get("secure", False)),
        )


@dataclass(frozen=True)
class EmailConfig:
    """Report mail settings."""

    mailer: MailerConfig
    recipients: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict) -> "EmailConfig":
        recipients = _require(data, "recipients", list, "email.")
        if not recipients or not all(isinstance(r, str) for r in recipients):
            raise MirrorConfigError(
                "expected a non-empty list of addresses", key="email.recipients"
            )
        return cls(
            mailer=MailerConfig.from_dict(_require(data, "mailer", dict, "email.")),
            recipients=tuple(recipients),
        )


@dataclass(frozen=True)
class DebugOptions:
    """Development switches replacing the real collaborators."""

    mock_rsync: bool = False
    """Use canned rsync output instead of running rsync"""

    mock_zip: bool = False
    """Archive only a small part of the mirror (still prunes for real)"""

    skip_email: bool = False
    """Log the mail instead of sending it"""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DebugOptions":
        data = data or {}
        return cls(
            mock_rsync=bool(data.get("mockRsync", False)),
            mock_zip=bool(data.get("mockZip", False)),
            skip_email=bool(data.get("skipEmail", False)),
        )


@dataclass(frozen=True)
class MirrorConfig:
    """Complete configuration of a mirror run."""

    config_path: Path
    mirror_directory: Path
    required_file_regex: str
    server: ServerConfig
    archive: ArchiveConfig
    email: EmailConfig
    debug: DebugOptions = field(default_factory=DebugOptions)
    rsync_timeout: Optional[float] = None

    @property
    def server_id(self) -> str:
        """Identifier used to label archives and mails."""
        return self.server.url

    @property
    def required_pattern(self) -> re.Pattern:
        return compile_required_pattern(self.required_file_regex)

    @classmethod
    def from_dict(cls, data: dict, config_path: Path) -> "MirrorConfig":
        """Create MirrorConfig from a parsed JSON document.

        Args:
            data: Parsed configuration
            config_path: Path of the configuration file, used to resolve
                relative directories

        Raises:
            MirrorConfigError: If a value is missing or invalid
        """
        if not isinstance(data, dict):
            raise MirrorConfigError("configuration must be a JSON object")

        base_dir = config_path.parent
        required_file_regex = _require(data, "requiredFileRegex", str)
        # Fail before any pipeline stage runs
        compile_required_pattern(required_file_regex)

        timeout = data.get("rsyncTimeout")
        if timeout is not None and (
            not isinstance(timeout, (int, float)) or isinstance(timeout, bool)
        ):
            raise MirrorConfigError("expected a number", key="rsyncTimeout")

        return cls(
            config_path=config_path,
            mirror_directory=base_dir / _require(data, "mirrorDirectory", str),
            required_file_regex=required_file_regex,
            server=ServerConfig.from_dict(_section(data, "server")),
            archive=ArchiveConfig.from_dict(_section(data, "archive"), base_dir),
            email=EmailConfig.from_dict(_section(data, "email")),
            debug=DebugOptions.from_dict(data.get("debug")),
            rsync_timeout=timeout,
        )


def load_config(path: Path) -> MirrorConfig:
    """Load and validate a configuration file.

    Args:
        path: Path to the JSON configuration file

    Returns:
        Validated MirrorConfig

    Raises:
        MirrorConfigError: If the file cannot be read or is invalid
    """
    config_path = Path(path).resolve()
    logger.debug(f"Loading config from {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise MirrorConfigError(f"Could not read config file: {e}") from e
    except json.JSONDecodeError as e:
        raise MirrorConfigError(f"Invalid JSON in {config_path}: {e}") from e

    return MirrorConfig.from_dict(data, config_path)
