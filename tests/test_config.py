"""Tests for configuration loading."""

import json

import pytest

from rsyncmirror.config import SMTP_PASSWORD_ENV, DebugOptions, load_config
from rsyncmirror.exceptions import MirrorConfigError


def _write(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_valid_config(self, config_file, tmp_path):
        """A valid file is loaded with directories resolved."""
        config = load_config(config_file)

        assert config.server_id == "example.org"
        assert config.mirror_directory == tmp_path.resolve() / "mirror"
        assert config.archive.directory == tmp_path.resolve() / "archive"
        assert config.archive.keep_passed == 2
        assert config.archive.keep_failed == 1
        assert config.server.exclude_pattern == "cache/"
        assert config.email.recipients == ("ops@example.org", "admin@example.org")
        assert config.email.mailer.secure is True
        assert config.debug == DebugOptions(skip_email=True)
        assert config.required_pattern.search("a/backup-1.zip")

    def test_absolute_directories_are_kept(self, tmp_path, config_data):
        """Absolute directories are not rebased."""
        config_data["archive"]["directory"] = str(tmp_path / "abs")

        config = load_config(_write(tmp_path, config_data))

        assert config.archive.directory == tmp_path / "abs"

    def test_missing_file(self, tmp_path):
        """An unreadable file is a configuration error."""
        with pytest.raises(MirrorConfigError, match="Could not read"):
            load_config(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Malformed JSON is a configuration error."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(MirrorConfigError, match="Invalid JSON"):
            load_config(path)

    def test_missing_key(self, tmp_path, config_data):
        """Missing values name the key."""
        del config_data["server"]["url"]

        with pytest.raises(MirrorConfigError, match="server.url"):
            load_config(_write(tmp_path, config_data))

    def test_invalid_regex(self, tmp_path, config_data):
        """An invalid required-file regex fails at load time."""
        config_data["requiredFileRegex"] = "backup("

        with pytest.raises(MirrorConfigError) as exc_info:
            load_config(_write(tmp_path, config_data))

        assert exc_info.value.key == "requiredFileRegex"

    @pytest.mark.parametrize("value", ["2", 2.5, True, -1])
    def test_invalid_keep_passed(self, tmp_path, config_data, value):
        """Retention counts must be non-negative integers."""
        config_data["archive"]["keepPassed"] = value

        with pytest.raises(MirrorConfigError, match="archive.keepPassed"):
            load_config(_write(tmp_path, config_data))

    def test_empty_recipients(self, tmp_path, config_data):
        """At least one recipient is required."""
        config_data["email"]["recipients"] = []

        with pytest.raises(MirrorConfigError, match="email.recipients"):
            load_config(_write(tmp_path, config_data))

    def test_password_from_environment(self, tmp_path, config_data, monkeypatch):
        """The SMTP password may come from the environment."""
        del config_data["email"]["mailer"]["password"]
        monkeypatch.setenv(SMTP_PASSWORD_ENV, "from-env")

        config = load_config(_write(tmp_path, config_data))

        assert config.email.mailer.password == "from-env"

    def test_missing_password(self, tmp_path, config_data, monkeypatch):
        """Without file or environment password loading fails."""
        del config_data["email"]["mailer"]["password"]
        monkeypatch.delenv(SMTP_PASSWORD_ENV, raising=False)

        with pytest.raises(MirrorConfigError, match="password"):
            load_config(_write(tmp_path, config_data))

    def test_password_not_in_repr(self, config_file):
        """The password is hidden from repr."""
        config = load_config(config_file)

        assert "secret" not in repr(config)

    def test_debug_defaults(self, tmp_path, config_data):
        """The debug section is optional."""
        del config_data["debug"]

        config = load_config(_write(tmp_path, config_data))

        assert config.debug == DebugOptions()

    def test_secure_defaults_to_false(self, tmp_path, config_data):
        """Without ``secure`` the mailer connects plainly and upgrades via STARTTLS."""
        del config_data["email"]["mailer"]["secure"]

        config = load_config(_write(tmp_path, config_data))

        assert config.email.mailer.secure is False

    def test_rsync_timeout(self, tmp_path, config_data):
        """rsyncTimeout must be numeric."""
        config_data["rsyncTimeout"] = "soon"

        with pytest.raises(MirrorConfigError, match="rsyncTimeout"):
            load_config(_write(tmp_path, config_data))

    def test_not_an_object(self, tmp_path):
        """The top level must be an object."""
        with pytest.raises(MirrorConfigError):
            load_config(_write(tmp_path, ["a"]))
