"""Shared fixtures for rsync-mirror tests."""

import json
from pathlib import Path

import pytest


@pytest.fixture
def config_data():
    """A complete, valid configuration document."""
    return {
        "mirrorDirectory": "mirror",
        "requiredFileRegex": r"backup.*\.zip$",
        "server": {
            "url": "example.org",
            "username": "mirror",
            "rootDirectory": "/www",
            "excludePattern": "cache/",
        },
        "archive": {"directory": "archive", "keepPassed": 2, "keepFailed": 1},
        "email": {
            "mailer": {
                "host": "smtp.example.org",
                "port": 465,
                "secure": True,
                "username": "mirror@example.org",
                "password": "secret",
            },
            "recipients": ["ops@example.org", "admin@example.org"],
        },
        "debug": {"mockRsync": False, "mockZip": False, "skipEmail": True},
    }


@pytest.fixture
def config_file(tmp_path, config_data) -> Path:
    """Write config_data to a JSON file and return its path."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config_data), encoding="utf-8")
    return path
