"""Tests for the required-file verdict."""

import re

import pytest

from rsyncmirror.exceptions import MirrorConfigError
from rsyncmirror.verdict import (
    RequiredFileChecker,
    VerdictResult,
    check_required_files,
    compile_required_pattern,
)


class TestRequiredFileChecker:
    """Tests for RequiredFileChecker.check."""

    def test_matching_file_passes(self):
        """A matching added file makes the run pass."""
        result = check_required_files(["wp-content/backup-2024.zip"], r"backup.*\.zip$")

        assert result.passed is True
        assert result.matched_required_files == ["wp-content/backup-2024.zip"]

    def test_no_match_fails(self):
        """No matching file is a regular failed verdict."""
        result = check_required_files(["wp-content/backup-2024.zip"], r"\.tar\.gz$")

        assert result.passed is False
        assert result.matched_required_files == []

    def test_search_is_unanchored(self):
        """The pattern may match anywhere in the path."""
        result = check_required_files(["a/database-2024.zip"], "database")

        assert result.passed is True

    def test_keeps_only_matches_in_order(self):
        """Only matching files are listed, in input order."""
        added = ["b.zip", "readme.txt", "a.zip"]

        result = RequiredFileChecker(re.compile(r"\.zip$")).check(added)

        assert result.matched_required_files == ["b.zip", "a.zip"]

    def test_empty_added(self):
        """Nothing added never passes."""
        assert check_required_files([], ".*").passed is False

    def test_invalid_pattern(self):
        """An invalid pattern is a configuration error."""
        with pytest.raises(MirrorConfigError, match="requiredFileRegex"):
            compile_required_pattern("backup[")


class TestVerdictResult:
    """Tests for VerdictResult."""

    def test_labels(self):
        """label maps to the mail subject prefix."""
        assert VerdictResult(passed=True).label == "PASS"
        assert VerdictResult(passed=False).label == "FAIL"
