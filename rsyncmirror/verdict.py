"""Pass/fail verdict based on required files."""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Union

from .exceptions import MirrorConfigError


@dataclass
class VerdictResult:
    """Outcome of checking the added files against the required pattern."""

    passed: bool
    """True if at least one added file matches"""

    matched_required_files: list[str] = field(default_factory=list)
    """Added files matching the pattern, in input order"""

    @property
    def label(self) -> str:
        """PASS or FAIL, used as mail subject prefix."""
        return "PASS" if self.passed else "FAIL"


def compile_required_pattern(pattern: str) -> re.Pattern:
    """Compile the required-file regex.

    Raises:
        MirrorConfigError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise MirrorConfigError(
            f"Invalid regular expression {pattern!r}: {e}", key="requiredFileRegex"
        ) from e


class RequiredFileChecker:
    """Tests added files against a required-file pattern.

    The pattern is searched, not fully matched, so ``backup.*\\.zip$``
    matches ``wp-content/backup-2024.zip``. Finding no match is a regular
    outcome meaning the run did not fetch what it should have.
    """

    def __init__(self, pattern: Union[str, re.Pattern]):
        if isinstance(pattern, str):
            pattern = compile_required_pattern(pattern)
        self.pattern = pattern

    def check(self, added: Sequence[str]) -> VerdictResult:
        matched = [path for path in added if self.pattern.search(path)]
        return VerdictResult(passed=len(matched) > 0, matched_required_files=matched)


def check_required_files(
    added: Sequence[str], pattern: Union[str, re.Pattern]
) -> VerdictResult:
    """Check added files against a pattern."""
    return RequiredFileChecker(pattern).check(added)
