"""Tests for ChangeSetBuilder and output splitting."""

import pytest

from rsyncmirror.changes import ChangeSet, ChangeSetBuilder, build_change_set, split_output
from rsyncmirror.commands import MOCK_RSYNC_OUTPUT
from rsyncmirror.exceptions import ChangeParseError


class TestSplitOutput:
    """Tests for split_output."""

    def test_removes_single_trailing_segment(self):
        """The empty segment after the last newline is dropped."""
        assert split_output("a\nb\n") == ["a", "b"]

    def test_keeps_other_empty_lines(self):
        """Only exactly one trailing empty segment is removed."""
        assert split_output("a\n\n") == ["a", ""]

    def test_without_trailing_newline(self):
        """Output without a final newline keeps its last line."""
        assert split_output("a\nb") == ["a", "b"]

    def test_empty_output(self):
        """Empty output yields no lines."""
        assert split_output("") == []


class TestChangeSetBuilder:
    """Tests for ChangeSetBuilder.build."""

    def test_sample_output(self):
        """The documented sample output is classified per category."""
        change_set = ChangeSetBuilder().build_from_output(MOCK_RSYNC_OUTPUT)

        assert change_set.deleted == ["www/wp/wordpress/test/e"]
        assert change_set.added == [
            "www/wp/wordpress/test/a",
            "www/wp/wordpress/test/newdir/xxx",
            "www/wp/wordpress/wp-content/backupwordpress-d200fbdae6-backups/"
            "297344-webhosting75-1blu-de-1441741582-database-2019-12-27-10-58-54.zip",
        ]
        assert change_set.modified == ["www/wp/wordpress/test/d"]
        assert change_set.total == 5

    def test_preserves_input_order(self):
        """Paths are appended in input order, not sorted."""
        lines = [
            ">f+++++++++ z.txt",
            "*deleting   y/",
            ">f.st...... b.txt",
            ">f+++++++++ a.txt",
            "*deleting   c.txt",
            ">f..t...... a2.txt",
        ]

        change_set = ChangeSetBuilder().build(lines)

        assert change_set.deleted == ["y/", "c.txt"]
        assert change_set.added == ["z.txt", "a.txt"]
        assert change_set.modified == ["b.txt", "a2.txt"]

    def test_empty_input(self):
        """No lines produce an empty change set."""
        assert ChangeSetBuilder().build([]) == ChangeSet()

    def test_fails_fast_on_unparsable_line(self):
        """The first unparsable line aborts with the line attached."""
        lines = [">f+++++++++ a.txt", "??unexpected line format", "garbage"]

        with pytest.raises(ChangeParseError) as exc_info:
            ChangeSetBuilder().build(lines)

        assert exc_info.value.line == "??unexpected line format"
        assert "??unexpected line format" in str(exc_info.value)

    def test_stops_consuming_after_failure(self):
        """Lines after the failing one are not parsed."""
        consumed = []

        def lines():
            for line in ["bad line", ">f+++++++++ a.txt"]:
                consumed.append(line)
                yield line

        with pytest.raises(ChangeParseError):
            ChangeSetBuilder().build(lines())

        assert consumed == ["bad line"]

    def test_inner_empty_line_fails(self):
        """An empty line inside the output is not silently skipped."""
        with pytest.raises(ChangeParseError):
            build_change_set(">f+++++++++ a.txt\n\n")

    def test_idempotent(self):
        """Classifying identical input twice yields identical results."""
        builder = ChangeSetBuilder()

        first = builder.build_from_output(MOCK_RSYNC_OUTPUT)
        second = builder.build_from_output(MOCK_RSYNC_OUTPUT)

        assert first == second
        assert first is not second

    def test_to_dict(self):
        """to_dict exposes the three lists."""
        change_set = build_change_set("*deleting   x\n>f+++++++++ y\n")

        assert change_set.to_dict() == {
            "deleted": ["x"],
            "added": ["y"],
            "modified": [],
        }
