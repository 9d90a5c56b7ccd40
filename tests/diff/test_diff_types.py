"""Tests for diff data types."""

from diff.diff_types import DiffLine, DiffHunk, FilePatch


class TestDiffLine:
    """Test DiffLine dataclass."""

    def test_create_context_line(self):
        """Test creating a context line."""
        line = DiffLine(' ', 'def foo():')
        assert line.type == ' '
        assert line.content == 'def foo():'
        assert line.is_context()

    def test_create_deletion_line(self):
        """Test creating a deletion line."""
        line = DiffLine('-', 'old content')
        assert line.is_deletion()
        assert not line.is_addition()

    def test_create_addition_line(self):
        """Test creating an addition line."""
        line = DiffLine('+', 'new content')
        assert line.is_addition()
        assert not line.is_context()

    def test_from_text(self):
        """Test splitting raw text into tag and content."""
        line = DiffLine.from_text('+    return 0')
        assert line.type == '+'
        assert line.content == '    return 0'

    def test_from_text_bare_tag(self):
        """Test that a tag with no content gives empty content."""
        line = DiffLine.from_text('+')
        assert line.type == '+'
        assert line.content == ''

    def test_equality(self):
        """Test DiffLine equality."""
        assert DiffLine(' ', 'content') == DiffLine(' ', 'content')
        assert DiffLine(' ', 'content') != DiffLine('-', 'content')
        assert DiffLine(' ', 'content') != DiffLine(' ', 'different')


class TestDiffHunk:
    """Test DiffHunk dataclass."""

    def test_defaults(self):
        """Test that header and lines have defaults."""
        hunk = DiffHunk(1, 2, 3, 4)
        assert hunk.header == ""
        assert hunk.lines == []

    def test_lines_not_shared(self):
        """Test that each hunk gets its own list of lines."""
        hunk1 = DiffHunk(1, 1, 1, 1)
        hunk2 = DiffHunk(1, 1, 1, 1)
        hunk1.lines.append('+x')
        assert hunk2.lines == []

    def test_diff_lines_skips_untagged(self):
        """Test that marker and blank lines are not reported as diff lines."""
        hunk = DiffHunk(1, 1, 1, 1, "@@ -1 +1 @@", ['-a', '+b', '\\ No newline at end of file', ''])
        assert hunk.diff_lines() == [DiffLine('-', 'a'), DiffLine('+', 'b')]

    def test_new_range_end(self):
        """Test computing the end of the new-file range."""
        assert DiffHunk(1, 1, 5, 3).new_range_end() == 8
        assert DiffHunk(1, 1, 5, 0).new_range_end() == 5

    def test_anchor_line_for_regular_hunk(self):
        """Test that a hunk with new lines is anchored at its start."""
        assert DiffHunk(1, 1, 5, 2).anchor_line() == 5

    def test_anchor_line_for_deletion(self):
        """Test that a deletion is anchored at the line before it."""
        assert DiffHunk(5, 2, 4, 0).anchor_line() == 3

    def test_anchor_line_for_deletion_at_top(self):
        """Test that a deletion at the top of the file is anchored at line 1."""
        assert DiffHunk(1, 2, 0, 0).anchor_line() == 1
        assert DiffHunk(1, 2, 1, 0).anchor_line() == 1


class TestFilePatch:
    """Test FilePatch dataclass."""

    def test_empty(self):
        """Test an empty patch."""
        patch = FilePatch()
        assert patch.header_lines == []
        assert patch.hunks == []
        assert not patch.has_path_markers()

    def test_both_markers(self):
        """Test detection of both path markers."""
        patch = FilePatch(["diff --git a/x b/x", "--- a/x", "+++ b/x"])
        assert patch.has_path_markers()

    def test_single_marker(self):
        """Test that one marker alone is not enough."""
        assert not FilePatch(["--- a/x"]).has_path_markers()
        assert not FilePatch(["+++ b/x"]).has_path_markers()
