"""Shared dataclasses for diff operations."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class DiffLine:
    """Represents a single tagged line in a diff hunk."""

    type: str  # ' ' for context, '-' for deletion, '+' for addition
    content: str  # The actual line content (without the prefix character)

    @classmethod
    def from_text(cls, text: str) -> 'DiffLine':
        """
        Split a raw hunk line into its tag and content.

        Args:
            text: Raw line as it appears in the diff, including the tag character

        Returns:
            DiffLine for the text
        """
        return cls(text[:1], text[1:])

    def is_addition(self) -> bool:
        """Check whether this line was added."""
        return self.type == '+'

    def is_deletion(self) -> bool:
        """Check whether this line was removed."""
        return self.type == '-'

    def is_context(self) -> bool:
        """Check whether this line is unchanged context."""
        return self.type == ' '


@dataclass
class DiffHunk:
    """
    Represents a single hunk from a unified diff.

    `lines` keeps every line exactly as it appeared in the diff (tag character
    included) so that a hunk can later be written back out byte for byte.
    """

    old_start: int  # Starting line number in original file (1-indexed)
    old_count: int  # Number of lines in original file
    new_start: int  # Starting line number in new file (1-indexed)
    new_count: int  # Number of lines in new file
    header: str = ""  # The raw "@@ ... @@" line
    lines: List[str] = field(default_factory=list)

    def diff_lines(self) -> List[DiffLine]:
        """
        Get the tagged lines of this hunk.

        Lines that carry no diff tag (such as "\\ No newline at end of file"
        markers or trailing blanks kept for fidelity) are skipped.

        Returns:
            List of DiffLine objects in hunk order
        """
        return [DiffLine.from_text(line) for line in self.lines if line[:1] in (' ', '+', '-')]

    def new_range_end(self) -> int:
        """Get the first line number after this hunk's range in the new file."""
        return self.new_start + self.new_count

    def is_pure_deletion(self) -> bool:
        """Check whether this hunk leaves no lines behind in the new file."""
        return self.new_count == 0

    def anchor_line(self) -> int:
        """
        Get the line in the new file this hunk is anchored to.

        A pure deletion has no surviving line, so it is anchored to the line
        just before the removed block.
        """
        if self.is_pure_deletion():
            return max(1, self.new_start - 1)

        return self.new_start


@dataclass
class FilePatch:
    """A single file's patch: the preamble before the first hunk plus its hunks."""

    header_lines: List[str] = field(default_factory=list)
    hunks: List[DiffHunk] = field(default_factory=list)

    def has_path_markers(self) -> bool:
        """Check whether the preamble carries both old and new file path markers."""
        has_old = any(line.startswith('--- ') for line in self.header_lines)
        has_new = any(line.startswith('+++ ') for line in self.header_lines)
        return has_old and has_new
