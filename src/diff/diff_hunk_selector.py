"""Hunk selection and navigation by line number."""

from typing import List

from diff.diff_exceptions import DiffHunkNotFoundError
from diff.diff_types import DiffHunk


class DiffHunkSelector:
    """Maps line numbers in the displayed file onto hunks."""

    def pick_hunk_for_cursor(self, hunks: List[DiffHunk], cursor_line: int) -> DiffHunk | None:
        """
        Choose the hunk a cursor line belongs to.

        A hunk matches if its new-file range contains the line. A pure deletion
        has no line of its own, so it matches both at its start line and at the
        line just before it. If nothing matches, the hunk whose anchor is
        nearest to the cursor wins (the earlier hunk on a tie).

        Args:
            hunks: Hunks of one file patch
            cursor_line: 1-based line number in the current file

        Returns:
            The chosen hunk, or None only if there are no hunks
        """
        best: DiffHunk | None = None
        best_distance = 0

        for hunk in hunks:
            if hunk.is_pure_deletion():
                if cursor_line in (hunk.new_start, max(1, hunk.new_start - 1)):
                    return hunk

            elif hunk.new_start <= cursor_line < hunk.new_range_end():
                return hunk

            distance = abs(cursor_line - hunk.anchor_line())
            if best is None or distance < best_distance:
                best = hunk
                best_distance = distance

        return best

    def require_hunk_for_cursor(self, hunks: List[DiffHunk], cursor_line: int) -> DiffHunk:
        """
        Choose the hunk a cursor line belongs to, failing if there is none.

        Args:
            hunks: Hunks of one file patch
            cursor_line: 1-based line number in the current file

        Returns:
            The chosen hunk

        Raises:
            DiffHunkNotFoundError: If no hunk can be chosen
        """
        hunk = self.pick_hunk_for_cursor(hunks, cursor_line)
        if hunk is None:
            raise DiffHunkNotFoundError(
                "Could not determine current hunk",
                {'cursor_line': cursor_line, 'hunk_count': len(hunks)}
            )

        return hunk

    def hunk_start_lines(self, hunks: List[DiffHunk]) -> List[int]:
        """
        Get the lines where each contiguous changed block starts in the new file.

        A hunk with context lines can hold several changed blocks; each block
        start is reported. Deleted lines do not advance the new-file position,
        so a deletion-only block starts at the line that now follows it.

        Args:
            hunks: Parsed hunks for one file

        Returns:
            Sorted, de-duplicated 1-based line numbers
        """
        starts = set()
        for hunk in hunks:
            line_idx = max(hunk.new_start - 1, 0)
            in_changed_block = False

            for line in hunk.diff_lines():
                if line.is_addition() or line.is_deletion():
                    if not in_changed_block:
                        starts.add(line_idx + 1)
                        in_changed_block = True

                else:
                    in_changed_block = False

                if not line.is_deletion():
                    line_idx += 1

        return sorted(starts)

    def next_hunk_line(self, start_lines: List[int], cursor_line: int) -> int | None:
        """
        Get the next hunk start after the cursor, wrapping to the first.

        Args:
            start_lines: Sorted hunk start lines
            cursor_line: 1-based cursor line

        Returns:
            Target line, or None if there are no hunks
        """
        if not start_lines:
            return None

        for line in start_lines:
            if line > cursor_line:
                return line

        return start_lines[0]

    def previous_hunk_line(self, start_lines: List[int], cursor_line: int) -> int | None:
        """
        Get the previous hunk start before the cursor, wrapping to the last.

        Args:
            start_lines: Sorted hunk start lines
            cursor_line: 1-based cursor line

        Returns:
            Target line, or None if there are no hunks
        """
        if not start_lines:
            return None

        for line in reversed(start_lines):
            if line < cursor_line:
                return line

        return start_lines[-1]
