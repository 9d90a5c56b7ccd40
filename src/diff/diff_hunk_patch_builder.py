"""Single-hunk patch reconstruction."""

from typing import List

from diff.diff_types import DiffHunk, FilePatch


class DiffHunkPatchBuilder:
    """
    Builds a standalone patch that contains exactly one hunk of a file patch.

    Isolating a hunk this way is what lets one change be staged, unstaged or
    reverted without touching the other hunks in the same file.
    """

    def build(self, relative_path: str, file_patch: FilePatch, hunk: DiffHunk) -> str:
        """
        Build a single-hunk patch document.

        Args:
            relative_path: Path of the file relative to the repository root
            file_patch: The full patch the hunk was taken from
            hunk: The hunk to isolate

        Returns:
            Patch text ending in exactly one newline
        """
        if file_patch.has_path_markers():
            lines: List[str] = list(file_patch.header_lines)

        else:
            # A lone marker would end up duplicated next to the synthesized pair
            lines = [
                line for line in file_patch.header_lines
                if not line.startswith('--- ') and not line.startswith('+++ ')
            ]
            lines.append(f"--- a/{relative_path}")
            lines.append(f"+++ b/{relative_path}")

        lines.append(hunk.header)
        lines.extend(hunk.lines)

        # git apply is newline sensitive: exactly one trailing newline
        return "\n".join(lines).rstrip("\n") + "\n"
