"""Unified diff parsing."""

import logging
import re
from typing import List, Match

from diff.diff_exceptions import DiffValidationError
from diff.diff_types import DiffHunk, FilePatch


class DiffParser:
    """
    Parser for unified diff format as produced by `git diff`.

    Parsing is deliberately lenient: the upstream diff output is trusted, so
    omitted or empty hunk counts default to 1 and unknown lines are skipped
    rather than reported.
    """

    # @@ -old_start[,old_count] +new_start[,new_count] @@ optional section heading
    HUNK_HEADER_PATTERN = re.compile(r'^@@\s+-(\d+)(?:,(\d*))?\s+\+(\d+)(?:,(\d*))?\s+@@')

    def __init__(self) -> None:
        """Initialize the parser."""
        self._logger = logging.getLogger("DiffParser")

    def parse(self, diff_text: str) -> List[DiffHunk]:
        """
        Parse unified diff text into structured hunks.

        Only lines tagged with '+', '-' or ' ' are kept as hunk content; file
        headers, mode lines and "no newline" markers are ignored.

        Args:
            diff_text: Unified diff format text

        Returns:
            List of parsed hunks, empty if the text contains no hunks
        """
        if not diff_text or not diff_text.strip():
            return []

        hunks: List[DiffHunk] = []
        current: DiffHunk | None = None

        for line in diff_text.splitlines():
            if line.startswith('@@'):
                if current is not None:
                    hunks.append(current)

                current = self._parse_header(line)
                continue

            if current is None:
                continue

            if line[:1] in ('+', '-', ' '):
                current.lines.append(line)

        if current is not None:
            hunks.append(current)

        return hunks

    def parse_full_patch(self, patch_text: str) -> FilePatch:
        """
        Parse a single file's patch, keeping every line verbatim.

        Everything before the first hunk header becomes the patch preamble.
        Hunks are split strictly on header lines and retain all of their lines,
        including blank ones and "no newline" markers, so any one of them can be
        written back out unchanged.

        Args:
            patch_text: Patch text for one file

        Returns:
            FilePatch with header lines and hunks
        """
        patch = FilePatch()
        if not patch_text:
            return patch

        current: DiffHunk | None = None
        for line in patch_text.split('\n'):
            match = self.HUNK_HEADER_PATTERN.match(line)
            if match:
                if current is not None:
                    patch.hunks.append(current)

                current = self._hunk_from_match(match, line)
                continue

            if current is None:
                patch.header_lines.append(line)

            else:
                current.lines.append(line)

        if current is not None:
            patch.hunks.append(current)

        return patch

    def check_hunk_order(self, hunks: List[DiffHunk]) -> None:
        """
        Check that hunks ascend by new start line and do not overlap.

        Args:
            hunks: Hunks in the order they appear in one file's patch

        Raises:
            DiffValidationError: If two neighbouring hunks are out of order or overlap
        """
        for i in range(len(hunks) - 1):
            hunk1 = hunks[i]
            hunk2 = hunks[i + 1]

            if hunk2.new_start <= hunk1.new_start or hunk1.new_range_end() > hunk2.new_start:
                error_details = {
                    'phase': 'validation',
                    'reason': 'Overlapping or unordered hunks detected',
                    'hunk1_range': [hunk1.new_start, hunk1.new_range_end()],
                    'hunk2_range': [hunk2.new_start, hunk2.new_range_end()],
                }

                raise DiffValidationError('Hunks overlap or are out of order', error_details)

    def _parse_header(self, header: str) -> DiffHunk | None:
        """
        Parse a hunk header line.

        Args:
            header: Line starting with "@@"

        Returns:
            A new, empty hunk, or None if the line is not a valid header
        """
        match = self.HUNK_HEADER_PATTERN.match(header)
        if not match:
            # Content up to the next valid header has nowhere sensible to go
            self._logger.debug("Skipping unparseable hunk header: %s", header)
            return None

        return self._hunk_from_match(match, header)

    def _hunk_from_match(self, match: Match[str], header: str) -> DiffHunk:
        """Build an empty hunk from a header regex match."""
        old_start = int(match.group(1))
        old_count = int(match.group(2)) if match.group(2) else 1
        new_start = int(match.group(3))
        new_count = int(match.group(4)) if match.group(4) else 1

        return DiffHunk(old_start, old_count, new_start, new_count, header, [])
