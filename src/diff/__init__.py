"""
Unified diff parsing and single-hunk patch reconstruction.

This package turns `git diff` output into addressable hunks, picks the hunk
under a cursor line and rebuilds a standalone patch for exactly one hunk.
"""

from diff.diff_exceptions import (
    DiffError,
    DiffHunkNotFoundError,
    DiffValidationError,
)
from diff.diff_hunk_patch_builder import DiffHunkPatchBuilder
from diff.diff_hunk_selector import DiffHunkSelector
from diff.diff_parser import DiffParser
from diff.diff_types import (
    DiffHunk,
    DiffLine,
    FilePatch,
)

__all__ = [
    # Exceptions
    'DiffError',
    'DiffValidationError',
    'DiffHunkNotFoundError',
    # Types
    'DiffLine',
    'DiffHunk',
    'FilePatch',
    # Core classes
    'DiffParser',
    'DiffHunkPatchBuilder',
    'DiffHunkSelector',
]
