"""Shared fixtures and utilities for diff tests."""

import pytest

from diff.diff_hunk_patch_builder import DiffHunkPatchBuilder
from diff.diff_hunk_selector import DiffHunkSelector
from diff.diff_parser import DiffParser
from diff.diff_types import DiffHunk


@pytest.fixture
def parser():
    """Create a diff parser for testing."""
    return DiffParser()


@pytest.fixture
def selector():
    """Create a hunk selector for testing."""
    return DiffHunkSelector()


@pytest.fixture
def builder():
    """Create a single-hunk patch builder for testing."""
    return DiffHunkPatchBuilder()


@pytest.fixture
def two_hunk_patch():
    """A zero-context git patch with two hunks, as `git diff -U0` prints it."""
    return (
        "diff --git a/src/app.py b/src/app.py\n"
        "index 3b18e51..a2c4f9d 100644\n"
        "--- a/src/app.py\n"
        "+++ b/src/app.py\n"
        "@@ -2 +2 @@ def main():\n"
        "-    print('hello')\n"
        "+    print('hello, world')\n"
        "@@ -7,0 +7,2 @@ def main():\n"
        "+    log('done')\n"
        "+    return 0\n"
    )


class DiffTestHelpers:
    """Helper utilities for diff testing."""

    @staticmethod
    def make_hunk(new_start: int, new_count: int, old_start: int = 1, old_count: int = 1) -> DiffHunk:
        """Create a hunk with a matching header and no lines."""
        header = f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"
        return DiffHunk(old_start, old_count, new_start, new_count, header, [])


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return DiffTestHelpers
