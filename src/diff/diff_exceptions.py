"""Exceptions raised while parsing diffs and choosing hunks."""

from typing import Any


class DiffError(Exception):
    """Base exception for diff parsing and hunk selection."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary describing the failing input
        """
        super().__init__(message)
        self.error_details = error_details


class DiffValidationError(DiffError):
    """Raised when parsed hunks overlap or run backwards through the file."""


class DiffHunkNotFoundError(DiffError):
    """Raised when no hunk can be chosen for a line."""
