from typing import Any


class StatusTreeError(Exception):
    """Base exception for status tree errors."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class StatusTreeBuildError(StatusTreeError):
    """Raised when a status or diff command fails while building a tree."""
