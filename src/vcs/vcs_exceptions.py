"""Custom exceptions for version control operations."""

from typing import Any, List


class VCSError(Exception):
    """Base exception for version control operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class VCSCommandError(VCSError):
    """Raised when a git invocation exits with an unexpected code."""

    def __init__(self, command: List[str], returncode: int, stderr: str | None = None):
        """
        Initialize the exception.

        Args:
            command: The command line that failed
            returncode: Its exit code
            stderr: Captured standard error, if any
        """
        message = "Git command failed"
        if command:
            message = f"Git command failed: {' '.join(command)}"

        if stderr and stderr.strip():
            message = f"{message}: {stderr.strip()}"

        super().__init__(message, {'command': command, 'returncode': returncode})
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""


class VCSRefResolutionError(VCSError):
    """Raised when a ref cannot be resolved to a commit."""

    def __init__(self, ref: str):
        """
        Initialize the exception.

        Args:
            ref: The ref that failed to resolve
        """
        super().__init__(f'Could not resolve "{ref}"', {'ref': ref})
        self.ref = ref


class VCSRepositoryNotFoundError(VCSError):
    """Raised when a path is not inside a git repository."""

    def __init__(self, path: str):
        """
        Initialize the exception.

        Args:
            path: The path that was searched from
        """
        super().__init__(f"Not a git repository: {path}", {'path': path})
        self.path = path


class VCSPathError(VCSError):
    """Raised when a file path cannot be expressed relative to the repository root."""

    def __init__(self, path: str, root: str):
        """
        Initialize the exception.

        Args:
            path: The offending file path
            root: The repository root
        """
        super().__init__(
            f"Could not compute file path relative to repo: {path}",
            {'path': path, 'root': root}
        )
        self.path = path
        self.root = root


class VCSFileDiffError(VCSError):
    """Raised when a file cannot be compared against a ref."""
