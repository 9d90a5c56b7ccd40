"""Shared types for version control operations."""

from dataclasses import dataclass
from enum import Enum


class BlobState(Enum):
    """Outcome of looking up a file's content at a commit."""
    FOUND = "found"  # The path existed at the commit
    MISSING = "missing"  # The path did not exist at the commit
    FAILED = "failed"  # The lookup itself failed


@dataclass
class BlobLookup:
    """A file's content at a commit, or why there is none."""
    state: BlobState
    content: str = ""
    error: str = ""


class HunkAction(Enum):
    """Ways a single hunk can be applied."""
    STAGE = "stage"  # Apply to the index
    UNSTAGE = "unstage"  # Reverse-apply from the index
    REVERT = "revert"  # Reverse-apply to the working tree

    def apply_args(self) -> list[str]:
        """Get the `git apply` flags for this action."""
        if self is HunkAction.STAGE:
            return ["--cached"]

        if self is HunkAction.UNSTAGE:
            return ["--cached", "-R"]

        return ["-R"]

    def reads_index(self) -> bool:
        """Check whether the hunk must be read from the staged diff."""
        return self is HunkAction.UNSTAGE


@dataclass
class PatchApplicationResult:
    """Result of applying a single-hunk patch."""

    success: bool
    message: str
    action: HunkAction | None = None
    error_details: dict | None = None
