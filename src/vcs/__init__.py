"""
Git command execution, single-hunk patch application and file comparison.

Everything here shells out to git through an asyncio-based process runner;
nothing blocks the event loop while a command runs.
"""

from vcs.vcs_exceptions import (
    VCSCommandError,
    VCSError,
    VCSFileDiffError,
    VCSPathError,
    VCSRefResolutionError,
    VCSRepositoryNotFoundError,
)
from vcs.vcs_file_differ import FileDiffer, FileDiffKind, FileDiffResult
from vcs.vcs_git_client import GitClient
from vcs.vcs_patch_applier import PatchApplier
from vcs.vcs_process_runner import ProcessResult, ProcessRunner
from vcs.vcs_types import BlobLookup, BlobState, HunkAction, PatchApplicationResult

__all__ = [
    # Exceptions
    'VCSError',
    'VCSCommandError',
    'VCSRefResolutionError',
    'VCSRepositoryNotFoundError',
    'VCSPathError',
    'VCSFileDiffError',
    # Types
    'BlobLookup',
    'BlobState',
    'HunkAction',
    'PatchApplicationResult',
    'ProcessResult',
    'FileDiffKind',
    'FileDiffResult',
    # Core classes
    'ProcessRunner',
    'GitClient',
    'PatchApplier',
    'FileDiffer',
]
