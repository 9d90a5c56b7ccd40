"""Comparison of a file's live content against its content at a commit."""

from dataclasses import dataclass, field
from enum import Enum
import logging
import os
import tempfile
from typing import List

from diff import DiffHunk, DiffHunkSelector, DiffParser
from vcs.vcs_exceptions import VCSFileDiffError, VCSRepositoryNotFoundError
from vcs.vcs_git_client import GitClient
from vcs.vcs_types import BlobState


class FileDiffKind(Enum):
    """How a file's current content relates to its content at a commit."""
    NO_CHANGES = "no_changes"
    NEW_FILE = "new_file"  # Did not exist at the commit
    DELETED = "deleted"  # Existed at the commit, gone now
    MODIFIED = "modified"
    BINARY = "binary"


@dataclass
class FileDiffResult:
    """Outcome of comparing one file against a commit."""

    kind: FileDiffKind
    relative_path: str
    hunks: List[DiffHunk] = field(default_factory=list)
    hunk_start_lines: List[int] = field(default_factory=list)
    old_content: str = ""  # Content at the commit, kept for deleted files


class FileDiffer:
    """
    Diffs a file, or unsaved text standing in for it, against a commit.

    The historical blob and the live content are written to temporary files
    and compared with `git diff --no-index`, so no working tree file needs to
    match the text being compared.
    """

    def __init__(self, git: GitClient | None = None) -> None:
        """
        Initialize the differ.

        Args:
            git: Git client to use, a new one if not given
        """
        self._logger = logging.getLogger("FileDiffer")
        self._git = git or GitClient()
        self._parser = DiffParser()
        self._selector = DiffHunkSelector()

    async def compare(self, abs_path: str, commit: str, current_text: str | None = None) -> FileDiffResult:
        """
        Compare a file against its content at a commit.

        Args:
            abs_path: Absolute path of the file
            commit: Ref to compare against
            current_text: Live content to use instead of reading the file

        Returns:
            FileDiffResult describing the differences

        Raises:
            VCSRepositoryNotFoundError: If the file is not inside a repository
            VCSRefResolutionError: If the commit does not resolve
            VCSPathError: If the file path cannot be made relative to the root
            VCSFileDiffError: If the historical content or the diff cannot be produced
        """
        root = await self._git.find_repo_root(abs_path)
        if root is None:
            raise VCSRepositoryNotFoundError(abs_path)

        commit_hash = await self._git.resolve_ref(commit, root)
        relative_path = GitClient.relative_path(abs_path, root)

        blob = await self._git.show_file(commit_hash, relative_path, root)
        file_now = os.path.isfile(abs_path)

        if blob.state is BlobState.FAILED:
            raise VCSFileDiffError(
                f"Could not read {relative_path} at {commit}: {blob.error.strip()}",
                {'path': relative_path, 'commit': commit}
            )

        if blob.state is BlobState.MISSING:
            if not file_now and current_text is None:
                return FileDiffResult(FileDiffKind.NO_CHANGES, relative_path)

            cur_text = current_text if current_text is not None else self._read_file(abs_path)
            hunks = await self._diff_texts(root, None, cur_text)
            return self._result(FileDiffKind.NEW_FILE, relative_path, hunks)

        if not file_now and current_text is None:
            return FileDiffResult(FileDiffKind.DELETED, relative_path, old_content=blob.content)

        cur_text = current_text if current_text is not None else self._read_file(abs_path)
        if cur_text == blob.content:
            return FileDiffResult(FileDiffKind.NO_CHANGES, relative_path)

        if '\0' in cur_text or '\0' in blob.content:
            return FileDiffResult(FileDiffKind.BINARY, relative_path)

        hunks = await self._diff_texts(root, blob.content, cur_text)
        if hunks is None:
            return FileDiffResult(FileDiffKind.BINARY, relative_path)

        return self._result(FileDiffKind.MODIFIED, relative_path, hunks)

    def _result(self, kind: FileDiffKind, relative_path: str, hunks: List[DiffHunk] | None) -> FileDiffResult:
        """Build a result carrying hunks and their start lines."""
        hunks = hunks or []
        return FileDiffResult(kind, relative_path, hunks, self._selector.hunk_start_lines(hunks))

    def _read_file(self, abs_path: str) -> str:
        """Read a file's current content."""
        try:
            with open(abs_path, encoding='utf-8', errors='replace', newline='') as f:
                return f.read()

        except OSError as e:
            raise VCSFileDiffError(f"Could not read {abs_path}: {e}", {'path': abs_path}) from e

    async def _diff_texts(self, root: str, old_text: str | None, new_text: str) -> List[DiffHunk] | None:
        """
        Diff two texts through temporary files.

        Args:
            root: Directory to run git in
            old_text: Old content, or None to diff against /dev/null
            new_text: New content

        Returns:
            Parsed hunks, or None if git reported binary content

        Raises:
            VCSFileDiffError: If git diff fails
        """
        temp_paths: List[str] = []
        try:
            old_path = "/dev/null"
            if old_text is not None:
                old_path = self._write_temp(old_text)
                temp_paths.append(old_path)

            new_path = self._write_temp(new_text)
            temp_paths.append(new_path)

            result = await self._git.diff_no_index(root, old_path, new_path, text=old_text is not None)

        finally:
            for path in temp_paths:
                self._remove_temp(path)

        if result.stdout.startswith("Binary files") or "\nBinary files " in result.stdout:
            return None

        # --no-index exits with 1 when the files differ
        if result.returncode not in (0, 1):
            raise VCSFileDiffError(
                f"git diff failed: {result.stderr.strip()}",
                {'returncode': result.returncode}
            )

        return self._parser.parse(self._strip_headers(result.stdout))

    def _write_temp(self, content: str) -> str:
        """
        Write content to a temporary file and return its path.

        Raises:
            VCSFileDiffError: If the file cannot be written; nothing is left behind
        """
        try:
            fd, path = tempfile.mkstemp(prefix='diffwatch-')

        except OSError as e:
            raise VCSFileDiffError(f"Could not create temp file: {e}") from e

        try:
            with open(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(content)

        except (OSError, UnicodeEncodeError) as e:
            self._remove_temp(path)
            raise VCSFileDiffError(f"Could not write temp file: {e}") from e

        return path

    def _remove_temp(self, path: str) -> None:
        """Remove a temporary file, logging rather than raising on failure."""
        try:
            os.unlink(path)

        except OSError as e:
            self._logger.warning("Failed to remove temp file %s: %s", path, str(e))

    def _strip_headers(self, diff_text: str) -> str:
        """Drop the file headers git puts before the first hunk."""
        lines = diff_text.split('\n')
        for i, line in enumerate(lines):
            if line.startswith('@@'):
                return '\n'.join(lines[i:])

        return ""
