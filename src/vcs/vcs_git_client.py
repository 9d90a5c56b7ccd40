"""Thin asynchronous wrappers around git CLI commands."""

import logging
import os
import re
from typing import Dict, Iterable, List, Tuple

from vcs.vcs_exceptions import (
    VCSCommandError,
    VCSPathError,
    VCSRefResolutionError,
)
from vcs.vcs_process_runner import ProcessResult, ProcessRunner
from vcs.vcs_types import BlobLookup, BlobState


class GitClient:
    """Issues the git commands the status tree and hunk actions rely on."""

    # The well-known hash of git's empty tree object
    EMPTY_TREE_HASH = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

    # `git show <ref>:<path>` exits with this code when the path is absent at <ref>
    MISSING_PATH_EXIT_CODE = 128

    # How far up the directory hierarchy to look for a `.git` entry
    MAX_ROOT_SEARCH_DEPTH = 10

    _FULL_HASH_PATTERN = re.compile(r'^[0-9a-f]{40}$')

    def __init__(self, runner: ProcessRunner | None = None, git_executable: str = "git") -> None:
        """
        Initialize the client.

        Args:
            runner: Process runner to use, a new one if not given
            git_executable: Name or path of the git binary
        """
        self._logger = logging.getLogger("GitClient")
        self._runner = runner or ProcessRunner()
        self._git = git_executable
        self._blob_cache: Dict[Tuple[str, str, str], BlobLookup] = {}

    @property
    def runner(self) -> ProcessRunner:
        """Get the process runner used by this client."""
        return self._runner

    async def run_git(
        self,
        args: Iterable[str],
        cwd: str,
        *,
        ok_codes: Tuple[int, ...] = (0,),
        raise_on_error: bool = True
    ) -> ProcessResult:
        """
        Execute a git command and optionally raise on failure.

        Args:
            args: Arguments after the git executable
            cwd: Directory to run in
            ok_codes: Exit codes that count as success
            raise_on_error: Raise VCSCommandError for any other exit code

        Returns:
            The captured result

        Raises:
            VCSCommandError: If the command fails and raise_on_error is set
        """
        command = [self._git, *args]
        result = await self._runner.run(command, cwd)
        if raise_on_error and result.returncode not in ok_codes:
            raise VCSCommandError(command, result.returncode, result.stderr)

        return result

    async def find_repo_root(self, path: str) -> str | None:
        """
        Find the top level of the repository containing a path.

        Args:
            path: A file or directory inside the repository

        Returns:
            Absolute repository root, or None if the path is not in a repository
        """
        start_dir = path if os.path.isdir(path) else os.path.dirname(path)
        if not os.path.isdir(start_dir):
            return None

        result = await self.run_git(["rev-parse", "--show-toplevel"], start_dir, raise_on_error=False)
        if result.ok and result.stdout.strip():
            return result.stdout.strip()

        current = os.path.abspath(start_dir)
        for _ in range(self.MAX_ROOT_SEARCH_DEPTH):
            if os.path.isdir(os.path.join(current, ".git")):
                return current

            parent = os.path.dirname(current)
            if parent == current:
                break

            current = parent

        return None

    @staticmethod
    def relative_path(abs_path: str, root: str) -> str:
        """
        Express an absolute path relative to a repository root, git style.

        Args:
            abs_path: Absolute file path
            root: Absolute repository root

        Returns:
            Forward-slash separated relative path

        Raises:
            VCSPathError: If the path is not strictly inside the root
        """
        norm_root = os.path.normpath(root)
        norm_path = os.path.normpath(abs_path)
        if not norm_path.startswith(norm_root.rstrip(os.sep) + os.sep):
            raise VCSPathError(abs_path, root)

        return os.path.relpath(norm_path, norm_root).replace(os.sep, "/")

    async def resolve_ref(self, ref: str, cwd: str) -> str:
        """
        Resolve a ref to a full commit hash.

        Args:
            ref: Hash, branch, tag or relative expression
            cwd: Directory inside the repository

        Returns:
            Full commit hash

        Raises:
            VCSRefResolutionError: If the ref does not resolve
        """
        result = await self.run_git(["rev-parse", "--verify", ref], cwd, raise_on_error=False)
        if not result.ok or not result.stdout.strip():
            raise VCSRefResolutionError(ref)

        return result.stdout.strip()

    async def parent_commit(self, commit: str, cwd: str) -> str | None:
        """
        Get the first parent of a commit.

        Args:
            commit: Commit to look up
            cwd: Directory inside the repository

        Returns:
            Parent hash, or None for a root commit
        """
        result = await self.run_git(["rev-parse", f"{commit}^"], cwd, raise_on_error=False)
        if not result.ok:
            return None

        return result.stdout.strip() or None

    async def commit_message(self, commit: str, cwd: str) -> str | None:
        """
        Get the one-line subject of a commit.

        Args:
            commit: Commit to look up
            cwd: Directory inside the repository

        Returns:
            Subject line, or None if it cannot be read
        """
        result = await self.run_git(["log", "--format=%s", "-n", "1", commit], cwd, raise_on_error=False)
        if not result.ok:
            return None

        return result.stdout.strip()

    async def head(self, cwd: str) -> str | None:
        """
        Get the commit HEAD points at.

        Args:
            cwd: Directory inside the repository

        Returns:
            HEAD hash, or None if it cannot be read (e.g. no commits yet)
        """
        result = await self.run_git(["rev-parse", "HEAD"], cwd, raise_on_error=False)
        if not result.ok:
            return None

        return result.stdout.strip() or None

    async def status_porcelain(self, cwd: str, untracked_all: bool = True) -> str:
        """
        Get working tree status in porcelain format.

        Args:
            cwd: Directory inside the repository
            untracked_all: List every untracked file instead of untracked directories

        Returns:
            Raw porcelain output

        Raises:
            VCSCommandError: If git status fails
        """
        args = ["status", "--porcelain"]
        if untracked_all:
            args.append("--untracked-files=all")

        result = await self.run_git(args, cwd)
        return result.stdout

    async def diff_name_status(self, cwd: str, *refs: str) -> str:
        """
        Get names and status letters of files changed between refs.

        With one ref the working tree is compared against it; with two, the
        first is compared against the second.

        Args:
            cwd: Directory inside the repository
            *refs: One or two refs

        Returns:
            Raw name-status output

        Raises:
            VCSCommandError: If git diff fails
        """
        result = await self.run_git(["diff", "--name-status", *refs], cwd, ok_codes=(0, 1))
        return result.stdout

    async def diff_patch(self, cwd: str, relative_path: str, cached: bool = False) -> ProcessResult:
        """
        Get a zero-context patch for one file.

        Args:
            cwd: Repository root
            relative_path: File path relative to the root
            cached: Read the staged diff instead of the unstaged one

        Returns:
            The captured result; the caller interprets the exit code
        """
        args = ["diff", "-U0"]
        if cached:
            args.append("--cached")

        args.extend(["--", relative_path])
        return await self.run_git(args, cwd, raise_on_error=False)

    async def diff_no_index(self, cwd: str, old_path: str, new_path: str, text: bool = False) -> ProcessResult:
        """
        Diff two arbitrary files outside of the index.

        Args:
            cwd: Directory to run in
            old_path: Path of the old version (may be /dev/null)
            new_path: Path of the new version
            text: Treat all files as text

        Returns:
            The captured result; exit code 1 means the files differ
        """
        args = ["diff", "--no-index"]
        if text:
            args.append("--text")

        args.extend([old_path, new_path])
        return await self.run_git(args, cwd, raise_on_error=False)

    async def show_file(self, ref: str, relative_path: str, cwd: str) -> BlobLookup:
        """
        Get a file's content at a commit.

        Lookups against full commit hashes are cached, since the content a hash
        points at never changes.

        Args:
            ref: Commit to read from
            relative_path: File path relative to the repository root
            cwd: Repository root

        Returns:
            BlobLookup distinguishing found, missing at that commit, and failed
        """
        cache_key = (cwd, ref, relative_path)
        cached = self._blob_cache.get(cache_key)
        if cached is not None:
            return cached

        result = await self.run_git(["show", f"{ref}:{relative_path}"], cwd, raise_on_error=False)
        if result.ok:
            lookup = BlobLookup(BlobState.FOUND, result.stdout)

        elif result.returncode == self.MISSING_PATH_EXIT_CODE:
            lookup = BlobLookup(BlobState.MISSING, error=result.stderr)

        else:
            return BlobLookup(BlobState.FAILED, error=result.stderr)

        if self._FULL_HASH_PATTERN.match(ref):
            self._blob_cache[cache_key] = lookup

        return lookup

    def clear_cache(self) -> None:
        """Forget all cached file contents."""
        self._blob_cache.clear()

    async def submodule_status(self, cwd: str) -> str:
        """
        Get raw `git submodule status` output.

        Args:
            cwd: Repository root

        Returns:
            Raw output, one line per submodule

        Raises:
            VCSCommandError: If the command fails
        """
        result = await self.run_git(["submodule", "status"], cwd)
        return result.stdout

    async def apply_patch(self, cwd: str, patch_file: str, extra_args: List[str]) -> ProcessResult:
        """
        Apply a zero-context patch file.

        Args:
            cwd: Repository root
            patch_file: Path of the patch file
            extra_args: Mode flags such as --cached and -R

        Returns:
            The captured result
        """
        args = ["apply", "--unidiff-zero", "--whitespace=nowarn", *extra_args, patch_file]
        return await self.run_git(args, cwd, raise_on_error=False)
