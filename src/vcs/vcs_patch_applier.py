"""Single-hunk patch application through `git apply`."""

import logging
import os
import tempfile

from diff import (
    DiffHunkNotFoundError,
    DiffHunkPatchBuilder,
    DiffHunkSelector,
    DiffParser,
    DiffValidationError,
)
from vcs.vcs_git_client import GitClient
from vcs.vcs_types import HunkAction, PatchApplicationResult


class PatchApplier:
    """
    Stages, unstages or reverts one hunk of a file.

    Failures never escape as exceptions from `apply()` or
    `apply_hunk_at_line()`; each comes back as a failed
    PatchApplicationResult with its own message and an `error_details`
    dictionary whose `reason` names the failure.
    """

    _SUCCESS_MESSAGES = {
        HunkAction.STAGE: "Hunk staged",
        HunkAction.UNSTAGE: "Hunk unstaged",
        HunkAction.REVERT: "Hunk reverted",
    }

    def __init__(self, git: GitClient | None = None) -> None:
        """
        Initialize the applier.

        Args:
            git: Git client to use, a new one if not given
        """
        self._logger = logging.getLogger("PatchApplier")
        self._git = git or GitClient()
        self._parser = DiffParser()
        self._builder = DiffHunkPatchBuilder()
        self._selector = DiffHunkSelector()

    @staticmethod
    def is_binary_patch(patch_text: str) -> bool:
        """
        Check whether git flagged a patch as binary.

        Args:
            patch_text: Raw `git diff` output

        Returns:
            True if the patch describes binary content
        """
        return (
            patch_text.startswith("Binary files")
            or "\nBinary files " in patch_text
            or "\nGIT binary patch" in patch_text
        )

    async def apply(self, repo_root: str, patch_text: str, action: HunkAction) -> PatchApplicationResult:
        """
        Apply a single-hunk patch.

        The patch is written to a temporary file that is removed again whatever
        the outcome.

        Args:
            repo_root: Repository root to run `git apply` in
            patch_text: Patch produced by DiffHunkPatchBuilder
            action: Stage, unstage or revert

        Returns:
            PatchApplicationResult describing the outcome
        """
        try:
            fd, patch_path = tempfile.mkstemp(suffix='.patch', prefix='diffwatch-')

        except OSError as e:
            self._logger.error("Failed to create patch file: %s", str(e))
            return self._failure(action, 'write_failed', f"Could not write patch file: {e}")

        try:
            try:
                with open(fd, 'w', encoding='utf-8', newline='') as f:
                    f.write(patch_text)

            except (OSError, UnicodeEncodeError) as e:
                self._logger.error("Failed to write patch file: %s", str(e))
                return self._failure(action, 'write_failed', f"Could not write patch file: {e}")

            result = await self._git.apply_patch(repo_root, patch_path, action.apply_args())

        finally:
            try:
                os.unlink(patch_path)

            except OSError as e:
                self._logger.warning("Failed to remove patch file %s: %s", patch_path, str(e))

        if not result.ok:
            message = result.stderr.strip() or result.stdout.strip()
            self._logger.warning("git apply (%s) failed: %s", action.value, message)
            return self._failure(action, 'apply_failed', f"git apply failed: {message}")

        self._logger.debug("Applied hunk (%s) in %s", action.value, repo_root)
        return PatchApplicationResult(True, self._SUCCESS_MESSAGES[action], action)

    async def apply_hunk_at_line(
        self,
        repo_root: str,
        abs_path: str,
        cursor_line: int,
        action: HunkAction
    ) -> PatchApplicationResult:
        """
        Apply the hunk under a cursor line.

        Args:
            repo_root: Repository root
            abs_path: Absolute path of the file
            cursor_line: 1-based line in the file as currently displayed
            action: Stage, unstage or revert

        Returns:
            PatchApplicationResult describing the outcome

        Raises:
            VCSPathError: If abs_path is not inside repo_root
        """
        relative_path = GitClient.relative_path(abs_path, repo_root)

        result = await self._git.diff_patch(repo_root, relative_path, cached=action.reads_index())
        if not result.ok:
            return self._failure(action, 'diff_failed', result.stderr.strip() or "git diff failed")

        patch_text = result.stdout
        if not patch_text:
            return self._failure(action, 'no_diff', "No diff for file")

        # Binary content has no hunks to isolate
        if self.is_binary_patch(patch_text):
            return self._failure(action, 'binary', "Binary patch not supported")

        file_patch = self._parser.parse_full_patch(patch_text)
        if not file_patch.hunks:
            return self._failure(action, 'no_hunks', "No hunks found for file")

        try:
            self._parser.check_hunk_order(file_patch.hunks)

        except DiffValidationError as e:
            return self._failure(action, 'invalid_hunks', str(e))

        try:
            hunk = self._selector.require_hunk_for_cursor(file_patch.hunks, cursor_line)

        except DiffHunkNotFoundError as e:
            self._logger.debug("No hunk for line %d: %s", cursor_line, str(e))
            return self._failure(action, 'no_hunk_at_cursor', "Could not determine current hunk")

        single_hunk_patch = self._builder.build(relative_path, file_patch, hunk)
        return await self.apply(repo_root, single_hunk_patch, action)

    def _failure(self, action: HunkAction, reason: str, message: str) -> PatchApplicationResult:
        """Build a failed result."""
        return PatchApplicationResult(
            success=False,
            message=message,
            action=action,
            error_details={'reason': reason}
        )
