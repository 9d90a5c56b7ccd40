"""Asynchronous construction of status trees from git output."""

import asyncio
import logging
from typing import Callable, Dict, Set

from vcs import GitClient, VCSCommandError

from status_tree.status_code import StatusCode
from status_tree.status_parser import parse_name_status, parse_porcelain_status
from status_tree.status_tree import StatusTree
from status_tree.status_tree_error import StatusTreeBuildError


class StatusTreeBuilder:
    """
    Builds a StatusTree for a repository root.

    The set of changed paths depends on which refs are given:

    - no ref: live working tree status only
    - commit_ref only: working tree against that ref, merged with live status
    - commit_ref and parent_ref: the changes introduced by commit_ref
    - commit_ref only, in history mode: a root commit, diffed against the empty tree

    Commit views are always built from the changed set alone; the working tree
    view can also list every file on disk.
    """

    def __init__(self, git: GitClient | None = None) -> None:
        """
        Initialize the builder.

        Args:
            git: Git client to use, a new one if not given
        """
        self._logger = logging.getLogger("StatusTreeBuilder")
        self._git = git or GitClient()
        self._tasks: Set[asyncio.Task] = set()

    async def _working_tree_changes(self, root_path: str, commit_ref: str | None) -> Dict[str, StatusCode]:
        """Collect changes between the working tree and a ref (or the index if no ref)."""
        diff_output = None
        if commit_ref:
            diff_output = await self._git.diff_name_status(root_path, commit_ref)

        status_output = await self._git.status_porcelain(root_path)
        changed = parse_porcelain_status(status_output, root_path)
        if diff_output is None:
            return changed

        for path, status in parse_name_status(diff_output, root_path).items():
            if status == StatusCode.MODIFIED and path not in changed:
                # Only the commits since the ref touched this file
                changed[path] = StatusCode.COMMITTED
                continue

            changed[path] = status

        return changed

    async def _collect_changes(
        self,
        root_path: str,
        commit_ref: str | None,
        parent_ref: str | None,
        history_mode: bool
    ) -> Dict[str, StatusCode]:
        if commit_ref and parent_ref:
            output = await self._git.diff_name_status(root_path, parent_ref, commit_ref)
            return parse_name_status(output, root_path)

        if commit_ref and history_mode:
            output = await self._git.diff_name_status(root_path, GitClient.EMPTY_TREE_HASH, commit_ref)
            return parse_name_status(output, root_path)

        return await self._working_tree_changes(root_path, commit_ref)

    async def build(
        self,
        root_path: str,
        diff_only: bool,
        commit_ref: str | None = None,
        parent_ref: str | None = None,
        history_mode: bool = False
    ) -> StatusTree:
        """
        Build a status tree.

        Args:
            root_path: Repository root
            diff_only: List only changed paths rather than every file on disk
            commit_ref: Ref to compare against, or the commit to show
            parent_ref: Parent of commit_ref when showing a commit
            history_mode: True when commit_ref is a commit being shown rather than a base

        Returns:
            The finished tree

        Raises:
            StatusTreeBuildError: If a git command fails
        """
        try:
            changed = await self._collect_changes(root_path, commit_ref, parent_ref, history_mode)

        except VCSCommandError as e:
            raise StatusTreeBuildError(
                f"Failed to read repository status: {e.stderr.strip() or e}",
                {
                    "command": e.command,
                    "returncode": e.returncode,
                    "stderr": e.stderr,
                }
            ) from e

        tree = StatusTree(root_path)
        showing_commit = bool(commit_ref and (parent_ref or history_mode))
        if diff_only or showing_commit:
            for path in sorted(changed):
                tree.add_file(path, changed[path])

        else:
            tree.scan_directory()
            tree.apply_statuses(changed)

        tree.update_parent_statuses()
        tree.sort()

        self._logger.debug("Built tree for %s with %d changed paths", root_path, len(changed))
        return tree

    def build_with_callback(
        self,
        callback: Callable[[bool, StatusTree | None], None],
        root_path: str,
        diff_only: bool,
        commit_ref: str | None = None,
        parent_ref: str | None = None,
        history_mode: bool = False
    ) -> asyncio.Task:
        """
        Start a build and report its outcome to a callback.

        The callback receives (True, tree) on success and (False, None) on failure.
        Must be called while an event loop is running.

        Returns:
            The task running the build
        """
        task = asyncio.create_task(self.build(root_path, diff_only, commit_ref, parent_ref, history_mode))
        self._tasks.add(task)

        def task_done_callback(task: asyncio.Task) -> None:
            self._tasks.discard(task)
            if task.cancelled():
                return

            exc = task.exception()
            if exc is not None:
                self._logger.warning("Tree build for %s failed: %s", root_path, str(exc))

            try:
                if exc is None:
                    callback(True, task.result())

                else:
                    callback(False, None)

            except Exception:
                self._logger.exception("Error in build callback for %s", root_path)

        task.add_done_callback(task_done_callback)
        return task
