"""Linear navigation backwards and forwards through commit ancestry."""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Dict, List

from vcs import GitClient


class HistoryMode(Enum):
    """Whether a session shows the working tree or a past commit."""
    WORKING = "working"
    HISTORY = "history"


@dataclass
class HistoryCursor:
    """
    Navigation stack of commits.

    Entries below index are the commits visited so far; the top visible entry
    is stack[index - 1]. Pushing discards anything above index.
    """
    mode: HistoryMode = HistoryMode.WORKING
    stack: List[str] = field(default_factory=list)
    index: int = 0

    def push(self, commit: str) -> None:
        """Push a commit, truncating any forward entries."""
        del self.stack[self.index:]
        self.stack.append(commit)
        self.index = len(self.stack)

    def pop(self) -> str | None:
        """
        Step back down the stack.

        Returns:
            The entry that is now on top, or None if the stack is exhausted
        """
        if self.index <= 0:
            return None

        self.index -= 1
        if self.index == 0:
            return None

        return self.stack[self.index - 1]

    def top(self) -> str | None:
        """Get the entry on top of the stack."""
        if self.index <= 0:
            return None

        return self.stack[self.index - 1]

    def reset(self) -> None:
        """Return to the working tree with an empty stack."""
        self.mode = HistoryMode.WORKING
        self.stack.clear()
        self.index = 0


@dataclass
class HistoryCommit:
    """A commit being shown along with what is needed to diff it."""
    commit: str
    parent: str | None
    message: str


@dataclass
class HistoryStep:
    """Outcome of a navigation request."""
    mode: HistoryMode
    commit: HistoryCommit | None = None  # The commit to show, None for the working tree
    notice: str | None = None  # Set when the request could not be carried out

    @property
    def moved(self) -> bool:
        """Check whether the request changed what is being shown."""
        return self.notice is None


class HistoryNavigator:
    """Walks first-parent ancestry one commit at a time."""

    ROOT_COMMIT_NOTICE = "Already at the root commit"
    WORKING_TREE_NOTICE = "Already showing the working tree"

    def __init__(self, root_path: str, git: GitClient | None = None) -> None:
        """
        Initialize the navigator.

        Args:
            root_path: Repository root
            git: Git client to use, a new one if not given
        """
        self._logger = logging.getLogger("HistoryNavigator")
        self._root_path = root_path
        self._git = git or GitClient()
        self._cursor = HistoryCursor()
        self._commit_cache: Dict[str, HistoryCommit] = {}

    @property
    def cursor(self) -> HistoryCursor:
        """Get the navigation cursor."""
        return self._cursor

    @property
    def mode(self) -> HistoryMode:
        """Get the current mode."""
        return self._cursor.mode

    def reset(self) -> None:
        """Go back to the working tree and forget the navigation stack."""
        self._cursor.reset()

    async def show_commit(self, commit: str) -> HistoryCommit:
        """
        Resolve the parent and subject line of a commit.

        Results are cached per commit.

        Args:
            commit: Full commit hash

        Returns:
            HistoryCommit for the commit
        """
        cached = self._commit_cache.get(commit)
        if cached is not None:
            return cached

        parent = await self._git.parent_commit(commit, self._root_path)
        message = await self._git.commit_message(commit, self._root_path)
        history_commit = HistoryCommit(commit, parent, message or "")
        self._commit_cache[commit] = history_commit
        return history_commit

    async def step_older(self, base: str) -> HistoryStep:
        """
        Move one commit further back in history.

        From the working tree this shows the parent of base; from a commit it
        shows that commit's parent.

        Args:
            base: The commit the working tree is compared against

        Returns:
            The step taken, or a notice if there is no older commit
        """
        if self._cursor.mode == HistoryMode.WORKING:
            current = base

        else:
            current = self._cursor.top() or base

        parent = await self._git.parent_commit(current, self._root_path)
        if parent is None:
            self._logger.debug("No parent for %s", current)
            return HistoryStep(self._cursor.mode, notice=self.ROOT_COMMIT_NOTICE)

        if self._cursor.mode == HistoryMode.WORKING:
            self._cursor.push(base)
            self._cursor.mode = HistoryMode.HISTORY

        self._cursor.push(parent)
        return HistoryStep(HistoryMode.HISTORY, await self.show_commit(parent))

    async def step_newer(self) -> HistoryStep:
        """
        Move one commit forward again.

        Stepping past the commit history was entered from returns to the
        working tree.

        Returns:
            The step taken, or a notice if already showing the working tree
        """
        if self._cursor.mode == HistoryMode.WORKING:
            return HistoryStep(HistoryMode.WORKING, notice=self.WORKING_TREE_NOTICE)

        commit = self._cursor.pop()
        if commit is None or self._cursor.index <= 1:
            self._cursor.reset()
            return HistoryStep(HistoryMode.WORKING)

        return HistoryStep(HistoryMode.HISTORY, await self.show_commit(commit))
