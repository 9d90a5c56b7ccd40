"""A status view of one repository, with history navigation and hunk actions."""

from enum import Enum, auto
import logging
from typing import Any, Callable, Dict, List, Set
import uuid

from vcs import (
    FileDiffer, FileDiffKind, FileDiffResult, GitClient, HunkAction, PatchApplicationResult,
    PatchApplier, VCSError, VCSPathError, VCSRefResolutionError
)

from status_tree.status_change_detector import ChangeDetector, ChangeDetectorEvent
from status_tree.status_history import HistoryCommit, HistoryMode, HistoryNavigator, HistoryStep
from status_tree.status_node import StatusNode
from status_tree.status_session_log_level import SessionLogLevel
from status_tree.status_session_message import SessionMessage
from status_tree.status_submodule_scanner import SubmoduleScanner
from status_tree.status_tree import StatusTree
from status_tree.status_tree_builder import StatusTreeBuilder
from status_tree.status_tree_error import StatusTreeBuildError
from status_tree.status_tree_settings import StatusTreeSettings


class SessionEvent(Enum):
    """Events that can be emitted by the Session class."""
    TREE_UPDATED = auto()       # A rebuilt tree replaced the previous one
    MESSAGE_ADDED = auto()      # A user-visible message was added
    HISTORY_CHANGED = auto()    # The session moved between working tree and commits


class Session:
    """
    One open status view of a repository.

    A session resolves its base ref, owns the current tree, the history cursor,
    the change detector and its message history. Rebuilds are not serialized;
    whichever finishes last provides the tree. Anything that completes after
    close() is discarded.
    """

    def __init__(
        self,
        path: str,
        ref: str | None = None,
        settings: StatusTreeSettings | None = None,
        git: GitClient | None = None
    ) -> None:
        """
        Initialize the session.

        Args:
            path: A path inside the repository to show
            ref: Ref to compare the working tree against, settings.default_ref if not given
            settings: Session settings, defaults if not given
            git: Git client to use, a new one if not given
        """
        self.session_id = str(uuid.uuid4())
        self._logger = logging.getLogger("Session")
        self._path = path
        self._settings = settings or StatusTreeSettings()
        self._ref_name = ref or self._settings.default_ref
        self._git = git or GitClient()
        self._builder = StatusTreeBuilder(self._git)
        self._scanner = SubmoduleScanner(self._git)
        self._differ = FileDiffer(self._git)
        self._applier = PatchApplier(self._git)

        self._root_path: str | None = None
        self._base_ref: str | None = None
        self._navigator: HistoryNavigator | None = None
        self._detector: ChangeDetector | None = None
        self._current_commit: HistoryCommit | None = None
        self._tree: StatusTree | None = None
        self._messages: List[SessionMessage] = []
        self._closed = False

        self._callbacks: Dict[SessionEvent, Set[Callable]] = {
            event: set() for event in SessionEvent
        }

    def register_callback(self, event: SessionEvent, callback: Callable) -> None:
        """
        Register a callback for a specific event.

        Args:
            event: The event to register for
            callback: The coroutine function to call when the event occurs
        """
        self._callbacks[event].add(callback)

    def unregister_callback(self, event: SessionEvent, callback: Callable) -> None:
        """
        Unregister a callback for a specific event.

        Args:
            event: The event to unregister from
            callback: The callback function to remove
        """
        if callback in self._callbacks[event]:
            self._callbacks[event].remove(callback)

    async def _trigger_event(self, event: SessionEvent, *args: Any, **kwargs: Any) -> None:
        """
        Trigger all callbacks registered for an event.

        Args:
            event: The event to trigger
            *args: Arguments to pass to callbacks
            **kwargs: Keyword arguments to pass to callbacks
        """
        for callback in list(self._callbacks[event]):
            try:
                await callback(*args, **kwargs)

            except Exception:
                self._logger.exception("Error in callback for %s", event)

    async def _add_message(self, level: SessionLogLevel, content: str) -> SessionMessage:
        message = SessionMessage.create(level, content, session_id=self.session_id)
        self._messages.append(message)
        self._logger.log(level.logging_level(), "Session %s: %s", self.session_id, content)
        await self._trigger_event(SessionEvent.MESSAGE_ADDED, message)
        return message

    @property
    def root_path(self) -> str | None:
        """Get the repository root, once started."""
        return self._root_path

    @property
    def base_ref(self) -> str | None:
        """Get the resolved hash the working tree is compared against."""
        return self._base_ref

    @property
    def tree(self) -> StatusTree | None:
        """Get the most recently built tree."""
        return self._tree

    @property
    def mode(self) -> HistoryMode:
        """Get whether the session shows the working tree or a commit."""
        if self._navigator is None:
            return HistoryMode.WORKING

        return self._navigator.mode

    @property
    def current_commit(self) -> HistoryCommit | None:
        """Get the commit being shown, None when showing the working tree."""
        return self._current_commit

    @property
    def navigator(self) -> HistoryNavigator | None:
        """Get the history navigator, once started."""
        return self._navigator

    @property
    def detector(self) -> ChangeDetector | None:
        """Get the change detector, once started."""
        return self._detector

    @property
    def closed(self) -> bool:
        """Check whether the session has been closed."""
        return self._closed

    def get_messages(self) -> List[SessionMessage]:
        """Get a copy of all messages raised by this session."""
        return self._messages.copy()

    async def start(self) -> bool:
        """
        Locate the repository, resolve the base ref and build the first tree.

        Starts the change detector if auto refresh is enabled.

        Returns:
            True if the session is ready; False if the path or ref is unusable
        """
        root = await self._git.find_repo_root(self._path)
        if root is None:
            await self._add_message(SessionLogLevel.ERROR, f"Not a git repository: {self._path}")
            return False

        try:
            base_ref = await self._git.resolve_ref(self._ref_name, root)

        except VCSRefResolutionError as e:
            await self._add_message(SessionLogLevel.ERROR, str(e))
            return False

        if self._closed:
            return False

        self._root_path = root
        self._base_ref = base_ref
        self._navigator = HistoryNavigator(root, self._git)
        self._detector = ChangeDetector(
            root,
            self._git,
            refresh_interval=self._settings.refresh_interval,
            submodules_enabled=self._settings.submodules_enabled,
            scanner=self._scanner
        )
        self._detector.register_callback(ChangeDetectorEvent.HEAD_CHANGED, self._handle_head_changed)
        self._detector.register_callback(ChangeDetectorEvent.STATUS_CHANGED, self._handle_status_changed)

        self._logger.debug("Session %s started at %s against %s", self.session_id, root, base_ref)
        built = await self.refresh()

        if self._settings.auto_refresh and not self._closed:
            self._detector.start()

        return built

    async def refresh(self) -> bool:
        """
        Rebuild the tree for whatever the session is showing.

        Returns:
            True if a new tree was installed
        """
        if self._closed or self._root_path is None:
            return False

        commit = self._current_commit
        try:
            if commit is None:
                tree = await self._builder.build(
                    self._root_path,
                    self._settings.diff_only,
                    commit_ref=self._base_ref
                )

            else:
                tree = await self._builder.build(
                    self._root_path,
                    True,
                    commit_ref=commit.commit,
                    parent_ref=commit.parent,
                    history_mode=True
                )

        except StatusTreeBuildError as e:
            if self._closed:
                return False

            await self._add_message(SessionLogLevel.ERROR, str(e))
            return False

        if commit is None and self._settings.submodules_enabled and not self._closed:
            tree.merge_submodules(await self._scanner.scan(self._root_path))

        if self._closed:
            self._logger.debug("Discarding tree built after session %s closed", self.session_id)
            return False

        self._tree = tree
        await self._trigger_event(SessionEvent.TREE_UPDATED, tree)
        return True

    async def _move(self, step: HistoryStep) -> bool:
        if self._closed:
            return False

        if not step.moved:
            await self._add_message(SessionLogLevel.INFO, step.notice or "")
            return False

        self._current_commit = step.commit
        if step.commit is not None:
            await self._add_message(
                SessionLogLevel.TRACE,
                f"Showing {step.commit.commit[:7]} {step.commit.message}".rstrip()
            )

        await self._trigger_event(SessionEvent.HISTORY_CHANGED, step)
        await self.refresh()
        return True

    async def step_older(self) -> bool:
        """
        Show the next older commit.

        Returns:
            True if the session moved, False if there is no older commit
        """
        if self._navigator is None or self._base_ref is None or self._closed:
            return False

        return await self._move(await self._navigator.step_older(self._base_ref))

    async def step_newer(self) -> bool:
        """
        Show the next newer commit, or the working tree after the newest.

        Returns:
            True if the session moved, False if already showing the working tree
        """
        if self._navigator is None or self._closed:
            return False

        return await self._move(await self._navigator.step_newer())

    async def apply_hunk(self, abs_path: str, line: int, action: HunkAction) -> PatchApplicationResult:
        """
        Stage, unstage or revert the hunk of a file under a line.

        The tree is rebuilt after a successful action.

        Args:
            abs_path: Absolute path of the file
            line: 1-based line in the file
            action: What to do with the hunk

        Returns:
            The outcome; failures are also reported as messages
        """
        if self._root_path is None or self._closed:
            return PatchApplicationResult(False, "Session is not active", action, {'reason': 'inactive'})

        if self.mode == HistoryMode.HISTORY:
            result = PatchApplicationResult(
                False, "Hunk actions are only available in the working tree", action, {'reason': 'history_mode'}
            )
            await self._add_message(SessionLogLevel.WARN, result.message)
            return result

        try:
            result = await self._applier.apply_hunk_at_line(self._root_path, abs_path, line, action)

        except VCSPathError as e:
            result = PatchApplicationResult(False, str(e), action, {'reason': 'outside_repository'})

        if self._closed:
            return result

        if not result.success:
            await self._add_message(SessionLogLevel.ERROR, result.message)
            return result

        await self._add_message(SessionLogLevel.INFO, result.message)
        await self.refresh()
        return result

    async def diff_file(self, abs_path: str, current_text: str | None = None) -> FileDiffResult | None:
        """
        Diff a file against the commit the session compares with.

        In the working tree that is the base ref; while showing a commit it is
        that commit.

        Args:
            abs_path: Absolute path of the file
            current_text: Unsaved content to use instead of the file on disk

        Returns:
            The comparison, or None if it could not be made
        """
        if self._base_ref is None or self._closed:
            return None

        commit = self._current_commit.commit if self._current_commit is not None else self._base_ref
        try:
            result = await self._differ.compare(abs_path, commit, current_text)

        except VCSError as e:
            if not self._closed:
                await self._add_message(SessionLogLevel.ERROR, str(e))

            return None

        if self._closed:
            return None

        if result.kind == FileDiffKind.BINARY:
            await self._add_message(SessionLogLevel.INFO, f"Binary file, no diff shown: {result.relative_path}")

        elif result.kind == FileDiffKind.DELETED:
            await self._add_message(SessionLogLevel.INFO, f"File no longer exists: {result.relative_path}")

        return result

    def go_to_parent(self, node: StatusNode) -> StatusNode | None:
        """
        Get the directory containing a node.

        Args:
            node: A node of the current tree

        Returns:
            The parent node, or None for the root or without a tree
        """
        if self._tree is None:
            return None

        return self._tree.parent_of(node)

    async def _handle_head_changed(self, head: str | None) -> None:
        """Re-base on the moved ref and rebuild the working tree view."""
        if self._closed or self._root_path is None:
            return

        try:
            base_ref = await self._git.resolve_ref(self._ref_name, self._root_path)

        except VCSRefResolutionError as e:
            await self._add_message(SessionLogLevel.ERROR, str(e))
            return

        if self._closed:
            return

        self._logger.debug("HEAD moved to %s, re-basing on %s", head, base_ref)
        self._base_ref = base_ref
        if self._navigator is not None and self._navigator.mode == HistoryMode.HISTORY:
            self._navigator.reset()
            self._current_commit = None
            await self._trigger_event(SessionEvent.HISTORY_CHANGED, HistoryStep(HistoryMode.WORKING))

        await self.refresh()

    async def _handle_status_changed(self) -> None:
        # Commits don't change when the working tree does
        if self.mode == HistoryMode.HISTORY:
            return

        await self.refresh()

    def close(self) -> None:
        """Stop watching the repository; later results are discarded."""
        if self._closed:
            return

        self._closed = True
        if self._detector is not None:
            self._detector.stop()

        self._git.clear_cache()
        self._logger.debug("Session %s closed", self.session_id)
