"""Polling-based detection of repository changes."""

import asyncio
from enum import Enum, auto
import hashlib
import logging
from typing import Any, Callable, Dict, List, Set

from vcs import GitClient, VCSCommandError

from status_tree.status_submodule_info import SubmoduleInfo
from status_tree.status_submodule_scanner import SubmoduleScanner


class ChangeDetectorEvent(Enum):
    """Events that can be emitted by the ChangeDetector class."""
    HEAD_CHANGED = auto()       # HEAD moved; callbacks receive the new HEAD hash
    STATUS_CHANGED = auto()     # Working tree or submodule status changed


def hash_status(output: str) -> str:
    """
    Hash porcelain status output independently of line order.

    Args:
        output: Raw `git status --porcelain` output

    Returns:
        Hex digest
    """
    lines = sorted(line for line in output.splitlines() if line.strip())
    return hashlib.sha1("\n".join(lines).encode('utf-8')).hexdigest()


def hash_submodules(submodules: List[SubmoduleInfo]) -> str:
    """
    Hash a submodule list independently of its order.

    Args:
        submodules: Submodules as reported by the scanner

    Returns:
        Hex digest
    """
    parts = []
    for submodule in sorted(submodules, key=lambda s: s.path):
        files = ",".join(
            f"{path}:{status.value}" for path, status in sorted(submodule.changed_files.items())
        )
        parts.append(f"{submodule.path}|{submodule.head_status.value}|{submodule.sha}|{submodule.is_dirty}|{files}")

    return hashlib.sha1("\n".join(parts).encode('utf-8')).hexdigest()


class ChangeDetector:
    """
    Polls a repository and signals when it changes.

    Each poll reads HEAD first. If HEAD moved, HEAD_CHANGED is emitted and the
    poll ends there. Otherwise the working tree status (and optionally the
    submodule status) is hashed and STATUS_CHANGED is emitted if either hash
    differs from the previous poll. The first poll after start() only records
    a baseline.
    """

    def __init__(
        self,
        root_path: str,
        git: GitClient | None = None,
        refresh_interval: int = 2000,
        submodules_enabled: bool = True,
        scanner: SubmoduleScanner | None = None
    ) -> None:
        """
        Initialize the detector.

        Args:
            root_path: Repository root to watch
            git: Git client to use, a new one if not given
            refresh_interval: Time in milliseconds between polls
            submodules_enabled: Include submodule status in the comparison
            scanner: Submodule scanner to use, one sharing the git client if not given
        """
        self._logger = logging.getLogger("ChangeDetector")
        self._root_path = root_path
        self._git = git or GitClient()
        self._scanner = scanner or SubmoduleScanner(self._git)
        self._refresh_interval = refresh_interval
        self._submodules_enabled = submodules_enabled

        self._head_seen = False
        self._last_head: str | None = None
        self._last_status_hash: str | None = None
        self._last_submodule_hash: str | None = None
        self._is_running = False
        self._poll_task: asyncio.Task | None = None

        self._callbacks: Dict[ChangeDetectorEvent, Set[Callable]] = {
            event: set() for event in ChangeDetectorEvent
        }

    def register_callback(self, event: ChangeDetectorEvent, callback: Callable) -> None:
        """
        Register a callback for a specific event.

        Args:
            event: The event to register for
            callback: The coroutine function to call when the event occurs
        """
        self._callbacks[event].add(callback)

    def unregister_callback(self, event: ChangeDetectorEvent, callback: Callable) -> None:
        """
        Unregister a callback for a specific event.

        Args:
            event: The event to unregister from
            callback: The callback function to remove
        """
        if callback in self._callbacks[event]:
            self._callbacks[event].remove(callback)

    async def _trigger_event(self, event: ChangeDetectorEvent, *args: Any, **kwargs: Any) -> None:
        for callback in list(self._callbacks[event]):
            try:
                await callback(*args, **kwargs)

            except Exception:
                self._logger.exception("Error in callback for %s", event)

    @property
    def last_head(self) -> str | None:
        """Get the HEAD hash seen by the most recent poll."""
        return self._last_head

    def is_active(self) -> bool:
        """Check whether periodic polling is running."""
        return self._poll_task is not None and not self._poll_task.done()

    def reset_cache(self) -> None:
        """Forget every observed value so the next poll records a fresh baseline."""
        self._head_seen = False
        self._last_head = None
        self._last_status_hash = None
        self._last_submodule_hash = None

    async def poll(self) -> bool:
        """
        Check the repository once.

        Returns:
            True if a change was signalled; False if nothing changed, this was a
            baseline poll, status could not be read, or another poll was in progress
        """
        if self._is_running:
            self._logger.debug("Poll already in progress, skipping")
            return False

        self._is_running = True
        try:
            head = await self._git.head(self._root_path)
            if self._head_seen and head != self._last_head:
                self._logger.debug("HEAD moved from %s to %s", self._last_head, head)
                self._last_head = head

                # The rebuild that follows covers any status change too
                self._last_status_hash = None
                self._last_submodule_hash = None
                await self._trigger_event(ChangeDetectorEvent.HEAD_CHANGED, head)
                return True

            self._head_seen = True
            self._last_head = head

            try:
                status_hash = hash_status(await self._git.status_porcelain(self._root_path))

            except VCSCommandError as e:
                self._logger.warning("Failed to read status of %s: %s", self._root_path, e.stderr.strip())
                return False

            submodule_hash = None
            if self._submodules_enabled:
                submodule_hash = hash_submodules(await self._scanner.scan(self._root_path))

            changed = False
            if self._last_status_hash is not None and status_hash != self._last_status_hash:
                changed = True

            if self._last_submodule_hash is not None and submodule_hash != self._last_submodule_hash:
                changed = True

            self._last_status_hash = status_hash
            self._last_submodule_hash = submodule_hash

            if changed:
                self._logger.debug("Status of %s changed", self._root_path)
                await self._trigger_event(ChangeDetectorEvent.STATUS_CHANGED)

            return changed

        finally:
            self._is_running = False

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval / 1000)
            try:
                await self.poll()

            except Exception:
                self._logger.exception("Unexpected error while polling %s", self._root_path)

    def start(self) -> None:
        """
        Start periodic polling.

        Must be called while an event loop is running. The first poll records
        the baseline.
        """
        if self.is_active():
            return

        self._poll_task = asyncio.create_task(self._poll_loop())
        self._logger.debug("Started polling %s every %dms", self._root_path, self._refresh_interval)

    def stop(self) -> None:
        """Stop polling and forget every observed value."""
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None

        self.reset_cache()
        self._logger.debug("Stopped polling %s", self._root_path)
