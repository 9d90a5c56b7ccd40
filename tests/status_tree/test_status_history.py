"""Tests for history navigation."""

import asyncio

import pytest

from vcs.vcs_git_client import GitClient

from status_tree.status_history import HistoryCursor, HistoryMode, HistoryNavigator


C1 = "1" * 40  # Root commit
C2 = "2" * 40
C3 = "3" * 40  # HEAD


@pytest.fixture
def navigator(fake_runner):
    """Create a navigator over a three-commit history."""
    fake_runner.add(["rev-parse", f"{C3}^"], stdout=f"{C2}\n")
    fake_runner.add(["rev-parse", f"{C2}^"], stdout=f"{C1}\n")
    fake_runner.add(["rev-parse", f"{C1}^"], returncode=128, stderr="fatal: bad revision")
    fake_runner.add(["log", "--format=%s", "-n", "1", C1], stdout="Initial commit\n")
    fake_runner.add(["log", "--format=%s", "-n", "1", C2], stdout="Add parser\n")
    fake_runner.add(["log", "--format=%s", "-n", "1", C3], stdout="Fix parser\n")
    return HistoryNavigator("/repo", GitClient(fake_runner))


class TestHistoryCursor:
    """Test the navigation stack."""

    def test_push(self):
        """Test that pushing moves the index to the top."""
        cursor = HistoryCursor()
        cursor.push("a")
        cursor.push("b")

        assert cursor.stack == ["a", "b"]
        assert cursor.index == 2
        assert cursor.top() == "b"

    def test_push_truncates_forward_entries(self):
        """Test that pushing after popping discards the popped entries."""
        cursor = HistoryCursor()
        for commit in ["a", "b", "c"]:
            cursor.push(commit)

        cursor.pop()
        cursor.push("d")

        assert cursor.stack == ["a", "b", "d"]
        assert cursor.index == 3

    def test_pop(self):
        """Test that popping exposes the entry beneath."""
        cursor = HistoryCursor()
        cursor.push("a")
        cursor.push("b")

        assert cursor.pop() == "a"
        assert cursor.index == 1
        assert cursor.pop() is None
        assert cursor.index == 0
        assert cursor.pop() is None
        assert cursor.index == 0

    def test_index_bounds(self):
        """Test that the index stays within the stack."""
        cursor = HistoryCursor()
        cursor.pop()
        cursor.push("a")

        assert 0 <= cursor.index <= len(cursor.stack)

    def test_reset(self):
        """Test returning to the working tree."""
        cursor = HistoryCursor(HistoryMode.HISTORY, ["a", "b"], 2)
        cursor.reset()

        assert cursor == HistoryCursor()


class TestHistoryNavigator:
    """Test stepping through ancestry."""

    def test_step_older_from_working(self, navigator):
        """Test the first step back from the working tree."""
        step = asyncio.run(navigator.step_older(C3))

        assert step.moved
        assert step.mode is HistoryMode.HISTORY
        assert step.commit.commit == C2
        assert step.commit.parent == C1
        assert step.commit.message == "Add parser"
        assert navigator.cursor.stack == [C3, C2]
        assert navigator.cursor.index == 2

    def test_step_older_to_root_commit(self, navigator):
        """Test that stepping onto the root commit shows it without a parent."""
        async def main():
            await navigator.step_older(C3)
            return await navigator.step_older(C3)

        step = asyncio.run(main())

        assert step.commit.commit == C1
        assert step.commit.parent is None

    def test_step_older_past_root(self, navigator):
        """Test that there is nothing older than the root commit."""
        async def main():
            await navigator.step_older(C3)
            await navigator.step_older(C3)
            return await navigator.step_older(C3)

        step = asyncio.run(main())

        assert not step.moved
        assert step.notice == HistoryNavigator.ROOT_COMMIT_NOTICE
        assert navigator.cursor.index == 3
        assert navigator.mode is HistoryMode.HISTORY

    def test_base_is_root_commit(self, navigator):
        """Test that a root base stays in the working tree."""
        step = asyncio.run(navigator.step_older(C1))

        assert not step.moved
        assert navigator.mode is HistoryMode.WORKING
        assert navigator.cursor.index == 0

    def test_older_then_newer_restores_index(self, navigator):
        """Test that one step each way returns to where it started."""
        start_index = navigator.cursor.index

        async def main():
            await navigator.step_older(C3)
            return await navigator.step_newer()

        step = asyncio.run(main())

        assert step.moved
        assert step.mode is HistoryMode.WORKING
        assert step.commit is None
        assert navigator.cursor.index == start_index
        assert navigator.cursor.stack == []

    def test_newer_within_history(self, navigator):
        """Test stepping forward to a commit that was already shown."""
        async def main():
            await navigator.step_older(C3)
            await navigator.step_older(C3)
            return await navigator.step_newer()

        step = asyncio.run(main())

        assert step.mode is HistoryMode.HISTORY
        assert step.commit.commit == C2
        assert navigator.cursor.index == 2

    def test_newer_in_working_tree(self, navigator):
        """Test that there is nothing newer than the working tree."""
        step = asyncio.run(navigator.step_newer())

        assert not step.moved
        assert step.notice == HistoryNavigator.WORKING_TREE_NOTICE

    def test_show_commit_cached(self, navigator, fake_runner):
        """Test that a commit's parent and message are looked up once."""
        async def main():
            await navigator.show_commit(C2)
            await navigator.show_commit(C2)

        asyncio.run(main())

        assert len(fake_runner.calls) == 2

    def test_reset(self, navigator):
        """Test returning to the working tree explicitly."""
        asyncio.run(navigator.step_older(C3))
        navigator.reset()

        assert navigator.mode is HistoryMode.WORKING
        assert navigator.cursor.index == 0
