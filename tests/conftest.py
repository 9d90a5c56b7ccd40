"""Fixtures shared by the vcs and status tree tests."""

import asyncio
import os
import shutil
import subprocess
from typing import Callable, Dict, List, Tuple

import pytest

from vcs.vcs_process_runner import ProcessResult, ProcessRunner


class FakeProcessRunner(ProcessRunner):
    """
    Scripted process runner.

    Responses are keyed by the arguments after the executable. A key that is
    a prefix of the arguments matches too (the longest one wins), so commands
    with unpredictable trailing arguments such as temp file names can still be
    scripted. A response is either (returncode, stdout, stderr) or a callable
    taking (command, cwd) and returning such a tuple. Unscripted commands fail
    with exit code 1.
    """

    def __init__(self) -> None:
        super().__init__()
        self.responses: Dict[Tuple[str, ...], object] = {}
        self.calls: List[Tuple[List[str], str]] = []

    def add(self, args, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        """Script a response for a command."""
        self.responses[tuple(args)] = (returncode, stdout, stderr)

    def add_handler(self, args, handler: Callable) -> None:
        """Script a computed response for a command."""
        self.responses[tuple(args)] = handler

    def commands(self) -> List[List[str]]:
        """Get the argument lists of every call made, without the executable."""
        return [command[1:] for command, _cwd in self.calls]

    def _lookup(self, args: Tuple[str, ...]):
        if args in self.responses:
            return self.responses[args]

        best = None
        best_length = -1
        for key, response in self.responses.items():
            if len(key) > best_length and args[:len(key)] == key:
                best = response
                best_length = len(key)

        return best

    async def run(self, command, cwd, stdin=None) -> ProcessResult:
        # Yield like a real subprocess wait would
        await asyncio.sleep(0)
        self.calls.append((list(command), cwd))
        response = self._lookup(tuple(command[1:]))
        if response is None:
            return ProcessResult(list(command), 1, "", f"unscripted command: {command}")

        if callable(response):
            response = response(command, cwd)

        returncode, stdout, stderr = response
        return ProcessResult(list(command), returncode, stdout, stderr)


@pytest.fixture
def fake_runner():
    """Create a scripted process runner."""
    return FakeProcessRunner()


@pytest.fixture
def repo_dir(tmp_path):
    """A real (symlink-free) temporary directory path."""
    return os.path.realpath(str(tmp_path))


class GitTestHelpers:
    """Helper utilities for tests that drive a real git repository."""

    @staticmethod
    def run_git(cwd: str, *args: str) -> str:
        """Run git synchronously and return its stdout."""
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True
        )
        return result.stdout

    @staticmethod
    def write_file(root: str, relative_path: str, content: str) -> str:
        """Write a file below root, creating directories, and return its path."""
        path = os.path.join(root, *relative_path.split('/'))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)

        return path

    @staticmethod
    def read_file(path: str) -> str:
        """Read a file written by write_file."""
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()


@pytest.fixture
def git_helpers():
    """Provide git test helper utilities."""
    return GitTestHelpers


@pytest.fixture
def git_repo(repo_dir):
    """
    Create a git repository with one commit.

    The commit holds `notes.txt` (ten numbered lines) and `src/app.py`.
    Skipped when git is not installed.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    GitTestHelpers.run_git(repo_dir, "init", "-q")
    GitTestHelpers.run_git(repo_dir, "config", "user.email", "dev@example.com")
    GitTestHelpers.run_git(repo_dir, "config", "user.name", "Dev")
    GitTestHelpers.run_git(repo_dir, "config", "commit.gpgsign", "false")
    GitTestHelpers.run_git(repo_dir, "config", "core.autocrlf", "false")

    GitTestHelpers.write_file(repo_dir, "notes.txt", "".join(f"line {i}\n" for i in range(1, 11)))
    GitTestHelpers.write_file(repo_dir, "src/app.py", "def main():\n    return 0\n")
    GitTestHelpers.run_git(repo_dir, "add", "-A")
    GitTestHelpers.run_git(repo_dir, "commit", "-q", "-m", "Initial commit")
    return repo_dir
