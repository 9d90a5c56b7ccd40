"""Asynchronous external command execution."""

import asyncio
from dataclasses import dataclass
import logging
from typing import Callable, List, Set


@dataclass
class ProcessResult:
    """Captured outcome of one external command."""

    command: List[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        """Check whether the command exited with status 0."""
        return self.returncode == 0


class ProcessRunner:
    """
    Runs external commands without blocking the event loop.

    Two calling conventions share one implementation: `run()` is awaited by
    coroutine code, while `run_with_callback()` starts the same coroutine as a
    task and hands the result to a callback once the process has exited.
    """

    # Exit code reported when the executable itself cannot be started
    SPAWN_FAILED = 127

    def __init__(self) -> None:
        """Initialize the runner."""
        self._logger = logging.getLogger("ProcessRunner")
        self._tasks: Set[asyncio.Task] = set()

    async def run(self, command: List[str], cwd: str, stdin: str | None = None) -> ProcessResult:
        """
        Run a command and capture its output.

        Args:
            command: Executable and arguments
            cwd: Working directory for the command
            stdin: Optional text to feed to the command's standard input

        Returns:
            ProcessResult with decoded stdout/stderr and the exit code
        """
        self._logger.debug("Running %s in %s", command, cwd)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=cwd,
                stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )

        except OSError as e:
            self._logger.warning("Failed to start %s: %s", command, str(e))
            return ProcessResult(command, self.SPAWN_FAILED, "", str(e))

        input_bytes = stdin.encode('utf-8') if stdin is not None else None
        stdout, stderr = await process.communicate(input_bytes)
        returncode = process.returncode if process.returncode is not None else self.SPAWN_FAILED

        result = ProcessResult(
            command,
            returncode,
            stdout.decode('utf-8', errors='replace'),
            stderr.decode('utf-8', errors='replace')
        )

        if not result.ok:
            self._logger.debug("Command %s exited with %d: %s", command, returncode, result.stderr.strip())

        return result

    def run_with_callback(
        self,
        command: List[str],
        cwd: str,
        callback: Callable[[ProcessResult], None]
    ) -> asyncio.Task:
        """
        Start a command and call back with its result.

        Must be called while an event loop is running. The callback runs on the
        event loop once the process has exited; it is not called if the task is
        cancelled.

        Args:
            command: Executable and arguments
            cwd: Working directory for the command
            callback: Receives the ProcessResult

        Returns:
            The task running the command
        """
        task = asyncio.create_task(self.run(command, cwd))
        self._tasks.add(task)

        def task_done_callback(task: asyncio.Task) -> None:
            self._tasks.discard(task)
            if task.cancelled():
                self._logger.debug("Command cancelled: %s", command)
                return

            exc = task.exception()
            if exc is not None:
                self._logger.error("Command %s raised: %s", command, str(exc))
                return

            try:
                callback(task.result())

            except Exception:
                self._logger.exception("Error in callback for %s", command)

        task.add_done_callback(task_done_callback)
        return task
