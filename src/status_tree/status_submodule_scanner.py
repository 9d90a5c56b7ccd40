"""Discovery of submodules with moved HEADs or dirty working trees."""

import asyncio
import logging
import os
import re
from typing import List

from vcs import GitClient, VCSCommandError

from status_tree.status_parser import parse_porcelain_status
from status_tree.status_submodule_info import SubmoduleHeadStatus, SubmoduleInfo


class SubmoduleScanner:
    """Enumerates submodules and collects the changes inside each one."""

    # `<status char><sha> <path>[ (<describe>)]`
    SUBMODULE_LINE_PATTERN = re.compile(r'^([ +\-U])([0-9a-f]+)\s+([^\s(]+)')

    def __init__(self, git: GitClient | None = None) -> None:
        """
        Initialize the scanner.

        Args:
            git: Git client to use, a new one if not given
        """
        self._logger = logging.getLogger("SubmoduleScanner")
        self._git = git or GitClient()

    @classmethod
    def parse_submodule_status(cls, output: str) -> List[SubmoduleInfo]:
        """
        Parse `git submodule status` output.

        Lines that do not look like submodule entries are skipped.

        Args:
            output: Raw command output

        Returns:
            One SubmoduleInfo per entry, in output order, not yet checked for dirt
        """
        submodules: List[SubmoduleInfo] = []
        for line in output.splitlines():
            match = cls.SUBMODULE_LINE_PATTERN.match(line)
            if not match:
                continue

            submodules.append(SubmoduleInfo(
                path=match.group(3),
                head_status=SubmoduleHeadStatus(match.group(1)),
                sha=match.group(2)
            ))

        return submodules

    async def _check_dirty(self, root: str, submodule: SubmoduleInfo) -> None:
        """Fill in is_dirty and changed_files for one submodule."""
        if submodule.head_status == SubmoduleHeadStatus.UNINITIALIZED:
            return

        submodule_root = os.path.join(root, *submodule.path.split('/'))
        try:
            output = await self._git.status_porcelain(submodule_root)

        except VCSCommandError as e:
            self._logger.warning("Failed to read status of submodule %s: %s", submodule.path, e.stderr.strip())
            return

        submodule.changed_files = parse_porcelain_status(output, submodule_root)
        submodule.is_dirty = bool(submodule.changed_files)

    async def scan(self, root: str) -> List[SubmoduleInfo]:
        """
        Find submodules that need attention.

        A submodule is reported if its checked-out commit differs from the one
        recorded by the parent or if its working tree has changes.

        Args:
            root: Repository root

        Returns:
            Reported submodules sorted by path; empty if the scan fails
        """
        try:
            output = await self._git.submodule_status(root)

        except VCSCommandError as e:
            self._logger.warning("Failed to list submodules in %s: %s", root, e.stderr.strip())
            return []

        submodules = self.parse_submodule_status(output)
        await asyncio.gather(*(self._check_dirty(root, submodule) for submodule in submodules))

        reported = [
            submodule for submodule in submodules
            if submodule.head_status == SubmoduleHeadStatus.HEAD_DIFFERS or submodule.is_dirty
        ]
        reported.sort(key=lambda submodule: submodule.path)
        return reported
