"""Directory/file tree annotated with version control status."""

import logging
import os
from typing import Dict, Iterator, List

from status_tree.status_code import StatusCode
from status_tree.status_node import StatusNode
from status_tree.status_submodule_info import SubmoduleInfo


class StatusTree:
    """
    A tree of StatusNodes rooted at a repository directory.

    The tree owns its nodes top-down and keeps a path -> node index so that
    parent lookups need no back references. Trees are built once per refresh
    and replaced wholesale rather than updated in place.
    """

    def __init__(self, root_path: str) -> None:
        """
        Initialize an empty tree.

        Args:
            root_path: Absolute path of the root directory
        """
        self._logger = logging.getLogger("StatusTree")
        self.root_path = os.path.normpath(root_path)
        self.root = StatusNode(os.path.basename(self.root_path) or self.root_path, self.root_path, True)
        self._nodes: Dict[str, StatusNode] = {self.root_path: self.root}
        self.submodules: List[SubmoduleInfo] = []

    def clear(self) -> None:
        """Discard every node below the root."""
        self.root.clear_children()
        self._nodes = {self.root_path: self.root}

    def find(self, path: str) -> StatusNode | None:
        """
        Find the node for an absolute path.

        Args:
            path: Absolute path

        Returns:
            The node, or None if the path is not in the tree
        """
        return self._nodes.get(os.path.normpath(path))

    def parent_of(self, node: StatusNode) -> StatusNode | None:
        """
        Find a node's parent directory.

        Args:
            node: A node in this tree

        Returns:
            The parent node, or None for the root
        """
        if node is self.root:
            return None

        return self._nodes.get(os.path.dirname(node.path))

    def add_file(self, path: str, status: StatusCode = StatusCode.CLEAN) -> StatusNode | None:
        """
        Add a path to the tree, creating intermediate directories as needed.

        If a node already exists for the path its status is updated instead.
        New leaf nodes are directories if the path is a directory on disk.

        Args:
            path: Absolute path under the root
            status: Status for the leaf node

        Returns:
            The leaf node, or None if the path is the root or outside it
        """
        path = os.path.normpath(path)
        relative = os.path.relpath(path, self.root_path)
        if relative == os.curdir or relative.startswith(os.pardir):
            return None

        parts = [part for part in relative.split(os.sep) if part]
        current = self.root
        current_path = self.root_path
        for part in parts[:-1]:
            current_path = os.path.join(current_path, part)
            child = current.get_child(part)
            if child is None:
                child = current.add_child(StatusNode(part, current_path, True))
                self._nodes[current_path] = child

            current = child

        existing = current.get_child(parts[-1])
        if existing is not None:
            existing.status = status
            return existing

        node = StatusNode(parts[-1], path, os.path.isdir(path), status)
        current.add_child(node)
        self._nodes[path] = node
        return node

    def scan_directory(self, directory: str | None = None) -> None:
        """
        Add every file and directory below a directory, skipping dot entries.

        Args:
            directory: Directory to scan, the root if not given
        """
        directory = directory or self.root_path
        try:
            entries = sorted(os.scandir(directory), key=lambda e: e.name)

        except OSError as e:
            self._logger.warning("Failed to scan %s: %s", directory, str(e))
            return

        for entry in entries:
            if entry.name.startswith('.'):
                continue

            self.add_file(entry.path)
            if entry.is_dir(follow_symlinks=False):
                self.scan_directory(entry.path)

        if directory == self.root_path:
            self.sort()

    def apply_statuses(self, changed_files: Dict[str, StatusCode]) -> None:
        """
        Overlay statuses onto the nodes already in the tree.

        Files take their status from the mapping (clean if absent); directories
        are reset to clean until update_parent_statuses() derives theirs.

        Args:
            changed_files: Mapping of absolute path to status
        """
        for node in self.walk():
            if node.is_dir:
                node.status = StatusCode.CLEAN

            else:
                node.status = changed_files.get(node.path, StatusCode.CLEAN)

    def update_parent_statuses(self) -> None:
        """
        Derive directory statuses bottom-up.

        A directory is modified if any descendant file is not clean and clean
        otherwise. The root never carries a status.
        """
        self._derive_status(self.root)
        self.root.status = StatusCode.CLEAN

    def _derive_status(self, node: StatusNode) -> bool:
        """Derive statuses below node; return True if anything below or at it changed."""
        if not node.is_dir:
            return not node.status.is_clean()

        changed = False
        for child in node.get_children():
            if self._derive_status(child):
                changed = True

        node.status = StatusCode.MODIFIED if changed else StatusCode.CLEAN
        return changed

    def merge_submodules(self, submodules: List[SubmoduleInfo]) -> None:
        """
        Add the changed files of submodules to the tree.

        Args:
            submodules: Submodules reported by the scanner
        """
        self.submodules = list(submodules)
        for submodule in submodules:
            for path, status in sorted(submodule.changed_files.items()):
                self.add_file(path, status)

        self.update_parent_statuses()
        self.sort()

    def sort(self) -> None:
        """Sort the whole tree into display order."""
        self.root.sort()

    def walk(self) -> Iterator[StatusNode]:
        """Iterate over every node below the root, depth first, in display order."""
        stack = list(reversed(self.root.get_children()))
        while stack:
            node = stack.pop()
            yield node
            if node.is_dir:
                stack.extend(reversed(node.get_children()))

    def changed_files(self) -> List[StatusNode]:
        """Get every file node that is not clean, in display order."""
        return [node for node in self.walk() if not node.is_dir and not node.status.is_clean()]
