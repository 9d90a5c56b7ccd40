from typing import Dict, List

from status_tree.status_code import StatusCode


class StatusNode:
    """
    A file or directory in a status tree.

    Nodes own their children; there is no back reference to the parent.
    Parent lookups go through the owning StatusTree's path index.
    """

    def __init__(self, name: str, path: str, is_dir: bool, status: StatusCode = StatusCode.CLEAN) -> None:
        """
        Initialize the node.

        Args:
            name: Last path component
            path: Absolute path
            is_dir: True for directories
            status: Initial status
        """
        self.name = name
        self.path = path
        self.is_dir = is_dir
        self.status = status
        self._children: Dict[str, StatusNode] = {}
        self._ordered_children: List[StatusNode] = []

    def __repr__(self) -> str:
        kind = "dir" if self.is_dir else "file"
        return f"StatusNode({kind} {self.path!r}, {self.status.value})"

    def add_child(self, node: 'StatusNode') -> 'StatusNode':
        """
        Add a child unless one with the same name already exists.

        Args:
            node: The node to add

        Returns:
            The child now stored under node.name
        """
        existing = self._children.get(node.name)
        if existing is not None:
            return existing

        self._children[node.name] = node
        self._ordered_children.append(node)
        return node

    def get_child(self, name: str) -> 'StatusNode | None':
        """Get a child by name."""
        return self._children.get(name)

    def get_children(self) -> List['StatusNode']:
        """Get the children in display order (after sort() has run)."""
        return list(self._ordered_children)

    def clear_children(self) -> None:
        """Remove all children."""
        self._children.clear()
        self._ordered_children.clear()

    def sort(self) -> None:
        """Sort children recursively: directories first, then by name ignoring case."""
        self._ordered_children.sort(key=lambda child: (not child.is_dir, child.name.lower()))
        for child in self._ordered_children:
            if child.is_dir:
                child.sort()
