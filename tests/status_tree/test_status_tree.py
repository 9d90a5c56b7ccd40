"""Tests for status nodes and trees."""

import os

from status_tree.status_code import StatusCode
from status_tree.status_node import StatusNode
from status_tree.status_submodule_info import SubmoduleHeadStatus, SubmoduleInfo
from status_tree.status_tree import StatusTree


ROOT = os.path.join(os.sep, "repo")


def _abs(relative_path):
    return os.path.join(ROOT, *relative_path.split('/'))


def _names(node):
    return [child.name for child in node.get_children()]


class TestStatusNode:
    """Test StatusNode behaviour."""

    def test_add_child_returns_existing(self):
        """Test that adding a duplicate name keeps the first child."""
        parent = StatusNode("dir", "/dir", True)
        first = parent.add_child(StatusNode("a", "/dir/a", False))
        second = parent.add_child(StatusNode("a", "/dir/a", False, StatusCode.ADDED))

        assert second is first
        assert len(parent.get_children()) == 1

    def test_sort_directories_first_then_name(self):
        """Test the display order of children."""
        parent = StatusNode("dir", "/dir", True)
        for name, is_dir in [("b.txt", False), ("Zeta", True), ("A.txt", False), ("alpha", True)]:
            parent.add_child(StatusNode(name, f"/dir/{name}", is_dir))

        parent.sort()

        assert _names(parent) == ["alpha", "Zeta", "A.txt", "b.txt"]

    def test_sort_is_idempotent(self):
        """Test that sorting twice changes nothing."""
        parent = StatusNode("dir", "/dir", True)
        for name in ["c", "B", "a", "b"]:
            parent.add_child(StatusNode(name, f"/dir/{name}", False))

        parent.sort()
        once = _names(parent)
        parent.sort()

        assert _names(parent) == once

    def test_get_children_is_a_copy(self):
        """Test that callers cannot change the child list."""
        parent = StatusNode("dir", "/dir", True)
        parent.add_child(StatusNode("a", "/dir/a", False))
        parent.get_children().clear()

        assert len(parent.get_children()) == 1


class TestStatusTreeStructure:
    """Test building tree structure."""

    def test_add_file_creates_directories(self):
        """Test that intermediate directories are created."""
        tree = StatusTree(ROOT)
        node = tree.add_file(_abs("src/pkg/mod.py"), StatusCode.MODIFIED)

        assert node.name == "mod.py"
        assert not node.is_dir
        assert tree.find(_abs("src")).is_dir
        assert tree.find(_abs("src/pkg")).is_dir
        assert tree.find(_abs("src/pkg/mod.py")) is node

    def test_add_existing_updates_status(self):
        """Test that re-adding a path updates its status."""
        tree = StatusTree(ROOT)
        first = tree.add_file(_abs("a.txt"), StatusCode.MODIFIED)
        second = tree.add_file(_abs("a.txt"), StatusCode.ADDED)

        assert second is first
        assert first.status is StatusCode.ADDED

    def test_add_outside_root_ignored(self):
        """Test that paths outside the root and the root itself are not added."""
        tree = StatusTree(ROOT)

        assert tree.add_file(os.path.join(os.sep, "elsewhere", "a.txt")) is None
        assert tree.add_file(ROOT) is None
        assert list(tree.walk()) == []

    def test_parent_of(self):
        """Test parent lookups through the path index."""
        tree = StatusTree(ROOT)
        node = tree.add_file(_abs("src/app.py"))

        parent = tree.parent_of(node)
        assert parent is tree.find(_abs("src"))
        assert tree.parent_of(parent) is tree.root
        assert tree.parent_of(tree.root) is None

    def test_clear(self):
        """Test that clearing leaves only the root."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("src/app.py"))
        tree.clear()

        assert list(tree.walk()) == []
        assert tree.find(_abs("src")) is None
        assert tree.find(ROOT) is tree.root

    def test_walk_in_display_order(self):
        """Test depth-first traversal after sorting."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("z.txt"))
        tree.add_file(_abs("src/b.py"))
        tree.add_file(_abs("src/a.py"))
        tree.sort()

        assert [node.path for node in tree.walk()] == [
            _abs("src"), _abs("src/a.py"), _abs("src/b.py"), _abs("z.txt")
        ]


class TestStatusPropagation:
    """Test deriving directory statuses."""

    def test_modified_iff_descendant_changed(self):
        """Test that only directories above changes are modified."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("src/pkg/mod.py"), StatusCode.UNTRACKED)
        tree.add_file(_abs("docs/readme.md"), StatusCode.CLEAN)
        tree.update_parent_statuses()

        assert tree.find(_abs("src")).status is StatusCode.MODIFIED
        assert tree.find(_abs("src/pkg")).status is StatusCode.MODIFIED
        assert tree.find(_abs("docs")).status is StatusCode.CLEAN

    def test_root_always_clean(self):
        """Test that the root never carries a status."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("a.txt"), StatusCode.DELETED)
        tree.update_parent_statuses()

        assert tree.root.status is StatusCode.CLEAN

    def test_stale_directory_status_reset(self):
        """Test that a directory with no changes below it becomes clean again."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("src/a.py"), StatusCode.MODIFIED)
        tree.update_parent_statuses()
        tree.find(_abs("src/a.py")).status = StatusCode.CLEAN
        tree.update_parent_statuses()

        assert tree.find(_abs("src")).status is StatusCode.CLEAN

    def test_apply_statuses_overlays_existing_only(self):
        """Test that overlaying statuses never adds nodes."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("a.txt"))
        tree.add_file(_abs("b.txt"), StatusCode.MODIFIED)
        tree.apply_statuses({_abs("a.txt"): StatusCode.ADDED, _abs("gone.txt"): StatusCode.DELETED})

        assert tree.find(_abs("a.txt")).status is StatusCode.ADDED
        assert tree.find(_abs("b.txt")).status is StatusCode.CLEAN
        assert tree.find(_abs("gone.txt")) is None

    def test_changed_files(self):
        """Test listing non-clean file nodes in display order."""
        tree = StatusTree(ROOT)
        tree.add_file(_abs("z.txt"), StatusCode.MODIFIED)
        tree.add_file(_abs("src/a.py"), StatusCode.ADDED)
        tree.add_file(_abs("src/b.py"))
        tree.update_parent_statuses()
        tree.sort()

        assert [node.path for node in tree.changed_files()] == [_abs("src/a.py"), _abs("z.txt")]


class TestScanDirectory:
    """Test listing files from disk."""

    def test_scan_skips_dot_entries(self, repo_dir, git_helpers):
        """Test that hidden files and directories are skipped."""
        git_helpers.write_file(repo_dir, "a.txt", "a")
        git_helpers.write_file(repo_dir, "src/b.py", "b")
        git_helpers.write_file(repo_dir, ".hidden/c.txt", "c")
        git_helpers.write_file(repo_dir, ".env", "d")

        tree = StatusTree(repo_dir)
        tree.scan_directory()

        assert _names(tree.root) == ["src", "a.txt"]
        assert _names(tree.find(os.path.join(repo_dir, "src"))) == ["b.py"]

    def test_empty_directory_is_dir_node(self, repo_dir):
        """Test that an empty directory is listed as a directory."""
        os.mkdir(os.path.join(repo_dir, "empty"))

        tree = StatusTree(repo_dir)
        tree.scan_directory()

        assert tree.find(os.path.join(repo_dir, "empty")).is_dir


class TestMergeSubmodules:
    """Test merging submodule changes into a tree."""

    def test_merge_adds_files_and_propagates(self):
        """Test that submodule files appear with their status."""
        tree = StatusTree(ROOT)
        submodule = SubmoduleInfo(
            path="libs/dep",
            head_status=SubmoduleHeadStatus.UNCHANGED,
            sha="f" * 40,
            is_dirty=True,
            changed_files={_abs("libs/dep/x.c"): StatusCode.MODIFIED}
        )

        tree.merge_submodules([submodule])

        assert tree.find(_abs("libs/dep/x.c")).status is StatusCode.MODIFIED
        assert tree.find(_abs("libs")).status is StatusCode.MODIFIED
        assert tree.submodules == [submodule]
