"""Test configuration and fixtures for repotree."""

import pytest

from repotree.tree_model.tree_node import TreeNode


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def sample_tree():
    """The small repository used throughout the tests.

    repo
    ├── src
    │   ├── a.ts (10 bytes)
    │   └── b.ts (20 bytes)
    └── README.md (5 bytes)
    """
    return TreeNode.folder(
        "repo",
        "",
        [
            TreeNode.folder(
                "src",
                "src",
                [
                    TreeNode.file("a.ts", "src/a.ts", size=10),
                    TreeNode.file("b.ts", "src/b.ts", size=20),
                ],
            ),
            TreeNode.file("README.md", "README.md", size=5),
        ],
    )


@pytest.fixture
def sample_entries():
    """Flat listing equivalent to sample_tree, in the shape of an API tree response."""
    return [
        {"path": "README.md", "type": "blob", "size": 5},
        {"path": "src", "type": "tree"},
        {"path": "src/a.ts", "type": "blob", "size": 10},
        {"path": "src/b.ts", "type": "blob", "size": 20},
    ]


@pytest.fixture
def wide_tree_factory():
    """Factory building a root with folder_count folders holding files_per_folder files each.

    With nested > 0 every folder also starts with a subfolder "deep" holding that many files.
    """

    def make_wide_tree(folder_count, files_per_folder, nested=0):
        folders = []
        for i in range(folder_count):
            path = f"dir{i}"
            children = []
            if nested:
                deep_path = f"{path}/deep"
                deep_files = [TreeNode.file(f"n{k}.py", f"{deep_path}/n{k}.py", size=k) for k in range(nested)]
                children.append(TreeNode.folder("deep", deep_path, deep_files))
            children.extend(TreeNode.file(f"f{j}.py", f"{path}/f{j}.py", size=j) for j in range(files_per_folder))
            folders.append(TreeNode.folder(path, path, children))
        return TreeNode.folder("repo", "", folders)

    return make_wide_tree


DEEP_TREE_DEPTH = 1500


@pytest.fixture
def deep_tree():
    """A chain of DEEP_TREE_DEPTH folders named "d" ending in the file leaf.py.

    Deeper than the default recursion limit, so any recursive walk over it fails.
    Compare such trees by their paths: dataclass equality and repr recurse too.
    """
    node = TreeNode.file("leaf.py", "/".join(["d"] * DEEP_TREE_DEPTH + ["leaf.py"]), size=7)
    for depth in range(DEEP_TREE_DEPTH, 0, -1):
        node = TreeNode.folder("d", "/".join(["d"] * depth), [node])
    return TreeNode.folder("repo", "", [node])
