"""Unit tests for the plain-text tree serializer."""

from repotree.serializers.text_serializer import TextSerializer
from repotree.tree_model.tree_node import TreeNode

EXPECTED_SAMPLE = "repo\n├── src\n│   ├── a.ts\n│   └── b.ts\n└── README.md\n"


def test_sample_tree(sample_tree):
    assert TextSerializer().serialize(sample_tree) == EXPECTED_SAMPLE


def test_one_line_per_node(wide_tree_factory):
    root = wide_tree_factory(3, 4, nested=2)
    lines = [line for line in TextSerializer().serialize(root).splitlines() if line.strip()]
    assert len(lines) == sum(1 for _ in root.iter_nodes())


def test_last_folder_uses_blank_continuation():
    root = TreeNode.folder(
        "repo",
        "",
        [
            TreeNode.file("a", "a"),
            TreeNode.folder("lib", "lib", [TreeNode.file("x", "lib/x"), TreeNode.file("y", "lib/y")]),
        ],
    )
    assert TextSerializer().serialize(root) == "repo\n├── a\n└── lib\n    ├── x\n    └── y\n"


def test_root_only():
    assert TextSerializer().serialize(TreeNode.folder("repo", "")) == "repo\n"


def test_absent_root():
    assert TextSerializer().serialize(None) == ""


def test_stream_yields_lines(sample_tree):
    assert list(TextSerializer().stream(sample_tree))[0] == "repo\n"


def test_file_extension():
    assert TextSerializer().get_file_extension() == "txt"


def test_deep_tree(deep_tree):
    lines = TextSerializer().serialize(deep_tree).splitlines()
    assert len(lines) == 1502
    assert lines[1] == "└── d"
    assert lines[-1] == " " * (4 * 1500) + "└── leaf.py"
