"""Unit tests for splitting trees into chunks for lazy loading."""

from collections import Counter
from types import MappingProxyType

import pytest

from repotree.chunker import DEFAULT_MAX_NODES_PER_CHUNK, ChunkedTree, chunk_tree, merge_chunks
from repotree.exceptions import InvalidArgumentError, MalformedTreeError
from repotree.tree_model.tree_node import TreeNode


def placed_paths(chunked):
    """All node paths in the root view and the chunks, with multiplicity."""
    placed = Counter(node.path for node in chunked.root_tree.iter_nodes())
    for nodes in chunked.chunks.values():
        placed.update(descendant.path for node in nodes for descendant in node.iter_nodes())
    return placed


class TestChunkTree:
    """Tests for chunk_tree."""

    def test_small_tree(self, sample_tree):
        chunked = chunk_tree(sample_tree)
        src, readme = chunked.root_tree.children
        assert src.path == "src" and src.children == ()
        assert readme == sample_tree.children[1]
        assert dict(chunked.chunks) == {"src": sample_tree.children[0].children}

    def test_default_chunk_size(self):
        assert DEFAULT_MAX_NODES_PER_CHUNK == 500

    @pytest.mark.parametrize("max_nodes", [1, 2, 3, 7, 50])
    def test_every_node_placed_exactly_once(self, wide_tree_factory, max_nodes):
        root = wide_tree_factory(4, 9, nested=4)
        chunked = chunk_tree(root, max_nodes)
        expected = Counter(node.path for node in root.iter_nodes())
        assert placed_paths(chunked) == expected

    @pytest.mark.parametrize("max_nodes", [1, 2, 3, 7, 50])
    def test_chunks_respect_size_bound(self, wide_tree_factory, max_nodes):
        chunked = chunk_tree(wide_tree_factory(4, 9, nested=4), max_nodes)
        assert all(len(nodes) <= max_nodes for nodes in chunked.chunks.values())

    def test_oversized_folder_is_split_in_order(self, wide_tree_factory):
        root = wide_tree_factory(1, 5)
        chunked = chunk_tree(root, 2)
        assert list(chunked.chunks) == ["dir0_0", "dir0_1", "dir0_2"]
        assert [node.name for node in chunked.load("dir0")] == ["f0.py", "f1.py", "f2.py", "f3.py", "f4.py"]

    def test_nested_folder_is_deferred_one_level(self, wide_tree_factory):
        root = wide_tree_factory(1, 3, nested=2)
        chunked = chunk_tree(root, 4)
        deep = chunked.chunks["dir0_0"][0]
        assert deep.path == "dir0/deep"
        assert deep.children == ()
        assert deep.has_more is True
        assert [node.name for node in chunked.chunks["dir0/deep"]] == ["n0.py", "n1.py"]

    def test_nested_folder_below_second_level_is_not_split(self):
        inner = TreeNode.folder("inner", "a/b/inner", [TreeNode.file(f"{i}", f"a/b/inner/{i}") for i in range(3)])
        b = TreeNode.folder("b", "a/b", [inner])
        a = TreeNode.folder("a", "a", [b, TreeNode.file("x", "a/x"), TreeNode.file("y", "a/y")])
        root = TreeNode.folder("repo", "", [a])
        chunked = chunk_tree(root, 2)
        # "b" is deferred with its subtree intact
        assert chunked.chunks["a/b"] == (inner,)
        assert "a/b/inner" not in chunked.chunks

    def test_long_nested_list_gets_numbered_keys(self, wide_tree_factory):
        chunked = chunk_tree(wide_tree_factory(1, 1, nested=5), 2)
        assert chunked.chunk_keys("dir0/deep") == ["dir0/deep_0", "dir0/deep_1", "dir0/deep_2"]
        assert len(chunked.load("dir0/deep")) == 5

    def test_top_level_files_stay_in_root_view(self):
        root = TreeNode.folder("repo", "", [TreeNode.file("a", "a"), TreeNode.file("b", "b")])
        chunked = chunk_tree(root, 1)
        assert chunked.root_tree == root
        assert dict(chunked.chunks) == {}

    def test_empty_top_level_folder_gets_empty_chunk(self):
        root = TreeNode.folder("repo", "", [TreeNode.folder("empty", "empty")])
        assert chunk_tree(root).chunks["empty"] == ()

    def test_deterministic(self, wide_tree_factory):
        root = wide_tree_factory(3, 6, nested=3)
        assert chunk_tree(root, 4) == chunk_tree(root, 4)

    def test_absent_root(self):
        chunked = chunk_tree(None)
        assert chunked.root_tree is None
        assert dict(chunked.chunks) == {}

    @pytest.mark.parametrize("max_nodes", [0, -1, 2.5, "10", True, None])
    def test_invalid_chunk_size(self, sample_tree, max_nodes):
        with pytest.raises(InvalidArgumentError):
            chunk_tree(sample_tree, max_nodes)

    def test_chunk_size_checked_before_root(self):
        with pytest.raises(InvalidArgumentError):
            chunk_tree(None, 0)

    def test_numbered_key_colliding_with_node_path(self):
        dir0 = TreeNode.folder("dir", "dir", [TreeNode.file(f"f{i}", f"dir/f{i}") for i in range(3)])
        clash = TreeNode.folder("dir_0", "dir_0", [TreeNode.file("x", "dir_0/x")])
        root = TreeNode.folder("repo", "", [dir0, clash])
        with pytest.raises(MalformedTreeError, match="dir_0"):
            chunk_tree(root, 2)

    def test_input_is_not_modified(self, wide_tree_factory):
        root = wide_tree_factory(2, 4, nested=2)
        before = repr(root)
        chunk_tree(root, 2)
        assert repr(root) == before


class TestChunkedTree:
    """Tests for ChunkedTree helpers and merge_chunks."""

    @pytest.mark.parametrize("max_nodes", [1, 3, 500])
    def test_merge_restores_original(self, wide_tree_factory, max_nodes):
        root = wide_tree_factory(3, 7, nested=5)
        assert merge_chunks(chunk_tree(root, max_nodes)) == root

    def test_merge_sample_tree(self, sample_tree):
        assert merge_chunks(chunk_tree(sample_tree, 1)) == sample_tree

    def test_merge_absent_root(self):
        assert merge_chunks(ChunkedTree()) is None

    def test_chunk_keys_and_load(self):
        a, b = TreeNode.file("a", "src/a"), TreeNode.file("b", "src/b")
        chunked = ChunkedTree(chunks=MappingProxyType({"src": (a, b)}))
        assert chunked.chunk_keys("src") == ["src"]
        assert chunked.load("src") == (a, b)
        assert chunked.load("missing") == ()

    def test_to_dict(self, sample_tree):
        data = chunk_tree(sample_tree).to_dict()
        assert data["rootTree"]["children"][0] == {"name": "src", "path": "src", "type": "folder", "children": []}
        assert [entry["path"] for entry in data["chunks"]["src"]] == ["src/a.ts", "src/b.ts"]

    def test_to_dict_absent_root(self):
        assert ChunkedTree().to_dict() == {"rootTree": None, "chunks": {}}

    def test_chunks_are_read_only(self, sample_tree):
        with pytest.raises(TypeError):
            chunk_tree(sample_tree).chunks["new"] = ()


class TestChunkKeyCollisions:
    """Numbered chunk keys only need to avoid folder paths."""

    def test_file_named_like_numbered_key(self):
        src = TreeNode.folder("src", "src", [TreeNode.file(f"f{i}", f"src/f{i}") for i in range(3)])
        root = TreeNode.folder("repo", "", [src, TreeNode.file("src_0", "src_0")])
        chunked = chunk_tree(root, 2)
        assert chunked.chunk_keys("src") == ["src_0", "src_1"]
        assert [node.name for node in chunked.load("src")] == ["f0", "f1", "f2"]
        assert merge_chunks(chunked) == root

    def test_nested_file_named_like_numbered_key(self, wide_tree_factory):
        root = wide_tree_factory(1, 1, nested=5)
        dir0 = root.children[0]
        clash = TreeNode.file("deep_0", "dir0/deep_0")
        root = root.with_children([dir0.with_children(dir0.children + (clash,))])
        chunked = chunk_tree(root, 2)
        assert chunked.chunk_keys("dir0/deep") == ["dir0/deep_0", "dir0/deep_1", "dir0/deep_2"]
        assert merge_chunks(chunked) == root


class TestDeepTrees:
    """Chunking trees deeper than the recursion limit."""

    def test_chunk_and_merge(self, deep_tree):
        chunked = chunk_tree(deep_tree, 10)
        assert chunked.root_tree.children[0].children == ()
        assert [node.path for node in chunked.load("d")] == ["d/d"]
        assert chunked.chunks["d/d"][0].path == "d/d/d"
        merged = merge_chunks(chunked)
        assert [node.path for node in merged.iter_nodes()] == [node.path for node in deep_tree.iter_nodes()]

    def test_to_dict(self, deep_tree):
        data = chunk_tree(deep_tree, 10).to_dict()
        assert data["rootTree"]["children"][0]["children"] == []
        assert data["chunks"]["d_0"][0]["hasMore"] is True
