"""Partitioning of large repository trees for lazy loading.

A huge tree is split into a shallow root view plus a map of deferred child lists
("chunks"), each holding at most ``max_nodes_per_chunk`` entries. A consumer
renders the root view first and splices chunks into folders as they are opened.

Chunk keys are folder paths. A folder whose deferred children do not fit into one
chunk has them spread over several keys formed by appending ``_0``, ``_1``, ...
to its path; :meth:`ChunkedTree.chunk_keys` resolves a folder path to its keys.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from anytree import LevelOrderIter

from repotree.exceptions import InvalidArgumentError, MalformedTreeError
from repotree.tree_model.tree_builder import tree_to_dict
from repotree.tree_model.tree_node import TreeNode, count_nodes

logger = logging.getLogger(__name__)

DEFAULT_MAX_NODES_PER_CHUNK = 500


@dataclass(frozen=True)
class ChunkedTree:
    """A tree split into a shallow root view and deferred chunks.

    Attributes:
        root_tree (Optional[TreeNode]): The original root with its direct children;
            folder children have their own children removed. None for an empty tree.
        chunks (Mapping[str, Tuple[TreeNode, ...]]): Deferred child lists keyed by
            folder path, or by folder path plus ``_<index>`` for split lists.
    """

    root_tree: Optional[TreeNode] = None
    chunks: Mapping[str, Tuple[TreeNode, ...]] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def chunk_keys(self, path: str) -> List[str]:
        """Return the keys holding the deferred children of the folder at ``path``.

        Example:
            >>> a, b = TreeNode.file("a", "src/a"), TreeNode.file("b", "src/b")
            >>> chunked = ChunkedTree(chunks={"src_0": (a,), "src_1": (b,)})
            >>> chunked.chunk_keys("src")
            ['src_0', 'src_1']
            >>> chunked.chunk_keys("docs")
            []
        """
        if path in self.chunks:
            return [path]
        keys = []
        index = 0
        while f"{path}_{index}" in self.chunks:
            keys.append(f"{path}_{index}")
            index += 1
        return keys

    def load(self, path: str) -> Tuple[TreeNode, ...]:
        """Return all deferred children of the folder at ``path``, in order."""
        return tuple(node for key in self.chunk_keys(path) for node in self.chunks[key])

    def to_dict(self) -> Dict[str, Any]:
        """Convert the chunked view into JSON-compatible data."""
        return {
            "rootTree": tree_to_dict(self.root_tree) if self.root_tree is not None else None,
            "chunks": {key: [tree_to_dict(node) for node in nodes] for key, nodes in self.chunks.items()},
        }


def chunk_tree(root: Optional[TreeNode], max_nodes_per_chunk: int = DEFAULT_MAX_NODES_PER_CHUNK) -> ChunkedTree:
    """Split a tree into a root view and bounded-size chunks.

    The root view keeps the root's direct children; every folder among them is
    emptied and its child list is deferred:

    - if the folder has at most ``max_nodes_per_chunk`` descendants in total, its
      child list is stored unchanged under the folder's path;
    - otherwise its children are walked in order and packed into chunks of at most
      ``max_nodes_per_chunk`` entries, stored under ``<path>_0``, ``<path>_1``, ...
      Each non-empty folder met during that walk is emptied as well, flagged with
      ``has_more``, and its own child list stored under its path (split the same
      way if it is longer than ``max_nodes_per_chunk``). Folders further down are
      not split again.

    Every node of the input appears exactly once in the result, either in the root
    view or inside one chunk. The input tree is not modified.

    Args:
        root: Root of the tree to split. None yields an empty ChunkedTree.
        max_nodes_per_chunk: Upper bound on the number of entries per chunk.

    Returns:
        The chunked view of the tree.

    Raises:
        InvalidArgumentError: If max_nodes_per_chunk is not a positive integer.
        MalformedTreeError: If two chunks would share a key, or a split-chunk key
            equals the path of a folder in the tree.

    Example:
        >>> src = TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts")])
        >>> root = TreeNode.folder("repo", "", [src, TreeNode.file("README.md", "README.md")])
        >>> chunked = chunk_tree(root, 10)
        >>> [child.children for child in chunked.root_tree.children]
        [(), ()]
        >>> [node.path for node in chunked.chunks["src"]]
        ['src/a.ts']
    """
    if isinstance(max_nodes_per_chunk, bool) or not isinstance(max_nodes_per_chunk, int):
        raise InvalidArgumentError(f"max_nodes_per_chunk must be an integer, got {type(max_nodes_per_chunk).__name__}")
    if max_nodes_per_chunk <= 0:
        raise InvalidArgumentError(f"max_nodes_per_chunk must be positive, got {max_nodes_per_chunk}")

    if root is None:
        return ChunkedTree()

    chunks: Dict[str, Tuple[TreeNode, ...]] = {}
    node_paths: Set[str] = set()

    def store(key: str, nodes: Sequence[TreeNode], suffixed: bool = False) -> None:
        if key in chunks:
            raise MalformedTreeError("Chunk key collision", path=key)
        if suffixed:
            # Only folder paths are ever looked up as chunk keys
            if not node_paths:
                node_paths.update(node.path for node in LevelOrderIter(root, filter_=lambda n: n.is_folder))
            if key in node_paths:
                raise MalformedTreeError("Chunk key collides with a folder path", path=key)
        chunks[key] = tuple(nodes)

    top_level = []
    for child in root.children:
        if child.is_file:
            top_level.append(child)
            continue

        top_level.append(child.with_children(()))
        descendant_count = count_nodes(child.children)
        if descendant_count <= max_nodes_per_chunk:
            store(child.path, child.children)
        else:
            logger.debug("Splitting %r: %d descendants exceed %d", child.path, descendant_count, max_nodes_per_chunk)
            _split_children(child, max_nodes_per_chunk, store)

    logger.debug("Chunked tree %r into %d chunks", root.name, len(chunks))
    return ChunkedTree(root.with_children(top_level), MappingProxyType(chunks))


def _split_children(
    folder: TreeNode,
    max_nodes_per_chunk: int,
    store: Callable[..., None],
) -> None:
    """Pack an oversized folder's children into numbered chunks."""
    buffer: List[TreeNode] = []
    chunk_index = 0

    for node in folder.children:
        if node.is_folder and node.children:
            _store_list(node.path, node.children, max_nodes_per_chunk, store)
            node = node.with_children((), has_more=True)

        buffer.append(node)
        if len(buffer) >= max_nodes_per_chunk:
            store(f"{folder.path}_{chunk_index}", buffer, suffixed=True)
            buffer = []
            chunk_index += 1

    if buffer:
        store(f"{folder.path}_{chunk_index}", buffer, suffixed=True)


def _store_list(path: str, nodes: Sequence[TreeNode], max_nodes_per_chunk: int, store: Callable[..., None]) -> None:
    """Store a nested folder's child list, numbered only when it exceeds one chunk."""
    if len(nodes) <= max_nodes_per_chunk:
        store(path, nodes)
        return
    for chunk_index, start in enumerate(range(0, len(nodes), max_nodes_per_chunk)):
        store(f"{path}_{chunk_index}", nodes[start : start + max_nodes_per_chunk], suffixed=True)  # noqa: E203


def merge_chunks(chunked: ChunkedTree) -> Optional[TreeNode]:
    """Reassemble the full tree from a ChunkedTree.

    Every folder without inline children gets the contents of its chunks spliced
    back in, at every level; ``has_more`` flags are cleared. For a tree produced by
    :func:`chunk_tree` this returns a tree equal to the original input, apart from
    ``has_more`` flags the input may already have carried.

    Example:
        >>> src = TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts")])
        >>> root = TreeNode.folder("repo", "", [src])
        >>> merge_chunks(chunk_tree(root, 1)) == root
        True
    """
    root = chunked.root_tree
    if root is None:
        return None

    # Each frame is [folder, its full child list, children merged so far]
    frames: List[list] = [[root, root.children, []]]
    while True:
        folder, pending, merged = frames[-1]
        if len(merged) < len(pending):
            child = pending[len(merged)]
            if child.is_file:
                merged.append(child)
            else:
                frames.append([child, child.children or chunked.load(child.path), []])
            continue

        frames.pop()
        node = folder.with_children(merged, has_more=False)
        if not frames:
            return node
        frames[-1][2].append(node)
