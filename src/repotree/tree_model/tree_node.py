"""Node representation for entries in a repository tree."""

from dataclasses import dataclass, replace
from typing import Iterable, Iterator, Optional, Tuple

from anytree import LevelOrderIter

from repotree.exceptions import MalformedTreeError
from repotree.types import NodeKind

# Histogram key for files whose name carries no usable extension
NO_EXTENSION = "no-extension"


def join_path(parent_path: str, name: str) -> str:
    """Join a parent path and a child name into the child's path.

    The repository root built from a flat listing has an empty path, so its
    children's paths are just their names.

    Example:
        >>> join_path("", "src")
        'src'
        >>> join_path("src", "a.ts")
        'src/a.ts'
    """
    return f"{parent_path}/{name}" if parent_path else name


def extension_key(name: str) -> str:
    """Derive the lowercase extension key of a file name.

    The name is split on ``.`` and the last segment is lowercased. Names without
    a dot, or ending in a dot, map to :data:`NO_EXTENSION`.

    Example:
        >>> extension_key("index.TS")
        'ts'
        >>> extension_key("archive.tar.gz")
        'gz'
        >>> extension_key("Makefile")
        'no-extension'
        >>> extension_key(".gitignore")
        'gitignore'
    """
    if "." not in name:
        return NO_EXTENSION
    return name.rsplit(".", 1)[1].lower() or NO_EXTENSION


@dataclass(frozen=True)
class TreeNode:
    """Immutable node representing a file or folder in a repository tree.

    Nodes are plain values: every transformation builds new nodes instead of
    modifying existing ones, so a single tree can be shared freely between
    callers. Children are stored as a tuple in insertion order. The ``children``
    attribute also makes nodes usable with anytree's iterators.

    Attributes:
        name (str): Base name of the file or folder.
        path (str): Slash-separated identifier from the root; unique within a tree.
        kind (NodeKind): Whether this node is a file or a folder.
        size (Optional[int]): Size in bytes, meaningful for files only.
        children (Tuple[TreeNode, ...]): Child nodes; always empty for files.
        has_more (bool): True when the children were deferred into a chunk.

    Example:
        >>> readme = TreeNode("README.md", "README.md", size=5)
        >>> root = TreeNode("repo", "", NodeKind.FOLDER, children=(readme,))
        >>> root.is_folder
        True
        >>> [node.path for node in root.iter_nodes()]
        ['', 'README.md']
    """

    name: str
    path: str
    kind: NodeKind = NodeKind.FILE
    size: Optional[int] = None
    children: Tuple["TreeNode", ...] = ()
    has_more: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.kind is NodeKind.FILE and self.children:
            raise MalformedTreeError("File node cannot have children", path=self.path)

    @classmethod
    def file(cls, name: str, path: str, size: Optional[int] = None) -> "TreeNode":
        """Create a file node."""
        return cls(name, path, NodeKind.FILE, size=size)

    @classmethod
    def folder(cls, name: str, path: str, children: Iterable["TreeNode"] = ()) -> "TreeNode":
        """Create a folder node with the given children."""
        return cls(name, path, NodeKind.FOLDER, children=tuple(children))

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def extension(self) -> str:
        """Extension key of this node's name (see :func:`extension_key`)."""
        return extension_key(self.name)

    def with_children(self, children: Iterable["TreeNode"], has_more: Optional[bool] = None) -> "TreeNode":
        """Return a copy of this node with a different child list.

        The ``has_more`` flag is kept unless a new value is given.
        """
        if has_more is None:
            has_more = self.has_more
        return replace(self, children=tuple(children), has_more=has_more)

    def iter_nodes(self) -> Iterator["TreeNode"]:
        """Iterate over this node and all its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            # Reversed so children are visited in their stored order
            stack.extend(reversed(node.children))


def count_nodes(nodes: Iterable[TreeNode]) -> int:
    """Count the given nodes together with all of their descendants.

    Example:
        >>> leaf = TreeNode.file("a.ts", "src/a.ts")
        >>> count_nodes([TreeNode.folder("src", "src", [leaf])])
        2
    """
    return sum(1 for node in nodes for _ in LevelOrderIter(node))


def iter_file_paths(root: Optional[TreeNode]) -> Iterator[str]:
    """Yield the path of every file in the tree, in pre-order.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts")]),
        ...     TreeNode.file("README.md", "README.md"),
        ... ])
        >>> list(iter_file_paths(root))
        ['src/a.ts', 'README.md']
    """
    if root is None:
        return
    for node in root.iter_nodes():
        if node.is_file:
            yield node.path
