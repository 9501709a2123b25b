"""Search and filtering of repository trees.

Filtering keeps the files that match a :class:`NodeMatch` predicate together with
every folder on the way to them, producing a new, structurally valid tree. The
input tree is never modified; unchanged subtrees are shared with the result.
"""

import logging
from typing import Iterable, List, Optional, Set

from anytree import LevelOrderIter

from repotree.exceptions import InvalidArgumentError
from repotree.exclusion_rules.base_rules import BaseExclusionRules
from repotree.tree_model.tree_node import TreeNode

logger = logging.getLogger(__name__)


class NodeMatch:
    """Predicate selecting nodes by name and file extension.

    The name filter is a case-insensitive substring test on a node's name; the
    extension filter is an allow-set of extension keys (see
    :func:`repotree.tree_model.tree_node.extension_key`). Either filter is inactive
    when empty.

    Files must satisfy both filters. Folders are never tested against the extension
    filter; they match by name only while a search term is active.

    Attributes:
        search (str): The lowercased search term.
        extensions (frozenset): The normalized extension allow-set.

    Example:
        >>> match = NodeMatch("util", [".TS", "tsx"])
        >>> sorted(match.extensions)
        ['ts', 'tsx']
        >>> match.matches_file(TreeNode.file("string-utils.ts", "lib/string-utils.ts"))
        True
        >>> match.matches_file(TreeNode.file("utils.py", "lib/utils.py"))
        False
        >>> NodeMatch().is_empty
        True
    """

    def __init__(self, search: str = "", extensions: Iterable[str] = ()) -> None:
        """Initialize the predicate.

        Args:
            search: Substring to look for in node names. Defaults to no name filter.
            extensions: Extension keys to allow, with or without a leading dot.
                Defaults to no extension filter.

        Raises:
            InvalidArgumentError: If search is not a string or any extension is not
                a string.
        """
        if not isinstance(search, str):
            raise InvalidArgumentError(f"search must be a string, got {type(search).__name__}")
        if isinstance(extensions, str):
            raise InvalidArgumentError("extensions must be a collection of strings, not a single string")

        normalized: Set[str] = set()
        try:
            for ext in extensions:
                if not isinstance(ext, str):
                    raise InvalidArgumentError(f"extensions must contain strings, got {type(ext).__name__}")
                normalized.add(ext.lower().lstrip("."))
        except TypeError:
            raise InvalidArgumentError(f"extensions must be iterable, got {type(extensions).__name__}")

        self.search = search.lower()
        self.extensions = frozenset(normalized)

    def __repr__(self) -> str:
        return f"NodeMatch(search={self.search!r}, extensions={sorted(self.extensions)!r})"

    @property
    def is_empty(self) -> bool:
        """True when neither the name filter nor the extension filter is active."""
        return not self.search and not self.extensions

    def matches_name(self, node: TreeNode) -> bool:
        """True if a search term is active and occurs in the node's name."""
        return bool(self.search) and self.search in node.name.lower()

    def matches_file(self, node: TreeNode) -> bool:
        """True if a file satisfies both the extension filter and the name filter."""
        if self.extensions and node.extension not in self.extensions:
            return False
        return not self.search or self.search in node.name.lower()


def filter_tree(
    root: Optional[TreeNode],
    predicate: Optional[NodeMatch] = None,
    exclusion_rules: Optional[BaseExclusionRules] = None,
) -> Optional[TreeNode]:
    """Return a new tree holding only the nodes selected by a predicate.

    A file is kept if it satisfies the predicate. A folder is kept if any of its
    children is kept, or if its own name matches the active search term; a folder
    that survives only by name keeps just its surviving children. The root is never
    matched by name: it is kept exactly when something beneath it is.

    Nodes excluded by ``exclusion_rules`` are removed before the predicate is
    applied, together with their subtrees. The root is never excluded.

    When the predicate is empty and no exclusion rules are configured the input is
    returned unchanged.

    Args:
        root: Root of the tree to filter. None is treated as an empty tree.
        predicate: The search predicate. Defaults to an empty predicate.
        exclusion_rules: Optional rules removing nodes regardless of the predicate.

    Returns:
        The filtered tree, or None if nothing matched.

    Raises:
        InvalidArgumentError: If predicate is not a NodeMatch.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.folder("src", "src", [
        ...         TreeNode.file("a.ts", "src/a.ts"),
        ...         TreeNode.file("b.ts", "src/b.ts"),
        ...     ]),
        ...     TreeNode.file("README.md", "README.md"),
        ... ])
        >>> result = filter_tree(root, NodeMatch("a.ts"))
        >>> [node.path for node in result.iter_nodes()]
        ['', 'src', 'src/a.ts']
        >>> [node.path for node in filter_tree(root, NodeMatch("a")).iter_nodes()]
        ['', 'src', 'src/a.ts', 'README.md']
        >>> filter_tree(root, NodeMatch()) is root
        True
    """
    if predicate is None:
        predicate = NodeMatch()
    elif not isinstance(predicate, NodeMatch):
        raise InvalidArgumentError(f"predicate must be a NodeMatch, got {type(predicate).__name__}")

    if root is None:
        return None

    if exclusion_rules is not None and not exclusion_rules.has_rules():
        exclusion_rules = None
    if predicate.is_empty and exclusion_rules is None:
        return root

    logger.debug("Filtering tree %r with %r", root.name, predicate)
    if root.is_file:
        return root if predicate.matches_file(root) else None
    return _filter_folders(root, predicate, exclusion_rules)


def _filter_folders(
    root: TreeNode,
    predicate: NodeMatch,
    exclusion_rules: Optional[BaseExclusionRules],
) -> Optional[TreeNode]:
    """Post-order walk for filter_tree over an explicit stack; applies the predicate without short-circuiting."""
    # Each frame is [folder, index of the next child, surviving children]
    frames: List[list] = [[root, 0, []]]
    result: Optional[TreeNode] = None
    while frames:
        frame = frames[-1]
        node, index, kept = frame
        if index < len(node.children):
            frame[1] = index + 1
            child = node.children[index]
            if exclusion_rules is not None and exclusion_rules.exclude(child):
                continue
            if child.is_folder:
                frames.append([child, 0, []])
            elif predicate.matches_file(child):
                kept.append(child)
            continue

        frames.pop()
        result = _finish_folder(node, kept, predicate, is_root=not frames)
        if frames and result is not None:
            frames[-1][2].append(result)
    return result


def _finish_folder(node: TreeNode, kept: List[TreeNode], predicate: NodeMatch, is_root: bool) -> Optional[TreeNode]:
    if kept:
        if len(kept) == len(node.children) and all(a is b for a, b in zip(kept, node.children)):
            return node
        return node.with_children(kept)

    # With an empty predicate only exclusions remove nodes, so folders stay
    if predicate.is_empty:
        return node if not node.children else node.with_children(())
    if not is_root and predicate.matches_name(node):
        return node if not node.children else node.with_children(())
    return None


def available_extensions(root: Optional[TreeNode]) -> Set[str]:
    """Collect the extension keys of every file in a tree.

    These are the values that make sense in a NodeMatch extension allow-set.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.file("a.ts", "a.ts"), TreeNode.file("Makefile", "Makefile"),
        ... ])
        >>> sorted(available_extensions(root))
        ['no-extension', 'ts']
    """
    if root is None:
        return set()
    return {node.extension for node in LevelOrderIter(root, filter_=lambda n: n.is_file)}
