"""Aggregate statistics over a repository tree.

This module walks a tree once and summarizes it: how many files and folders it
holds, their total size, how deep it goes, and how often each file extension
occurs.
"""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from humanfriendly import format_size

from repotree.tree_model.tree_node import TreeNode


@dataclass(frozen=True)
class StatsSummary:
    """Immutable summary of a tree's contents.

    Attributes:
        total_files (int): Number of file nodes.
        total_folders (int): Number of folder nodes, including the root.
        total_size (int): Sum of all file sizes; unknown sizes count as 0.
        max_depth (int): Greatest depth of any node, with the root at depth 0.
        file_types (Mapping[str, int]): Occurrences of each lowercase extension key,
            in order of first appearance.
    """

    total_files: int = 0
    total_folders: int = 0
    total_size: int = 0
    max_depth: int = 0
    file_types: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    @property
    def total_nodes(self) -> int:
        return self.total_files + self.total_folders

    def most_common_types(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        """Return extension keys ordered by count, most frequent first.

        Keys with equal counts keep their order of first appearance.

        Example:
            >>> summary = StatsSummary(file_types={"md": 1, "ts": 2, "py": 1})
            >>> summary.most_common_types(2)
            [('ts', 2), ('md', 1)]
        """
        return Counter(self.file_types).most_common(n)


def compute_stats(root: Optional[TreeNode]) -> StatsSummary:
    """Compute a StatsSummary for a tree in a single depth-first traversal.

    An absent root is treated as an empty tree and yields a zero-valued summary.

    Args:
        root: Root of the tree to summarize.

    Returns:
        The summary of the tree.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts", size=10)]),
        ...     TreeNode.file("README.md", "README.md", size=5),
        ... ])
        >>> summary = compute_stats(root)
        >>> summary.total_files, summary.total_folders, summary.total_size, summary.max_depth
        (2, 2, 15, 2)
        >>> dict(summary.file_types)
        {'ts': 1, 'md': 1}
    """
    if root is None:
        return StatsSummary()

    total_files = 0
    total_folders = 0
    total_size = 0
    max_depth = 0
    file_types: Dict[str, int] = {}

    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        max_depth = max(max_depth, depth)

        if node.is_file:
            total_files += 1
            total_size += node.size or 0
            ext = node.extension
            file_types[ext] = file_types.get(ext, 0) + 1
        else:
            total_folders += 1
            # Reversed so children are visited in their stored order
            stack.extend((child, depth + 1) for child in reversed(node.children))

    return StatsSummary(
        total_files=total_files,
        total_folders=total_folders,
        total_size=total_size,
        max_depth=max_depth,
        file_types=MappingProxyType(file_types),
    )


def format_stats(summary: StatsSummary, top_types: int = 5) -> str:
    """Format a StatsSummary into a human-readable report.

    Args:
        summary: The summary to format.
        top_types: How many of the most common extensions to list.

    Returns:
        A multi-line report with one labelled value per line.

    Example:
        >>> print(format_stats(StatsSummary(3, 2, 35, 2, {"ts": 2, "md": 1})))
        Folders: 2
        Files: 3
        Total size: 35 bytes
        Max depth: 2
        File types: ts (2), md (1)
    """
    result = [
        f"Folders: {summary.total_folders}",
        f"Files: {summary.total_files}",
        f"Total size: {format_size(summary.total_size)}",
        f"Max depth: {summary.max_depth}",
    ]

    common = summary.most_common_types(top_types)
    if common:
        result.append("File types: " + ", ".join(f"{ext} ({count})" for ext, count in common))

    return "\n".join(result)
