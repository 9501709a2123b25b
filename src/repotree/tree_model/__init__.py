"""Immutable repository tree model.

This package provides the node type shared by every tree operation, together
with helpers for building trees from external data and validating them.
"""

from .tree_builder import build_tree, tree_from_dict, tree_to_dict
from .tree_node import NO_EXTENSION, TreeNode, count_nodes, extension_key, iter_file_paths, join_path
from .validation import validate_tree

__all__ = [
    "NO_EXTENSION",
    "TreeNode",
    "build_tree",
    "count_nodes",
    "extension_key",
    "iter_file_paths",
    "join_path",
    "tree_from_dict",
    "tree_to_dict",
    "validate_tree",
]
