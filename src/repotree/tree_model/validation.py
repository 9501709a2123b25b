"""Structural validation of repository trees."""

from typing import Optional, Set

from repotree.exceptions import MalformedTreeError
from repotree.tree_model.tree_node import TreeNode, join_path


def validate_tree(root: Optional[TreeNode]) -> None:
    """Check that a tree satisfies the structural invariants of the model.

    The checks are:

    - every child's path is its parent's path joined with the child's name;
    - files have no children (also enforced when a node is constructed);
    - no two nodes share a path.

    Validation stops at the first violation. An absent root is an empty tree
    and is always valid.

    Args:
        root: Root of the tree to validate.

    Raises:
        MalformedTreeError: If any invariant is violated.

    Example:
        >>> from repotree.tree_model.tree_node import TreeNode
        >>> validate_tree(TreeNode.folder("repo", "", [TreeNode.file("a", "a")]))
        >>> validate_tree(TreeNode.folder("repo", "", [TreeNode.file("a", "b")]))
        Traceback (most recent call last):
        ...
        repotree.exceptions.MalformedTreeError: Child path does not match parent path and name: b
    """
    if root is None:
        return

    seen: Set[str] = {root.path}
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_file and node.children:
            raise MalformedTreeError("File node cannot have children", path=node.path)
        for child in node.children:
            if child.path != join_path(node.path, child.name):
                raise MalformedTreeError("Child path does not match parent path and name", path=child.path)
            if child.path in seen:
                raise MalformedTreeError("Duplicate path in tree", path=child.path)
            seen.add(child.path)
            stack.append(child)
