"""Plain-text tree rendering in the style of the Unix ``tree`` command."""

from typing import Iterator, Optional

from repotree.tree_model.tree_node import TreeNode

from .base_serializer import TreeSerializer


class TextSerializer(TreeSerializer):
    """Serializer drawing the tree with box-drawing connectors.

    The root's name is printed on its own line. Every other node is printed on one
    line, prefixed with ``├── `` or ``└── `` (for the last child of its parent) and
    with ``│   `` or four spaces carried over from each ancestor level. Children
    appear in their stored order. Each line ends with a newline.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.folder("src", "src", [
        ...         TreeNode.file("a.ts", "src/a.ts"),
        ...         TreeNode.file("b.ts", "src/b.ts"),
        ...     ]),
        ...     TreeNode.file("README.md", "README.md"),
        ... ])
        >>> print(TextSerializer().serialize(root), end="")
        repo
        ├── src
        │   ├── a.ts
        │   └── b.ts
        └── README.md
    """

    def stream(self, root: Optional[TreeNode]) -> Iterator[str]:
        if root is None:
            return

        yield f"{root.name}\n"
        # Direct children of the root carry no prefix
        stack = [(child, "", i == len(root.children) - 1) for i, child in enumerate(root.children)]
        stack.reverse()
        while stack:
            node, prefix, is_last = stack.pop()
            connector = "└── " if is_last else "├── "
            yield f"{prefix}{connector}{node.name}\n"

            child_prefix = prefix + ("    " if is_last else "│   ")
            last_index = len(node.children) - 1
            stack.extend((node.children[i], child_prefix, i == last_index) for i in range(last_index, -1, -1))

    def get_file_extension(self) -> str:
        return "txt"
