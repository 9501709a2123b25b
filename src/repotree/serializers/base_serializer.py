"""Serializer base class defining the interface for tree export formats.

This module provides the abstract base class that every export format implements.
Serializers are pure: the same tree always produces the same output, and no I/O
happens while serializing.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from repotree.tree_model.tree_node import TreeNode


class TreeSerializer(ABC):
    """Abstract base class for rendering a tree in a textual export format.

    Concrete serializers implement :meth:`stream`, which yields the output in
    pieces, and :meth:`get_file_extension`. :meth:`serialize` joins the streamed
    pieces into a single string. An absent root serializes to the empty string.

    Example:
        >>> class NameListSerializer(TreeSerializer):
        ...     def stream(self, root):
        ...         if root is not None:
        ...             for node in root.iter_nodes():
        ...                 yield node.name + "\\n"
        ...
        ...     def get_file_extension(self) -> str:
        ...         return "lst"
        >>> root = TreeNode.folder("repo", "", [TreeNode.file("a.ts", "a.ts")])
        >>> print(NameListSerializer().serialize(root), end="")
        repo
        a.ts
    """

    @abstractmethod
    def stream(self, root: Optional[TreeNode]) -> Iterator[str]:
        """Generate the serialized form of a tree piece by piece.

        Args:
            root: Root of the tree to serialize.

        Yields:
            Consecutive fragments of the output. Joined, they form the complete
            serialization.
        """
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        """Get the file extension for this format, without the leading dot (e.g. ``"md"``)."""
        pass

    def serialize(self, root: Optional[TreeNode]) -> str:
        """Serialize a complete tree into a single string."""
        return "".join(self.stream(root))
