"""JSON export of repository trees."""

import json
from typing import Iterator, Optional

from repotree.chunker import ChunkedTree
from repotree.exceptions import InvalidArgumentError
from repotree.tree_model.tree_node import TreeNode

from .base_serializer import TreeSerializer

DEFAULT_JSON_INDENT = 2


class JSONSerializer(TreeSerializer):
    """Serializer producing a nested JSON document.

    Each node becomes an object with the keys ``name``, ``path`` and ``type``,
    followed by ``size`` when known, ``hasMore`` when set, and ``children`` for
    folders. Children keep their stored order. The output can be read back with
    :func:`repotree.tree_model.tree_builder.tree_from_dict`.

    The document is written node by node from an explicit stack, so trees of any
    depth can be exported. The layout is the one ``json.dumps`` gives for the
    same indent.

    Attributes:
        indent (int): Number of spaces per nesting level. 0 produces compact output
            with no added whitespace.
        encoder: JSON encoder instance used for names, paths and other scalars.

    Example:
        >>> root = TreeNode.folder("repo", "", [TreeNode.file("a.ts", "a.ts", size=10)])
        >>> JSONSerializer(indent=0).serialize(root)
        '{"name":"repo","path":"","type":"folder","children":[{"name":"a.ts","path":"a.ts","type":"file","size":10}]}'
    """

    def __init__(self, indent: int = DEFAULT_JSON_INDENT) -> None:
        """Initialize the JSON serializer.

        Args:
            indent: Spaces per nesting level; 0 for compact output.

        Raises:
            InvalidArgumentError: If indent is not a non-negative integer.
        """
        if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
            raise InvalidArgumentError(f"indent must be a non-negative integer, got {indent!r}")

        self.indent = indent
        self.encoder = json.JSONEncoder(ensure_ascii=False)
        self.key_separator = ": " if indent else ":"

    def _newline(self, level: int) -> str:
        return "\n" + " " * (self.indent * level) if self.indent else ""

    def _member(self, key: str, level: int) -> str:
        return f"{self._newline(level)}{self.encoder.encode(key)}{self.key_separator}"

    def stream_node(self, root: TreeNode, level: int = 0) -> Iterator[str]:
        """Generate the JSON object for a subtree nested ``level`` levels deep."""
        # Holds pending closing text and nodes still to be written
        stack: list = [(root, level)]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                yield item
                continue

            node, depth = item
            fields = [("name", node.name), ("path", node.path), ("type", node.kind.value)]
            if node.size is not None:
                fields.append(("size", node.size))
            if node.has_more:
                fields.append(("hasMore", True))
            yield "{" + ",".join(self._member(key, depth + 1) + self.encoder.encode(value) for key, value in fields)

            if node.is_file:
                yield self._newline(depth) + "}"
                continue

            yield "," + self._member("children", depth + 1)
            if not node.children:
                yield "[]" + self._newline(depth) + "}"
                continue

            yield "["
            stack.append(self._newline(depth + 1) + "]" + self._newline(depth) + "}")
            for i in range(len(node.children) - 1, -1, -1):
                stack.append((node.children[i], depth + 2))
                stack.append(("," if i else "") + self._newline(depth + 2))

    def stream(self, root: Optional[TreeNode]) -> Iterator[str]:
        if root is None:
            return
        yield from self.stream_node(root)

    def stream_chunked(self, chunked: ChunkedTree) -> Iterator[str]:
        """Generate the JSON document for a chunked tree.

        The document has the shape of :meth:`repotree.chunker.ChunkedTree.to_dict`:
        ``rootTree`` holds the root view (or null) and ``chunks`` maps each chunk
        key to its list of nodes.

        Example:
            >>> from repotree.chunker import chunk_tree
            >>> src = TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts")])
            >>> chunked = chunk_tree(TreeNode.folder("repo", "", [src]))
            >>> json.loads("".join(JSONSerializer().stream_chunked(chunked))) == chunked.to_dict()
            True
        """
        yield "{" + self._member("rootTree", 1)
        if chunked.root_tree is None:
            yield "null"
        else:
            yield from self.stream_node(chunked.root_tree, 1)

        yield "," + self._member("chunks", 1)
        if not chunked.chunks:
            yield "{}"
        else:
            yield "{"
            for i, (key, nodes) in enumerate(chunked.chunks.items()):
                yield ("," if i else "") + self._member(key, 2)
                if not nodes:
                    yield "[]"
                    continue
                yield "["
                for j, node in enumerate(nodes):
                    yield ("," if j else "") + self._newline(3)
                    yield from self.stream_node(node, 3)
                yield self._newline(2) + "]"
            yield self._newline(1) + "}"
        yield self._newline(0) + "}"

    def serialize_chunked(self, chunked: ChunkedTree) -> str:
        """Serialize a chunked tree into a single JSON string."""
        return "".join(self.stream_chunked(chunked))

    def get_file_extension(self) -> str:
        return "json"
