"""Construction of repository trees from external data.

Trees enter the system in one of two shapes:

- a flat listing of entries, as returned by a repository-hosting API's recursive
  tree endpoint (``[{"path": "src/a.ts", "type": "blob", "size": 10}, ...]``);
- a nested mapping, as produced by :func:`tree_to_dict` and the JSON exporter.

Both builders validate the resulting tree, so downstream operations can rely on
the model's invariants without re-checking them on every read.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from repotree.exceptions import MalformedTreeError
from repotree.tree_model.tree_node import TreeNode, join_path
from repotree.tree_model.validation import validate_tree
from repotree.types import NodeKind

logger = logging.getLogger(__name__)


class _PendingNode:
    """Mutable staging record used while assembling a flat listing."""

    __slots__ = ("name", "path", "kind", "size", "children", "declared")

    def __init__(self, name: str, path: str, kind: NodeKind, declared: bool = False) -> None:
        self.name = name
        self.path = path
        self.kind = kind
        self.size: Optional[int] = None
        self.children: List["_PendingNode"] = []
        self.declared = declared

    def freeze(self) -> TreeNode:
        # Pre-order list; walked backwards every child is frozen before its parent
        order: List["_PendingNode"] = []
        stack = [self]
        while stack:
            pending = stack.pop()
            order.append(pending)
            stack.extend(pending.children)

        frozen: Dict[int, TreeNode] = {}
        for pending in reversed(order):
            if pending.kind is NodeKind.FILE:
                node = TreeNode(pending.name, pending.path, NodeKind.FILE, size=pending.size)
            else:
                ordered = sorted(pending.children, key=lambda n: (n.kind is not NodeKind.FOLDER, n.name.lower(), n.name))
                children = [frozen.pop(id(child)) for child in ordered]
                node = TreeNode(pending.name, pending.path, NodeKind.FOLDER, children=children)
            frozen[id(pending)] = node
        return frozen[id(self)]


def _parse_size(value: Any, path: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedTreeError(f"Invalid size {value!r}", path=path)
    return value


def build_tree(entries: Iterable[Mapping[str, Any]], root_name: str, root_path: str = "") -> TreeNode:
    """Build a tree from a flat listing of repository entries.

    Each entry needs a slash-separated ``path`` and a ``type`` (``blob``, ``tree``,
    ``commit``, or the ``file``/``folder`` spelling); ``size`` is optional. Folders
    that only appear as path prefixes are created automatically. Children are
    ordered folders first, then by name ignoring case.

    Args:
        entries: Flat listing of entries, relative to the repository root.
        root_name: Display name of the root node (usually the repository name).
        root_path: Path of the root node. Entry paths are joined onto it.

    Returns:
        The root folder of the assembled tree.

    Raises:
        MalformedTreeError: If an entry is missing its path, has an unknown type,
            duplicates another entry, or places children under a file.

    Example:
        >>> root = build_tree(
        ...     [{"path": "src/a.ts", "type": "blob", "size": 10}, {"path": "README.md", "type": "blob"}],
        ...     "repo",
        ... )
        >>> [(child.name, child.kind.value) for child in root.children]
        [('src', 'folder'), ('README.md', 'file')]
        >>> root.children[0].children[0].path
        'src/a.ts'
    """
    root = _PendingNode(root_name, root_path, NodeKind.FOLDER, declared=True)
    nodes: Dict[str, _PendingNode] = {"": root}
    count = 0

    for entry in entries:
        if not isinstance(entry, Mapping):
            raise MalformedTreeError(f"Listing entry must be a mapping, got {type(entry).__name__}")
        raw_path = entry.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            raise MalformedTreeError(f"Entry without a path: {dict(entry)!r}")
        parts = raw_path.split("/")
        if any(part == "" for part in parts):
            raise MalformedTreeError("Entry path has an empty segment", path=raw_path)
        try:
            kind = NodeKind.parse(entry.get("type", "blob"))
        except ValueError as e:
            raise MalformedTreeError(str(e), path=raw_path)

        parent = root
        for depth, part in enumerate(parts):
            key = "/".join(parts[: depth + 1])
            node = nodes.get(key)
            is_last = depth == len(parts) - 1
            if node is None:
                node = _PendingNode(part, join_path(parent.path, part), NodeKind.FOLDER)
                nodes[key] = node
                parent.children.append(node)
            elif is_last and node.declared:
                raise MalformedTreeError("Duplicate entry in listing", path=raw_path)
            if not is_last and node.kind is NodeKind.FILE:
                raise MalformedTreeError("File node cannot have children", path=node.path)
            parent = node

        if kind is NodeKind.FILE and parent.children:
            raise MalformedTreeError("File node cannot have children", path=parent.path)
        parent.kind = kind
        parent.declared = True
        parent.size = _parse_size(entry.get("size"), raw_path) if kind is NodeKind.FILE else None
        count += 1

    tree = root.freeze()
    validate_tree(tree)
    logger.debug("Built tree %r from %d entries (%d nodes)", root_name, count, len(nodes))
    return tree


def tree_from_dict(data: Mapping[str, Any]) -> TreeNode:
    """Build a tree from its nested mapping form.

    The mapping uses the keys written by :func:`tree_to_dict`: ``name``, ``path``,
    ``type``, and optionally ``size``, ``hasMore`` and ``children``. The source
    vocabulary ``blob``/``tree`` is accepted for ``type``. A missing ``type`` means
    a folder when ``children`` is present and a file otherwise.

    Raises:
        MalformedTreeError: If a node is missing required keys or the tree
            violates the model's invariants.

    Example:
        >>> root = tree_from_dict({"name": "repo", "path": "", "type": "tree",
        ...                        "children": [{"name": "a.ts", "path": "a.ts", "type": "blob"}]})
        >>> root.children[0].is_file
        True
    """
    tree = _node_from_dict(data)
    validate_tree(tree)
    return tree


def _node_from_dict(data: Mapping[str, Any]) -> TreeNode:
    # Mappings are checked top-down and the nodes built bottom-up, without recursion
    order = []
    seen: Set[int] = set()
    stack = [data]
    while stack:
        item = stack.pop()
        if not isinstance(item, Mapping):
            raise MalformedTreeError(f"Tree node must be a mapping, got {type(item).__name__}")
        name = item.get("name")
        path = item.get("path")
        if not isinstance(name, str) or not isinstance(path, str):
            raise MalformedTreeError(f"Tree node requires string 'name' and 'path': {_describe(item)}")
        if id(item) in seen:
            raise MalformedTreeError("Tree node appears more than once", path=path)
        seen.add(id(item))

        raw_children = item.get("children")
        default_type = "folder" if raw_children is not None else "file"
        try:
            kind = NodeKind.parse(item.get("type", default_type))
        except ValueError as e:
            raise MalformedTreeError(str(e), path=path)

        if raw_children is not None and not isinstance(raw_children, list):
            raise MalformedTreeError("'children' must be a list", path=path)
        children = raw_children or []
        order.append((item, name, path, kind, children))
        stack.extend(reversed(children))

    built: Dict[int, TreeNode] = {}
    for item, name, path, kind, children in reversed(order):
        built[id(item)] = TreeNode(
            name,
            path,
            kind,
            size=_parse_size(item.get("size"), path),
            children=[built.pop(id(child)) for child in children],
            has_more=bool(item.get("hasMore", False)),
        )
    return built[id(data)]


def _describe(data: Mapping[str, Any]) -> str:
    return ", ".join(f"{key}={data[key]!r}" for key in list(data)[:3] if key != "children")


def _node_fields(node: TreeNode) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": node.name, "path": node.path, "type": node.kind.value}
    if node.size is not None:
        data["size"] = node.size
    if node.has_more:
        data["hasMore"] = True
    return data


def tree_to_dict(node: TreeNode) -> Dict[str, Any]:
    """Convert a tree into nested, JSON-compatible mappings.

    Keys appear in a fixed order: ``name``, ``path``, ``type``, then ``size`` when
    known, ``hasMore`` when set, and ``children`` for folders.

    Example:
        >>> tree_to_dict(TreeNode.file("a.ts", "src/a.ts", size=10))
        {'name': 'a.ts', 'path': 'src/a.ts', 'type': 'file', 'size': 10}
    """
    result = _node_fields(node)
    stack = [(node, result)]
    while stack:
        current, data = stack.pop()
        if current.is_folder:
            data["children"] = []
            for child in current.children:
                child_data = _node_fields(child)
                data["children"].append(child_data)
                stack.append((child, child_data))
    return result
