"""Format selection for tree export.

These functions are the entry point used by export collaborators: they pick the
serializer for a format name and derive the download file name.
"""

from typing import Optional, Union

from repotree.exceptions import InvalidArgumentError
from repotree.tree_model.tree_node import TreeNode
from repotree.types import ExportFormat

from .base_serializer import TreeSerializer
from .json_serializer import DEFAULT_JSON_INDENT, JSONSerializer
from .markdown_serializer import MarkdownSerializer
from .text_serializer import TextSerializer


def parse_format(export_format: Union[str, ExportFormat]) -> ExportFormat:
    """Resolve a format name such as ``"markdown"`` to an ExportFormat.

    Raises:
        InvalidArgumentError: If the format is not supported.
    """
    if isinstance(export_format, ExportFormat):
        return export_format
    try:
        return ExportFormat(export_format.lower() if isinstance(export_format, str) else export_format)
    except ValueError:
        supported = ", ".join(fmt.value for fmt in ExportFormat)
        raise InvalidArgumentError(f"Unsupported export format: {export_format!r}. Must be one of: {supported}")


def get_serializer(export_format: Union[str, ExportFormat], indent: int = DEFAULT_JSON_INDENT) -> TreeSerializer:
    """Create the serializer for an export format.

    Args:
        export_format: Format name or ExportFormat value.
        indent: Indent width, used by the JSON format only.

    Raises:
        InvalidArgumentError: If the format is not supported or the indent is invalid.

    Example:
        >>> get_serializer("markdown").get_file_extension()
        'md'
    """
    fmt = parse_format(export_format)
    if fmt is ExportFormat.JSON:
        return JSONSerializer(indent=indent)
    if fmt is ExportFormat.MARKDOWN:
        return MarkdownSerializer()
    return TextSerializer()


def serialize(
    root: Optional[TreeNode],
    export_format: Union[str, ExportFormat] = ExportFormat.TEXT,
    indent: int = DEFAULT_JSON_INDENT,
) -> str:
    """Serialize a tree in the given export format.

    Example:
        >>> root = TreeNode.folder("repo", "", [TreeNode.file("a.ts", "a.ts")])
        >>> serialize(root, "text")
        'repo\\n└── a.ts\\n'
        >>> serialize(None, "json")
        ''
    """
    return get_serializer(export_format, indent=indent).serialize(root)


def export_filename(root: Optional[TreeNode], export_format: Union[str, ExportFormat]) -> str:
    """Build the download file name for an exported tree.

    Example:
        >>> export_filename(TreeNode.folder("my-repo", ""), "json")
        'my-repo-structure.json'
    """
    name = root.name if root is not None and root.name else "tree"
    return f"{name}-structure.{get_serializer(export_format).get_file_extension()}"
