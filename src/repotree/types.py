from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class NodeKind(Enum):
    """Enumeration of the kinds of entries in a repository tree.

    The repository-hosting API calls these ``blob`` and ``tree``; both spellings
    are accepted by :meth:`NodeKind.parse`.

    Attributes:
        FILE: A file (leaf) entry.
        FOLDER: A folder entry that may have children.
    """

    FILE = "file"
    FOLDER = "folder"

    @classmethod
    def parse(cls, value: str) -> "NodeKind":
        """Map a type name from any supported vocabulary to a NodeKind.

        Example:
            >>> NodeKind.parse("blob")
            <NodeKind.FILE: 'file'>
            >>> NodeKind.parse("folder")
            <NodeKind.FOLDER: 'folder'>
        """
        try:
            return _KIND_ALIASES[value]
        except (KeyError, TypeError):
            raise ValueError(f"Unknown node type: {value!r}")


_KIND_ALIASES = {
    "file": NodeKind.FILE,
    "blob": NodeKind.FILE,
    # Submodule entries have no browsable children
    "commit": NodeKind.FILE,
    "folder": NodeKind.FOLDER,
    "tree": NodeKind.FOLDER,
}


class ExportFormat(Enum):
    """Enumeration of the textual export formats.

    Attributes:
        TEXT: Indented ASCII tree.
        JSON: Nested JSON document.
        MARKDOWN: Markdown outline.
    """

    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"
