"""Markdown outline export of repository trees."""

import re
from typing import Iterator, Optional

from repotree.tree_model.tree_node import TreeNode

from .base_serializer import TreeSerializer

FOLDER_ICON = "\U0001f4c1"
FILE_ICON = "\U0001f4c4"

# Characters that would end or nest the bold folder label
_EMPHASIS_CHARS = re.compile(r"[\\`*_\[\]<>]")


def _inline_code(text: str) -> str:
    # Names containing backticks need a longer fence
    if "`" in text:
        return f"`` {text} ``"
    return f"`{text}`"


def _escape_emphasis(text: str) -> str:
    return _EMPHASIS_CHARS.sub(r"\\\g<0>", text)


class MarkdownSerializer(TreeSerializer):
    """Serializer producing a nested Markdown bullet list.

    The root becomes a level-1 heading followed by a blank line. Folders are
    bullets with a bold label, files are bullets with the name in inline code.
    Direct children of the root are not indented; each further level adds two
    spaces.

    Example:
        >>> root = TreeNode.folder("repo", "", [
        ...     TreeNode.folder("src", "src", [TreeNode.file("a.ts", "src/a.ts")]),
        ... ])
        >>> print(MarkdownSerializer().serialize(root), end="")
        # repo
        <BLANKLINE>
        - 📁 **src**
          - 📄 `a.ts`
    """

    def stream(self, root: Optional[TreeNode]) -> Iterator[str]:
        if root is None:
            return

        yield f"# {root.name}\n"
        yield "\n"
        stack = [(child, 0) for child in reversed(root.children)]
        while stack:
            node, level = stack.pop()
            indent = "  " * level
            if node.is_folder:
                yield f"{indent}- {FOLDER_ICON} **{_escape_emphasis(node.name)}**\n"
                stack.extend((child, level + 1) for child in reversed(node.children))
            else:
                yield f"{indent}- {FILE_ICON} {_inline_code(node.name)}\n"

    def get_file_extension(self) -> str:
        return "md"
