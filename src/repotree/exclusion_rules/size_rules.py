"""Size-based exclusion rules for filtering files by their recorded size."""

from typing import Union

from humanfriendly import parse_size

from repotree.tree_model.tree_node import TreeNode

from .base_rules import BaseExclusionRules


def parse_file_size(size_str: str) -> int:
    """Parse human-readable file size to bytes.

    Args:
        size_str: Size string like '1GB', '500MB', '2.5K', or just '1024'

    Returns:
        Size in bytes

    Raises:
        ValueError: If size_str is not a valid size format
    """
    try:
        return int(parse_size(size_str))
    except Exception as e:
        raise ValueError(f"Invalid size format '{size_str}': {e}")


class SizeExclusionRules(BaseExclusionRules):
    """Exclusion rules based on file size limits.

    Files whose recorded ``size`` exceeds the limit are excluded. Folders are never
    excluded by size, and files of unknown size are kept.

    Attributes:
        max_size_bytes (int): Maximum allowed file size in bytes.

    Example:
        >>> rules = SizeExclusionRules("1KB")
        >>> rules.max_size_bytes
        1000
        >>> rules.exclude(TreeNode.file("big.bin", "big.bin", size=4096))
        True
        >>> rules.exclude(TreeNode.file("small.txt", "small.txt", size=12))
        False
    """

    def __init__(self, max_size: Union[str, int]):
        """Initialize size exclusion rules.

        Args:
            max_size: Maximum file size, either human-readable ('1GB', '500MB',
                '2.5K') or an integer number of bytes.

        Raises:
            ValueError: If max_size format is invalid
        """
        if isinstance(max_size, bool):
            raise ValueError(f"max_size must be string or int, got {type(max_size)}")
        if isinstance(max_size, str):
            self.max_size_bytes = parse_file_size(max_size)
        elif isinstance(max_size, int):
            if max_size < 0:
                raise ValueError("Size cannot be negative")
            self.max_size_bytes = max_size
        else:
            raise ValueError(f"max_size must be string or int, got {type(max_size)}")

    def exclude(self, node: TreeNode) -> bool:
        if not node.is_file or node.size is None:
            return False
        return node.size > self.max_size_bytes

    def has_rules(self) -> bool:
        return True
