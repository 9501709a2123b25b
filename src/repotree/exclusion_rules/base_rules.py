from abc import ABC, abstractmethod
from typing import Sequence, Union

from repotree.tree_model.tree_node import TreeNode
from repotree.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for tree node exclusion rules.

    Exclusion rules decide which nodes are removed from a tree before the search
    predicate is applied (e.g., gitignore-style patterns, size limits). All
    implementations must decide whether a given node is excluded. Loading rules from
    files and adding individual rules are optional capabilities that depend on the
    rule type.

    Example:
        >>> from repotree.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> from repotree.tree_model.tree_node import TreeNode
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule('*.lock')
        >>> git_rules.exclude(TreeNode.file('yarn.lock', 'yarn.lock'))
        True
        >>> git_rules.exclude(TreeNode.file('package.json', 'package.json'))
        False
    """

    @abstractmethod
    def exclude(self, node: TreeNode) -> bool:
        """
        Determine if a node should be excluded from the tree.

        Excluding a folder removes its whole subtree.

        Args:
            node (TreeNode): The node to check.

        Returns:
            bool: True if the node should be excluded, False if it should be kept.
        """
        pass

    def has_rules(self) -> bool:
        """
        Report whether this object would exclude anything at all.

        Filtering uses this to decide whether an otherwise empty filter can return
        its input unchanged. Rule types that cannot tell assume they have rules.
        """
        return True

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations (e.g., size-based or composite
        rules) use this default implementation, which raises NotImplementedError.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
