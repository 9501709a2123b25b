"""Composite exclusion rules for combining multiple rule types."""

from typing import List, Sequence

from repotree.tree_model.tree_node import TreeNode

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """Composite exclusion rules that combine multiple rule types.

    A node is excluded if ANY of the constituent rules excludes it.

    Attributes:
        rules (List[BaseExclusionRules]): List of constituent exclusion rules.

    Example:
        >>> from repotree.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> from repotree.exclusion_rules.size_rules import SizeExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule("*.lock")
        >>> composite = CompositeExclusionRules([git_rules, SizeExclusionRules(100)])
        >>> composite.exclude(TreeNode.file("yarn.lock", "yarn.lock", size=1))
        True
        >>> composite.exclude(TreeNode.file("logo.png", "logo.png", size=5000))
        True
        >>> composite.exclude(TreeNode.file("index.ts", "index.ts", size=50))
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules]):
        """Initialize composite exclusion rules.

        Args:
            rules: Sequence of exclusion rules to combine.

        Raises:
            ValueError: If rules list is empty.
            TypeError: If any rule doesn't implement BaseExclusionRules.
        """
        if not rules:
            raise ValueError("At least one exclusion rule must be provided")

        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, " f"got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    def exclude(self, node: TreeNode) -> bool:
        return any(rule.exclude(node) for rule in self.rules)

    def has_rules(self) -> bool:
        """Check if any constituent rule has rules configured."""
        return any(rule.has_rules() for rule in self.rules)

    def add_rule_object(self, rule: BaseExclusionRules) -> None:
        """Add another exclusion rule object to this composite.

        Raises:
            TypeError: If rule doesn't implement BaseExclusionRules.
        """
        if not isinstance(rule, BaseExclusionRules):
            raise TypeError(f"Rule must implement BaseExclusionRules, got {type(rule)}")
        self.rules.append(rule)

    def get_rules(self) -> List[BaseExclusionRules]:
        """Get a copy of the constituent rules list."""
        return list(self.rules)
