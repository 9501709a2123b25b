"""Exclusion rules using .gitignore pattern syntax, matched against node paths."""

from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pathspec import GitIgnoreSpec

from repotree.tree_model.tree_node import TreeNode
from repotree.types import PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Exclusion rules using .gitignore pattern syntax.

    Patterns are matched against a node's ``path`` with the pathspec library, the
    same way Git matches paths relative to a repository root. Folder paths are
    matched with a trailing slash, so directory patterns such as ``build/`` exclude
    the folder itself (and therefore its whole subtree).

    The rules support the standard .gitignore syntax: globs, directory patterns,
    negation with ``!``, ``**`` and comment lines. Patterns from files and patterns
    added with :meth:`add_rule` are combined in the order they were added, so later
    negations can re-include earlier exclusions.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("node_modules/")
        >>> rules.add_rule("*.log")
        >>> rules.exclude(TreeNode.folder("node_modules", "web/node_modules"))
        True
        >>> rules.exclude(TreeNode.file("debug.log", "logs/debug.log"))
        True
        >>> rules.exclude(TreeNode.file("main.py", "src/main.py"))
        False
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize GitIgnoreExclusionRules, optionally loading patterns from files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self._lines: List[str] = []
        self.spec = GitIgnoreSpec.from_lines(self._lines)

        if rules_files is not None:
            self.load_rules(rules_files)

    def exclude(self, node: TreeNode) -> bool:
        """Check if a node's path matches the loaded patterns.

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("*.min.js")
            >>> rules.add_rule("!vendor.min.js")
            >>> rules.exclude(TreeNode.file("app.min.js", "dist/app.min.js"))
            True
            >>> rules.exclude(TreeNode.file("vendor.min.js", "dist/vendor.min.js"))
            False
        """
        candidate = f"{node.path}/" if node.is_folder else node.path
        return self.spec.match_file(candidate)

    def has_rules(self) -> bool:
        return len(self.spec.patterns) > 0

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and append .gitignore patterns from one or more files.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r") as f:
                self._lines.extend(f.read().splitlines())

        self.spec = GitIgnoreSpec.from_lines(self._lines)

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern (e.g. ``"*.pyc"``, ``"dist/"``, ``"!keep.pyc"``)."""
        self._lines.append(rule)
        self.spec = GitIgnoreSpec.from_lines(self._lines)
