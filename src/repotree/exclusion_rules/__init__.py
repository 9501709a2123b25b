"""Exclusion rules for removing nodes from repository trees."""

from .base_rules import BaseExclusionRules
from .composite_rules import CompositeExclusionRules
from .git_rules import GitIgnoreExclusionRules
from .size_rules import SizeExclusionRules, parse_file_size

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "GitIgnoreExclusionRules",
    "SizeExclusionRules",
    "parse_file_size",
]
