"""algorithm subpackage: public API for two-phase tree matching.

Import from this module (not from sub-modules directly) to stay on the
stable public interface.

Example::

    from semantic_tree_diff.algorithm import MatcherConfig, TreeMatcher

    matcher = TreeMatcher(MatcherConfig(threshold=0.6))
    matching = matcher.match(tree1, tree2)
    for node1, node2 in matching:
        ...
"""

from __future__ import annotations

from semantic_tree_diff.algorithm.assignment import hungarian_match
from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.algorithm.matching import Matching, MatchStatistics
from semantic_tree_diff.algorithm.tree_matcher import TreeMatcher

__all__ = [
    "MatchStatistics",
    "MatcherConfig",
    "Matching",
    "TreeMatcher",
    "hungarian_match",
]
