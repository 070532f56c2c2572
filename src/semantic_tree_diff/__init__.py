"""Semantic tree diff - classified differences between document trees."""

from __future__ import annotations

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.api import build_report, compare, is_equivalent
from semantic_tree_diff.comparator import SemanticComparator
from semantic_tree_diff.diff.builders import ReportOptions, ShowDiffs
from semantic_tree_diff.diff.models import DiffNode, DiffReport
from semantic_tree_diff.exceptions import (
    ClassificationError,
    ConfigurationError,
    MatchingInvariantError,
    SemanticDiffError,
)
from semantic_tree_diff.options.dimensions import (
    DocumentFormat,
    MatchBehavior,
    MatchDimension,
)
from semantic_tree_diff.options.match_options import GlobalMatchSettings
from semantic_tree_diff.options.profiles import MatchProfile, define_profile
from semantic_tree_diff.result import ComparisonResult
from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.nodes import NodeKind, TreeNode

__version__: str = "0.1.0"
__all__: list[str] = [
    "ClassificationError",
    "ComparisonResult",
    "ConfigurationError",
    "DiffNode",
    "DiffReport",
    "DocumentFormat",
    "GlobalMatchSettings",
    "MatchBehavior",
    "MatchDimension",
    "MatchProfile",
    "MatcherConfig",
    "MatchingInvariantError",
    "NodeKind",
    "ReportOptions",
    "SemanticComparator",
    "SemanticDiffError",
    "ShowDiffs",
    "TreeBuilder",
    "TreeNode",
    "build_report",
    "compare",
    "define_profile",
    "is_equivalent",
]
