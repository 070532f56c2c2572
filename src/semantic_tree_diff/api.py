"""Public API functions for semantic-tree-diff.

This module provides the three user-facing functions: compare,
is_equivalent and build_report.  Each call creates a fresh
SemanticComparator to guarantee zero global state mutation between calls.
"""

from __future__ import annotations

from typing import Any

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.comparator import SemanticComparator
from semantic_tree_diff.diff.builders import DiffReportBuilder, ReportOptions
from semantic_tree_diff.diff.mapper import DiffNodeMapper
from semantic_tree_diff.diff.models import DiffNode, DiffReport
from semantic_tree_diff.options.dimensions import DocumentFormat
from semantic_tree_diff.result import ComparisonResult

__all__ = ["build_report", "compare", "is_equivalent"]


def compare(
    left: Any,
    right: Any,
    fmt: DocumentFormat | str = DocumentFormat.XML,
    config: MatcherConfig | None = None,
    **options: Any,
) -> ComparisonResult:
    """Compare two documents and return a rich ComparisonResult.

    Args:
        left:    First document (``TreeNode``, or parsed JSON/YAML data).
        right:   Second document.
        fmt:     ``"xml"``, ``"html"``, ``"json"`` or ``"yaml"``.
        config:  Matching hyper-parameters.  Defaults to ``MatcherConfig()``.
        **options: Forwarded to ``SemanticComparator.compare`` (for example
            ``match_profile``, ``match`` or ``report_options``).

    Returns:
        A ``ComparisonResult`` with every field populated.
    """
    comparator = SemanticComparator(config=config)
    return comparator.compare(left, right, fmt, **options)


def is_equivalent(
    left: Any,
    right: Any,
    fmt: DocumentFormat | str = DocumentFormat.XML,
    config: MatcherConfig | None = None,
    **options: Any,
) -> bool:
    """Return True if no difference between the documents is normative.

    Informative differences (for example reordered JSON keys, which are
    ignored by default) never make documents non-equivalent.
    """
    return compare(left, right, fmt, config, **options).equivalent


def build_report(
    diff_nodes: list[DiffNode],
    text1: str,
    text2: str,
    options: ReportOptions | None = None,
) -> DiffReport:
    """Build a line-level report from already classified DiffNodes.

    Args:
        diff_nodes: Classified DiffNodes, for example
            ``ComparisonResult.diff_nodes``.
        text1: First text to align.
        text2: Second text to align.
        options: Presentation settings.  Defaults to ``ReportOptions()``.
    """
    lines = DiffNodeMapper(diff_nodes).map(text1, text2)
    return DiffReportBuilder(options).build(lines)
