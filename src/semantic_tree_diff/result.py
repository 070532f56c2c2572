"""ComparisonResult dataclass for semantic comparison output.

This module provides the rich result type returned by compare() calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from semantic_tree_diff.algorithm.matching import MatchStatistics
from semantic_tree_diff.diff.models import DiffNode, DiffReport
from semantic_tree_diff.options.match_options import ResolvedMatchOptions
from semantic_tree_diff.tree.nodes import TreeNode

logger = logging.getLogger(__name__)

__all__ = ["ComparisonResult"]


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Rich result of a compare() call.

    Attributes:
        equivalent: True when no DiffNode is normative.
        diff_nodes: Every classified difference, Tree1 changes and deletions
            first, then Tree2 insertions.
        report: Line-level report of the serialized trees.
        options: The resolved options the comparison ran under.
        statistics: Per-phase match counts and timings.
        computation_time_ms: Wall-clock duration of the comparison in
            milliseconds.
        tree1: Root of the first compared tree.
        tree2: Root of the second compared tree.

    Parent links inside a tree are weak references, so the result holds both
    roots to keep every DiffNode path resolvable after ``compare()`` returns.
    """

    equivalent: bool
    diff_nodes: list[DiffNode]
    report: DiffReport
    options: ResolvedMatchOptions
    statistics: MatchStatistics
    computation_time_ms: float
    tree1: TreeNode | None = field(default=None, repr=False, compare=False)
    tree2: TreeNode | None = field(default=None, repr=False, compare=False)

    @property
    def normative_differences(self) -> list[DiffNode]:
        return [d for d in self.diff_nodes if d.normative]

    @property
    def informative_differences(self) -> list[DiffNode]:
        return [d for d in self.diff_nodes if d.informative]

    def describe(self, formatter: Callable[[DiffNode], str] | None = None) -> list[str]:
        """One line per DiffNode.

        A formatter that raises for one DiffNode does not abort the others:
        the failure is logged and that node falls back to
        ``DiffNode.describe()``.
        """
        if formatter is None:
            return [d.describe() for d in self.diff_nodes]

        lines: list[str] = []
        for diff in self.diff_nodes:
            try:
                lines.append(formatter(diff))
            except Exception:
                logger.warning(
                    "formatter failed for %s difference at %s",
                    diff.dimension,
                    diff.path,
                    exc_info=True,
                )
                lines.append(diff.describe())
        return lines

    def to_dict(self) -> dict[str, Any]:
        return {
            "equivalent": self.equivalent,
            "diff_nodes": [d.to_dict() for d in self.diff_nodes],
            "report": self.report.to_dict(),
            "options": self.options.to_dict(),
            "statistics": self.statistics.to_dict(),
            "computation_time_ms": self.computation_time_ms,
        }
