"""Difference construction, classification and line-level reporting."""

from semantic_tree_diff.diff.builders import (
    DiffBlockBuilder,
    DiffContextBuilder,
    DiffReportBuilder,
    ReportOptions,
    ShowDiffs,
)
from semantic_tree_diff.diff.classifier import DiffClassifier
from semantic_tree_diff.diff.constructor import DiffConstructor
from semantic_tree_diff.diff.mapper import DiffNodeMapper
from semantic_tree_diff.diff.models import (
    DiffBlock,
    DiffContext,
    DiffLine,
    DiffNode,
    DiffReport,
    LineType,
)

__all__ = [
    "DiffBlock",
    "DiffBlockBuilder",
    "DiffClassifier",
    "DiffConstructor",
    "DiffContext",
    "DiffContextBuilder",
    "DiffLine",
    "DiffNode",
    "DiffNodeMapper",
    "DiffReport",
    "DiffReportBuilder",
    "LineType",
    "ReportOptions",
    "ShowDiffs",
]
