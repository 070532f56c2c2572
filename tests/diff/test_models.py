"""Tests for DiffNode classification and the line-diff value types."""

from __future__ import annotations

import pytest

from semantic_tree_diff.diff.models import (
    DiffBlock,
    DiffContext,
    DiffLine,
    DiffNode,
    DiffReport,
    LineType,
)
from semantic_tree_diff.exceptions import ClassificationError
from semantic_tree_diff.options.dimensions import MatchDimension
from semantic_tree_diff.tree.builder import TreeBuilder

_D = MatchDimension


def _classified(normative: bool) -> DiffNode:
    diff = DiffNode(_D.TEXT_CONTENT, "text differs")
    diff.set_classification(normative=normative, formatting=False)
    return diff


def _line(
    idx: int, type_: LineType, diff: DiffNode | None = None
) -> DiffLine:
    return DiffLine(idx, f"line {idx}", type_, diff)


class TestDiffNode:
    def test_unclassified_defaults(self) -> None:
        diff = DiffNode(_D.COMMENTS, "comment differs")
        assert not diff.is_classified
        assert not diff.normative
        assert diff.informative
        assert not diff.formatting

    def test_set_classification(self) -> None:
        diff = DiffNode(_D.TEXT_CONTENT, "x")
        diff.set_classification(normative=False, formatting=True)
        assert diff.is_classified
        assert diff.informative
        assert diff.formatting

    def test_same_classification_twice_is_noop(self) -> None:
        diff = _classified(True)
        diff.set_classification(normative=True, formatting=False)
        assert diff.normative

    def test_conflicting_classification_raises(self) -> None:
        diff = _classified(True)
        with pytest.raises(ClassificationError, match="already classified"):
            diff.set_classification(normative=False, formatting=False)

    def test_insertion_and_deletion(self) -> None:
        node = TreeBuilder.element("p")
        added = DiffNode(_D.ELEMENT_STRUCTURE, "added", node2=node)
        removed = DiffNode(_D.ELEMENT_STRUCTURE, "removed", node1=node)
        assert added.is_insertion and not added.is_deletion
        assert removed.is_deletion and not removed.is_insertion
        assert added.node is node and removed.node is node

    def test_describe_and_path(self) -> None:
        root = TreeBuilder.element("doc", children=[TreeBuilder.element("p")])
        diff = DiffNode(_D.ELEMENT_STRUCTURE, "element <p> removed", root.children[0])
        assert diff.path == "/doc/p"
        assert diff.describe() == "element_structure: element <p> removed"

    def test_path_without_nodes(self) -> None:
        assert DiffNode(_D.COMMENTS, "x").path == ""

    def test_to_dict(self) -> None:
        data = _classified(False).to_dict()
        assert data["dimension"] == "text_content"
        assert data["informative"] is True
        assert data["path1"] is None


class TestDiffLine:
    def test_flags_follow_linked_node(self) -> None:
        line = _line(0, LineType.CHANGED, _classified(True))
        assert line.normative and not line.informative
        assert not line.unchanged

    def test_unlinked_line_is_neither(self) -> None:
        line = _line(0, LineType.ADDED)
        assert not line.normative
        assert not line.informative


class TestDiffBlock:
    def test_types_in_first_seen_order(self) -> None:
        lines = (
            _line(2, LineType.ADDED),
            _line(3, LineType.REMOVED),
            _line(4, LineType.ADDED),
        )
        block = DiffBlock(2, 4, lines)
        assert block.types == ("+", "-")
        assert block.size == 3
        assert block.includes_type("-")
        assert not block.includes_type("!")

    def test_normative_is_or_over_lines(self) -> None:
        lines = (
            _line(0, LineType.CHANGED, _classified(False)),
            _line(1, LineType.CHANGED, _classified(True)),
        )
        assert DiffBlock(0, 1, lines).normative

    def test_unlinked_lines_contribute_nothing(self) -> None:
        block = DiffBlock(0, 0, (_line(0, LineType.ADDED),))
        assert not block.normative
        assert block.informative


class TestContextAndReport:
    def test_context_aggregates_blocks(self) -> None:
        informative = DiffBlock(1, 1, (_line(1, LineType.ADDED, _classified(False)),))
        normative = DiffBlock(4, 4, (_line(4, LineType.REMOVED, _classified(True)),))
        context = DiffContext(0, 6, (informative, normative))
        assert context.normative
        assert context.block_count == 2
        assert context.size == 7
        assert context.includes_type("+") and context.includes_type("-")

    def test_report_summary(self) -> None:
        block = DiffBlock(1, 2, (_line(1, LineType.ADDED), _line(2, LineType.ADDED)))
        report = DiffReport(contexts=(DiffContext(0, 3, (block,)),))
        assert report.has_differences
        assert report.summary == {"contexts": 1, "blocks": 1, "changes": 2}
        assert report.includes_type("+")

    def test_empty_report(self) -> None:
        report = DiffReport()
        assert not report.has_differences
        assert report.to_dict()["summary"] == {
            "contexts": 0,
            "blocks": 0,
            "changes": 0,
        }
