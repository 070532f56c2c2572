"""Data model of classified differences and line-level diff output.

- DiffNode    : one difference along one dimension, between matched or
                unmatched nodes, carrying classification flags
- DiffLine    : one line of the aligned serialized texts
- DiffBlock   : maximal run of changed lines
- DiffContext : one or more nearby blocks plus surrounding lines
- DiffReport  : ordered contexts plus a summary

A DiffNode's flags are written once by the classifier.  Everything read
before classification (dimension, reason, node presence) is plain data and
is always safe to read, so a presentation layer can fall back to it when
richer formatting fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

from semantic_tree_diff.exceptions import ClassificationError
from semantic_tree_diff.options.dimensions import MatchDimension
from semantic_tree_diff.tree.nodes import TreeNode

__all__ = [
    "DiffBlock",
    "DiffContext",
    "DiffLine",
    "DiffNode",
    "DiffReport",
    "LineType",
]


@dataclass(eq=False, slots=True)
class DiffNode:
    """A single classified difference.

    Attributes:
        dimension: Comparison axis the difference belongs to.
        reason:    Human-readable explanation.
        node1:     Tree1 side; None for an insertion.
        node2:     Tree2 side; None for a deletion.
        key:       Attribute name, for per-attribute differences.
    """

    dimension: MatchDimension
    reason: str
    node1: TreeNode | None = None
    node2: TreeNode | None = None
    key: str | None = None
    _normative: bool | None = field(default=None, init=False, repr=False)
    _formatting: bool | None = field(default=None, init=False, repr=False)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def set_classification(self, normative: bool, formatting: bool) -> None:
        """Write the classification flags.

        Writing the same values again is a no-op.

        Raises:
            ClassificationError: If the flags were already written with
                different values.
        """
        if self._normative is not None and (
            self._normative != normative or self._formatting != formatting
        ):
            msg = (
                f"{self.dimension} difference at {self.path} already classified "
                f"as normative={self._normative}, formatting={self._formatting}"
            )
            raise ClassificationError(msg)
        self._normative = normative
        self._formatting = formatting

    @property
    def is_classified(self) -> bool:
        return self._normative is not None

    @property
    def normative(self) -> bool:
        return bool(self._normative)

    @property
    def informative(self) -> bool:
        return not self.normative

    @property
    def formatting(self) -> bool:
        return bool(self._formatting)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_insertion(self) -> bool:
        return self.node1 is None and self.node2 is not None

    @property
    def is_deletion(self) -> bool:
        return self.node2 is None and self.node1 is not None

    @property
    def node(self) -> TreeNode | None:
        """The Tree1 node if present, else the Tree2 node."""
        return self.node1 if self.node1 is not None else self.node2

    @property
    def path(self) -> str:
        node = self.node
        return node.path if node is not None else ""

    def describe(self) -> str:
        """Always-safe one-line description: ``"<dimension>: <reason>"``."""
        return f"{self.dimension}: {self.reason}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": str(self.dimension),
            "reason": self.reason,
            "key": self.key,
            "path1": self.node1.path if self.node1 is not None else None,
            "path2": self.node2.path if self.node2 is not None else None,
            "normative": self.normative,
            "informative": self.informative,
            "formatting": self.formatting,
        }


class LineType(StrEnum):
    UNCHANGED = auto()
    ADDED = auto()
    REMOVED = auto()
    CHANGED = auto()


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One aligned line.

    Attributes:
        line_number: Index of the line in the aligned sequence.
        content:     Line text (Tree2 side for ``changed`` lines).
        type:        unchanged, added, removed or changed.
        diff_node:   Linked DiffNode, when one was found.
        formatting:  True when the raw texts differ only in whitespace.
        old_content: Tree1 side of a ``changed`` line.
    """

    line_number: int
    content: str
    type: LineType
    diff_node: DiffNode | None = None
    formatting: bool = False
    old_content: str | None = None

    @property
    def unchanged(self) -> bool:
        return self.type == LineType.UNCHANGED

    @property
    def normative(self) -> bool:
        return self.diff_node is not None and self.diff_node.normative

    @property
    def informative(self) -> bool:
        return self.diff_node is not None and self.diff_node.informative

    def to_dict(self) -> dict[str, Any]:
        return {
            "line_number": self.line_number,
            "content": self.content,
            "old_content": self.old_content,
            "type": str(self.type),
            "formatting": self.formatting,
            "diff_node": self.diff_node.to_dict() if self.diff_node else None,
        }


_TYPE_MARKERS = {
    LineType.REMOVED: "-",
    LineType.ADDED: "+",
    LineType.CHANGED: "!",
}


@dataclass(frozen=True, slots=True)
class DiffBlock:
    """Maximal contiguous run of non-unchanged lines.

    ``normative`` is an OR over the linked DiffNodes of the block's lines;
    a line without a DiffNode contributes nothing.
    """

    start_idx: int
    end_idx: int
    lines: tuple[DiffLine, ...] = ()

    @property
    def types(self) -> tuple[str, ...]:
        """Distinct change markers (``-``, ``+``, ``!``) in first-seen order."""
        seen: list[str] = []
        for line in self.lines:
            marker = _TYPE_MARKERS.get(line.type)
            if marker is not None and marker not in seen:
                seen.append(marker)
        return tuple(seen)

    @property
    def size(self) -> int:
        return self.end_idx - self.start_idx + 1

    @property
    def normative(self) -> bool:
        return any(line.normative for line in self.lines)

    @property
    def informative(self) -> bool:
        return not self.normative

    def includes_type(self, marker: str) -> bool:
        return marker in self.types

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_idx": self.start_idx,
            "end_idx": self.end_idx,
            "types": list(self.types),
            "normative": self.normative,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True, slots=True)
class DiffContext:
    """Display unit: blocks plus ``context_lines`` of surroundings."""

    start_idx: int
    end_idx: int
    blocks: tuple[DiffBlock, ...] = ()
    lines: tuple[DiffLine, ...] = ()

    @property
    def size(self) -> int:
        return self.end_idx - self.start_idx + 1

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    @property
    def normative(self) -> bool:
        return any(block.normative for block in self.blocks)

    @property
    def informative(self) -> bool:
        return not self.normative

    def includes_type(self, marker: str) -> bool:
        return any(block.includes_type(marker) for block in self.blocks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_idx": self.start_idx,
            "end_idx": self.end_idx,
            "normative": self.normative,
            "blocks": [block.to_dict() for block in self.blocks],
        }


@dataclass(frozen=True, slots=True)
class DiffReport:
    """Top-level line diff report."""

    element_name: str = "root"
    file1_name: str | None = None
    file2_name: str | None = None
    contexts: tuple[DiffContext, ...] = ()

    @property
    def context_count(self) -> int:
        return len(self.contexts)

    @property
    def block_count(self) -> int:
        return sum(ctx.block_count for ctx in self.contexts)

    @property
    def change_count(self) -> int:
        return sum(block.size for ctx in self.contexts for block in ctx.blocks)

    @property
    def has_differences(self) -> bool:
        return bool(self.contexts)

    @property
    def summary(self) -> dict[str, int]:
        return {
            "contexts": self.context_count,
            "blocks": self.block_count,
            "changes": self.change_count,
        }

    def includes_type(self, marker: str) -> bool:
        return any(ctx.includes_type(marker) for ctx in self.contexts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "element_name": self.element_name,
            "file1_name": self.file1_name,
            "file2_name": self.file2_name,
            "contexts": [ctx.to_dict() for ctx in self.contexts],
            "summary": self.summary,
        }
