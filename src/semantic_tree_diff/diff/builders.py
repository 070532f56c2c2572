"""Report assembly: DiffLines -> DiffBlocks -> DiffContexts -> DiffReport.

- ``DiffBlockBuilder`` groups maximal runs of changed lines and filters them
  by ``show_diffs``.
- ``DiffContextBuilder`` widens each block by ``context_lines`` and merges
  blocks separated by at most ``grouping_lines`` unchanged lines.
- ``DiffReportBuilder`` runs both and attaches names.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum, auto

from semantic_tree_diff.diff.models import DiffBlock, DiffContext, DiffLine, DiffReport
from semantic_tree_diff.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "DiffBlockBuilder",
    "DiffContextBuilder",
    "DiffReportBuilder",
    "ReportOptions",
    "ShowDiffs",
]


class ShowDiffs(StrEnum):
    """Which blocks a report keeps."""

    ALL = auto()
    NORMATIVE = auto()
    INFORMATIVE = auto()


def coerce_show_diffs(value: ShowDiffs | str) -> ShowDiffs:
    try:
        return ShowDiffs(value)
    except ValueError:
        valid = ", ".join(s.value for s in ShowDiffs)
        msg = f"Unknown show_diffs value {value!r}. Valid values: {valid}"
        raise ConfigurationError(msg) from None


@dataclass(frozen=True, slots=True)
class ReportOptions:
    """Presentation settings for one report.

    Attributes:
        show_diffs: ``all``, ``normative`` or ``informative``.
        context_lines: Unchanged lines kept on each side of a block.
        grouping_lines: Largest gap of unchanged lines across which two
            blocks share a context.  ``None`` never merges.
        element_name: Name of the compared element, for display.
        file1_name: Display name of the first input.
        file2_name: Display name of the second input.

    Raises:
        ConfigurationError: For an unknown ``show_diffs`` or a negative
            line count.
    """

    show_diffs: ShowDiffs | str = ShowDiffs.ALL
    context_lines: int = 3
    grouping_lines: int | None = None
    element_name: str = "root"
    file1_name: str | None = None
    file2_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "show_diffs", coerce_show_diffs(self.show_diffs))
        if self.context_lines < 0:
            msg = f"context_lines must be >= 0, got {self.context_lines}"
            raise ConfigurationError(msg)
        if self.grouping_lines is not None and self.grouping_lines < 0:
            msg = f"grouping_lines must be >= 0 or None, got {self.grouping_lines}"
            raise ConfigurationError(msg)


class DiffBlockBuilder:
    """Collects maximal runs of non-unchanged lines."""

    def __init__(self, show_diffs: ShowDiffs | str = ShowDiffs.ALL) -> None:
        self._show = coerce_show_diffs(show_diffs)

    def build(self, lines: Sequence[DiffLine]) -> list[DiffBlock]:
        blocks: list[DiffBlock] = []
        start: int | None = None
        for idx, line in enumerate(lines):
            if line.unchanged:
                if start is not None:
                    blocks.append(self._block(lines, start, idx - 1))
                    start = None
            elif start is None:
                start = idx
        if start is not None:
            blocks.append(self._block(lines, start, len(lines) - 1))
        return [b for b in blocks if self._keep(b)]

    @staticmethod
    def _block(lines: Sequence[DiffLine], start: int, end: int) -> DiffBlock:
        return DiffBlock(
            start_idx=start, end_idx=end, lines=tuple(lines[start : end + 1])
        )

    def _keep(self, block: DiffBlock) -> bool:
        if self._show == ShowDiffs.NORMATIVE:
            return block.normative
        if self._show == ShowDiffs.INFORMATIVE:
            return block.informative
        return True


class DiffContextBuilder:
    """Widens blocks into contexts and merges nearby ones.

    Without merging, the widened windows of two nearby blocks can overlap,
    so the same line may appear in more than one context.

    Args:
        context_lines: Lines of surroundings on each side, clamped to the
            text.
        grouping_lines: Merge threshold on the unexpanded gap
            ``next.start_idx - prev.end_idx - 1``; ``None`` disables merging.
    """

    def __init__(
        self, context_lines: int = 3, grouping_lines: int | None = None
    ) -> None:
        if context_lines < 0:
            msg = f"context_lines must be >= 0, got {context_lines}"
            raise ConfigurationError(msg)
        self._context = context_lines
        self._grouping = grouping_lines

    def build(
        self, blocks: Sequence[DiffBlock], lines: Sequence[DiffLine]
    ) -> list[DiffContext]:
        if not blocks or not lines:
            return []

        groups: list[list[DiffBlock]] = [[blocks[0]]]
        for block in blocks[1:]:
            prev = groups[-1][-1]
            gap = block.start_idx - prev.end_idx - 1
            if self._grouping is not None and gap <= self._grouping:
                groups[-1].append(block)
            else:
                groups.append([block])

        last = len(lines) - 1
        contexts = []
        for group in groups:
            start = max(0, group[0].start_idx - self._context)
            end = min(last, group[-1].end_idx + self._context)
            contexts.append(
                DiffContext(
                    start_idx=start,
                    end_idx=end,
                    blocks=tuple(group),
                    lines=tuple(lines[start : end + 1]),
                )
            )
        return contexts


class DiffReportBuilder:
    """Builds a ``DiffReport`` from aligned DiffLines."""

    def __init__(self, options: ReportOptions | None = None) -> None:
        self._options = options or ReportOptions()

    def build(self, lines: Sequence[DiffLine]) -> DiffReport:
        opts = self._options
        blocks = DiffBlockBuilder(opts.show_diffs).build(lines)
        contexts = DiffContextBuilder(opts.context_lines, opts.grouping_lines).build(
            blocks, lines
        )
        report = DiffReport(
            element_name=opts.element_name,
            file1_name=opts.file1_name,
            file2_name=opts.file2_name,
            contexts=tuple(contexts),
        )
        logger.debug("built diff report: %s", report.summary)
        return report
