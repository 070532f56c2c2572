"""DiffNodeMapper: align serialized texts line by line and link DiffNodes.

The two renderings are aligned with ``difflib.SequenceMatcher``; the
resulting opcodes become DiffLines:

- ``equal``   -> unchanged lines
- ``delete``  -> removed lines (Tree1 text)
- ``insert``  -> added lines (Tree2 text)
- ``replace`` -> old and new lines paired as ``changed``; when the two sides
  have different lengths the surplus spills over as removed / added

Every non-unchanged line is linked to the first DiffNode that concerns the
node the line renders.  The line's token (a tag name, a JSON ``"key":`` or a
YAML ``key:``) is compared against node labels; text and comment
differences are also found through their parent element.  Lines without a
token (bare text, JSON array items) are linked by their rendered value.
Lines still unlinked fall back to an added or removed subtree containing
what they render, then to a reorder among their siblings.
"""

from __future__ import annotations

import difflib
import re
from collections.abc import Callable, Sequence

from semantic_tree_diff.diff.formatting import formatting_only
from semantic_tree_diff.diff.models import DiffLine, DiffNode, LineType
from semantic_tree_diff.options.dimensions import MatchDimension
from semantic_tree_diff.tree.builder import ARRAY_ITEM_LABEL
from semantic_tree_diff.tree.nodes import NodeKind, TreeNode

__all__ = ["DiffNodeMapper", "extract_token"]

_TAG = re.compile(r"</?([a-zA-Z0-9_:-]+)")
_JSON_KEY = re.compile(r'^\s*"((?:[^"\\]|\\.)*)"\s*:')
_YAML_KEY = re.compile(r"^\s*([^\s\"'#\-][^:]*?):(?:\s|$)")
_YAML_ITEM = re.compile(r"^\s*-(?:\s|$)")

_POSITION_DIMENSIONS = frozenset(
    {MatchDimension.ELEMENT_POSITION, MatchDimension.KEY_ORDER}
)


def extract_token(line: str) -> str | None:
    """Label-like token a serialized line starts with, if any.

    >>> extract_token('  <ns:item id="1">')
    'ns:item'
    >>> extract_token('  "name": "Ada"')
    'name'
    >>> extract_token("  - 3")
    'item'
    """
    match = _TAG.search(line)
    if match:
        return match.group(1)
    match = _JSON_KEY.match(line)
    if match:
        return match.group(1)
    match = _YAML_KEY.match(line)
    if match:
        return match.group(1)
    if _YAML_ITEM.match(line):
        return ARRAY_ITEM_LABEL
    return None


def _one_line(value: str | None) -> str:
    return (value or "").replace("\r", "\\r").replace("\n", "\\n").strip()


def _split(text: str) -> list[str]:
    return text.split("\n") if text else []


class DiffNodeMapper:
    """Turns two serialized texts plus DiffNodes into aligned DiffLines.

    Args:
        diff_nodes: Classified DiffNodes of the comparison.
    """

    def __init__(self, diff_nodes: Sequence[DiffNode]) -> None:
        self._diff_nodes = list(diff_nodes)
        self._shared: DiffNode | None = None
        if self._diff_nodes and all(d.informative for d in self._diff_nodes):
            self._shared = self._diff_nodes[0]

    def map(self, text1: str, text2: str) -> list[DiffLine]:
        """Align ``text1`` and ``text2`` and return one DiffLine per row."""
        lines1 = _split(text1)
        lines2 = _split(text2)
        matcher = difflib.SequenceMatcher(None, lines1, lines2, autojunk=False)

        result: list[DiffLine] = []
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                for line in lines1[i1:i2]:
                    result.append(DiffLine(len(result), line, LineType.UNCHANGED))
                continue

            old = lines1[i1:i2]
            new = lines2[j1:j2]
            paired = min(len(old), len(new)) if tag == "replace" else 0
            for old_line, new_line in zip(old[:paired], new[:paired], strict=True):
                result.append(
                    DiffLine(
                        line_number=len(result),
                        content=new_line,
                        type=LineType.CHANGED,
                        diff_node=self._link(new_line, (1, 2), old_line),
                        formatting=formatting_only(old_line, new_line),
                        old_content=old_line,
                    )
                )
            for old_line in old[paired:]:
                result.append(
                    DiffLine(
                        line_number=len(result),
                        content=old_line,
                        type=LineType.REMOVED,
                        diff_node=self._link(old_line, (1,)),
                    )
                )
            for new_line in new[paired:]:
                result.append(
                    DiffLine(
                        line_number=len(result),
                        content=new_line,
                        type=LineType.ADDED,
                        diff_node=self._link(new_line, (2,)),
                    )
                )
        return result

    # ------------------------------------------------------------------
    # Linking
    # ------------------------------------------------------------------

    def _link(
        self, line: str, sides: tuple[int, ...], other: str | None = None
    ) -> DiffNode | None:
        if self._shared is not None:
            return self._shared
        if not self._diff_nodes:
            return None

        token = extract_token(line)
        if token is None and other is not None:
            token = extract_token(other)
        if token is not None:
            found = self._find(sides, lambda node: _has_label(node, token))
            if found is not None:
                return found

        rendered = {_one_line(line)}
        if other is not None:
            rendered.add(_one_line(other))
        found = self._find(sides, lambda node: _renders_value(node, rendered))
        if found is not None:
            return found

        def renders(node: TreeNode) -> bool:
            if token is not None and node.label == token:
                return True
            return _renders_value(node, rendered)

        for diff in self._diff_nodes:
            if not (
                (diff.is_deletion and 1 in sides)
                or (diff.is_insertion and 2 in sides)
            ):
                continue
            root = diff.node
            if root is not None and any(map(renders, root.iter_subtree())):
                return diff

        # A reorder is reported on the moved sibling only, while the line diff
        # may show any sibling of it as the one that moved.
        for diff in self._diff_nodes:
            if diff.dimension not in _POSITION_DIMENSIONS:
                continue
            for node in (diff.node1, diff.node2):
                parent = node.parent if node is not None else None
                if parent is not None and any(map(renders, parent.children)):
                    return diff
        return None

    def _find(
        self, sides: tuple[int, ...], predicate: Callable[[TreeNode], bool]
    ) -> DiffNode | None:
        for diff in self._diff_nodes:
            for side in sides:
                node = diff.node1 if side == 1 else diff.node2
                if node is not None and predicate(node):
                    return diff
        return None


def _has_label(node: TreeNode, token: str) -> bool:
    if node.kind in (NodeKind.ELEMENT, NodeKind.PROCESSING_INSTRUCTION):
        return node.label == token
    parent = node.parent
    return parent is not None and parent.label == token


def _renders_value(node: TreeNode, rendered: set[str]) -> bool:
    """True when ``node`` is a leaf whose value is one of the rendered lines.

    Data members render their value alone on array lines, and an empty
    container renders its own ``{}`` or ``[]`` marker.
    """
    if node.value is None or node.children:
        return False
    return _one_line(node.value) in rendered
