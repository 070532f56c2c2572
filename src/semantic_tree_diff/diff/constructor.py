"""DiffConstructor: enumerate every difference between two matched trees.

For each matched pair the constructor emits zero or more DiffNodes:

- attribute key sets differ            -> attribute_presence
- same keys, some values differ        -> attribute_values (one per key)
- same keys and values, order differs  -> attribute_order
- ``xmlns``/``xmlns:*`` differ         -> namespace_declarations (these are
  kept out of the three attribute checks above)
- element namespace URI differs        -> namespace_uri
- text differs                         -> text_content, or
  structural_whitespace when only whitespace differs outside a
  whitespace-sensitive element
- comment differs                      -> comments
- processing-instruction data differs  -> text_content
- partner under a non-partner parent,
  or order among matched siblings
  changed                              -> element_position (key_order for
                                          JSON/YAML object members)

Unmatched nodes are reported once, at the root of each unmatched subtree:
elements and processing instructions as element_structure, comments as
comments, text as text_content against an absent side.

Scanning never stops at the first difference: N independently differing
sibling pairs always yield N DiffNodes, each tied to its own pair.
"""

from __future__ import annotations

import bisect
import logging
from collections import Counter
from collections.abc import Callable

from semantic_tree_diff.algorithm.matching import Matching
from semantic_tree_diff.diff.models import DiffNode
from semantic_tree_diff.options.dimensions import MatchDimension
from semantic_tree_diff.options.match_options import (
    ResolvedMatchOptions,
    normalize_text,
)
from semantic_tree_diff.options.whitespace import WhitespaceSensitivity
from semantic_tree_diff.tree.builder import OBJECT_MARKER
from semantic_tree_diff.tree.nodes import NodeKind, TreeNode

logger = logging.getLogger(__name__)

__all__ = ["DiffConstructor"]

_D = MatchDimension
_PREVIEW = 40


def _preview(value: str | None) -> str:
    text = value or ""
    if len(text) > _PREVIEW:
        text = text[: _PREVIEW - 3] + "..."
    return repr(text)


def _describe(node: TreeNode) -> str:
    if node.kind == NodeKind.ELEMENT:
        return f"element <{node.label}>"
    if node.kind == NodeKind.PROCESSING_INSTRUCTION:
        return f"processing instruction <?{node.label}?>"
    return f"{node.kind} {_preview(node.value)}"


def _stable_indices(sequence: list[int]) -> set[int]:
    """Indices of one longest increasing subsequence of ``sequence``.

    Items outside it are the ones that moved relative to the rest.
    """
    tails: list[int] = []
    tail_idx: list[int] = []
    prev: list[int] = [-1] * len(sequence)
    for i, value in enumerate(sequence):
        pos = bisect.bisect_left(tails, value)
        if pos == len(tails):
            tails.append(value)
            tail_idx.append(i)
        else:
            tails[pos] = value
            tail_idx[pos] = i
        prev[i] = tail_idx[pos - 1] if pos > 0 else -1

    kept: set[int] = set()
    k = tail_idx[-1] if tail_idx else -1
    while k != -1:
        kept.add(k)
        k = prev[k]
    return kept


class DiffConstructor:
    """Builds the DiffNode list for one comparison.

    Args:
        options:    Resolved options; only the format is read here, the
                    behaviours are applied later by the classifier.
        whitespace: Sensitivity rules for the same options.
    """

    def __init__(
        self, options: ResolvedMatchOptions, whitespace: WhitespaceSensitivity
    ) -> None:
        self._options = options
        self._whitespace = whitespace
        self._markup = options.format.is_markup

    def build(
        self, tree1: TreeNode, tree2: TreeNode, matching: Matching
    ) -> list[DiffNode]:
        """Enumerate all differences between ``tree1`` and ``tree2``.

        Tree1 is walked first in document order (changes and deletions),
        then Tree2 (insertions).
        """
        diffs: list[DiffNode] = []
        keep = self._whitespace.is_significant

        for node1 in tree1.iter_subtree():
            if not keep(node1):
                continue
            node2 = matching.partner_of(node1) if matching.matched1(node1) else None
            if node2 is not None:
                self._diff_pair(node1, node2, matching, diffs)
            elif self._is_subtree_root(node1, matching.matched1):
                diffs.append(self._unmatched(node1, None))

        for node2 in tree2.iter_subtree():
            if not keep(node2) or matching.matched2(node2):
                continue
            if self._is_subtree_root(node2, matching.matched2):
                diffs.append(self._unmatched(None, node2))

        if logger.isEnabledFor(logging.DEBUG):
            counts = Counter(str(d.dimension) for d in diffs)
            logger.debug("constructed %d diff nodes: %s", len(diffs), dict(counts))
        return diffs

    # ------------------------------------------------------------------
    # Unmatched nodes
    # ------------------------------------------------------------------

    @staticmethod
    def _is_subtree_root(
        node: TreeNode, is_matched: Callable[[TreeNode], bool]
    ) -> bool:
        parent = node.parent
        return parent is None or is_matched(parent)

    @staticmethod
    def _unmatched(node1: TreeNode | None, node2: TreeNode | None) -> DiffNode:
        node = node1 if node1 is not None else node2
        if node is None:
            msg = "an unmatched node needs a Tree1 or a Tree2 side"
            raise ValueError(msg)
        verb = "removed" if node2 is None else "added"
        if node.kind == NodeKind.COMMENT:
            dimension = _D.COMMENTS
        elif node.kind == NodeKind.TEXT:
            dimension = _D.TEXT_CONTENT
        else:
            dimension = _D.ELEMENT_STRUCTURE
        return DiffNode(
            dimension=dimension,
            reason=f"{_describe(node)} {verb}",
            node1=node1,
            node2=node2,
        )

    # ------------------------------------------------------------------
    # Matched pairs
    # ------------------------------------------------------------------

    def _diff_pair(
        self,
        node1: TreeNode,
        node2: TreeNode,
        matching: Matching,
        diffs: list[DiffNode],
    ) -> None:
        if node1.kind == NodeKind.ELEMENT:
            if self._markup:
                self._diff_namespace_declarations(node1, node2, diffs)
                self._diff_attributes(node1, node2, diffs)
                self._diff_namespace_uri(node1, node2, diffs)
            if node1.value != node2.value:
                diffs.append(self._text_diff(node1, node2, node1.value, node2.value))
            self._diff_parent(node1, node2, matching, diffs)
            self._diff_child_order(node1, node2, matching, diffs)
        elif node1.kind == NodeKind.TEXT:
            if node1.value != node2.value:
                diffs.append(self._text_diff(node1, node2, node1.value, node2.value))
        elif node1.kind == NodeKind.COMMENT:
            if node1.value != node2.value:
                diffs.append(
                    DiffNode(
                        dimension=_D.COMMENTS,
                        reason=(
                            f"comment differs: {_preview(node1.value)} "
                            f"vs {_preview(node2.value)}"
                        ),
                        node1=node1,
                        node2=node2,
                    )
                )
        elif node1.kind == NodeKind.PROCESSING_INSTRUCTION:
            if node1.value != node2.value:
                diffs.append(
                    DiffNode(
                        dimension=_D.TEXT_CONTENT,
                        reason=(
                            f"processing instruction <?{node1.label}?> data differs: "
                            f"{_preview(node1.value)} vs {_preview(node2.value)}"
                        ),
                        node1=node1,
                        node2=node2,
                    )
                )

    def _text_diff(
        self,
        node1: TreeNode,
        node2: TreeNode,
        value1: str | None,
        value2: str | None,
    ) -> DiffNode:
        dimension = _D.TEXT_CONTENT
        if (
            self._markup
            and not self._whitespace.is_sensitive(node1)
            and normalize_text(value1 or "") == normalize_text(value2 or "")
        ):
            dimension = _D.STRUCTURAL_WHITESPACE
        what = "whitespace" if dimension == _D.STRUCTURAL_WHITESPACE else "text"
        return DiffNode(
            dimension=dimension,
            reason=f"{what} differs: {_preview(value1)} vs {_preview(value2)}",
            node1=node1,
            node2=node2,
        )

    def _diff_namespace_declarations(
        self, node1: TreeNode, node2: TreeNode, diffs: list[DiffNode]
    ) -> None:
        decls1 = node1.namespace_declarations()
        decls2 = node2.namespace_declarations()
        if decls1 == decls2:
            return
        added = sorted(set(decls2) - set(decls1))
        removed = sorted(set(decls1) - set(decls2))
        changed = sorted(k for k in set(decls1) & set(decls2) if decls1[k] != decls2[k])
        parts = []
        if added:
            parts.append(f"added {', '.join(added)}")
        if removed:
            parts.append(f"removed {', '.join(removed)}")
        if changed:
            parts.append(f"changed {', '.join(changed)}")
        diffs.append(
            DiffNode(
                dimension=_D.NAMESPACE_DECLARATIONS,
                reason=f"namespace declarations on <{node1.label}> differ: "
                + "; ".join(parts),
                node1=node1,
                node2=node2,
            )
        )

    def _diff_attributes(
        self, node1: TreeNode, node2: TreeNode, diffs: list[DiffNode]
    ) -> None:
        attrs1 = node1.plain_attributes()
        attrs2 = node2.plain_attributes()
        keys1, keys2 = set(attrs1), set(attrs2)

        if keys1 != keys2:
            added = sorted(keys2 - keys1)
            missing = sorted(keys1 - keys2)
            parts = []
            if added:
                parts.append(f"added: {', '.join(added)}")
            if missing:
                parts.append(f"missing: {', '.join(missing)}")
            diffs.append(
                DiffNode(
                    dimension=_D.ATTRIBUTE_PRESENCE,
                    reason=f"attributes on <{node1.label}> differ ({'; '.join(parts)})",
                    node1=node1,
                    node2=node2,
                )
            )
            return

        changed = [k for k in attrs1 if attrs1[k] != attrs2[k]]
        for key in changed:
            diffs.append(
                DiffNode(
                    dimension=_D.ATTRIBUTE_VALUES,
                    reason=(
                        f"attribute {key!r} on <{node1.label}> differs: "
                        f"{_preview(attrs1[key])} vs {_preview(attrs2[key])}"
                    ),
                    node1=node1,
                    node2=node2,
                    key=key,
                )
            )
        if not changed and list(attrs1) != list(attrs2):
            diffs.append(
                DiffNode(
                    dimension=_D.ATTRIBUTE_ORDER,
                    reason=(
                        f"attribute order on <{node1.label}> differs: "
                        f"{', '.join(attrs1)} vs {', '.join(attrs2)}"
                    ),
                    node1=node1,
                    node2=node2,
                )
            )

    def _diff_namespace_uri(
        self, node1: TreeNode, node2: TreeNode, diffs: list[DiffNode]
    ) -> None:
        uri1 = node1.namespace.uri if node1.namespace is not None else None
        uri2 = node2.namespace.uri if node2.namespace is not None else None
        if uri1 != uri2:
            diffs.append(
                DiffNode(
                    dimension=_D.NAMESPACE_URI,
                    reason=f"namespace of <{node1.label}> differs: {uri1} vs {uri2}",
                    node1=node1,
                    node2=node2,
                )
            )

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def _position_dimension(self, parent: TreeNode | None) -> MatchDimension:
        if not self._markup and parent is not None and parent.value == OBJECT_MARKER:
            return _D.KEY_ORDER
        return _D.ELEMENT_POSITION

    def _diff_parent(
        self,
        node1: TreeNode,
        node2: TreeNode,
        matching: Matching,
        diffs: list[DiffNode],
    ) -> None:
        parent1, parent2 = node1.parent, node2.parent
        if parent1 is None or parent2 is None:
            return
        if matching.partner_of(parent1) is parent2:
            return
        diffs.append(
            DiffNode(
                dimension=_D.ELEMENT_POSITION,
                reason=(
                    f"element <{node1.label}> moved from {parent1.path} "
                    f"to {parent2.path}"
                ),
                node1=node1,
                node2=node2,
            )
        )

    def _diff_child_order(
        self,
        parent1: TreeNode,
        parent2: TreeNode,
        matching: Matching,
        diffs: list[DiffNode],
    ) -> None:
        """Report matched element children whose relative order changed."""
        index2 = {id(child): i for i, child in enumerate(parent2.children)}
        pairs: list[tuple[TreeNode, TreeNode]] = []
        for child1 in parent1.children:
            if child1.kind != NodeKind.ELEMENT or not matching.matched1(child1):
                continue
            child2 = matching.partner_of(child1)
            if child2 is not None and id(child2) in index2:
                pairs.append((child1, child2))
        if len(pairs) < 2:
            return

        positions = [index2[id(child2)] for _, child2 in pairs]
        stable = _stable_indices(positions)
        dimension = self._position_dimension(parent1)
        noun = "key" if dimension == _D.KEY_ORDER else "element"
        for i, (child1, child2) in enumerate(pairs):
            if i in stable:
                continue
            diffs.append(
                DiffNode(
                    dimension=dimension,
                    reason=(
                        f"{noun} {child1.label!r} moved from position "
                        f"{child1.position} to {child2.position} "
                        f"within {parent1.path}"
                    ),
                    node1=child1,
                    node2=child2,
                )
            )
