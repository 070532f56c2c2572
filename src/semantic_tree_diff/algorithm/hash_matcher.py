"""HashMatcher: phase 1 of tree matching, signature bucketing top-down.

Starting from the roots (or from every pair already in the Matching), the
children of each matched parent pair are bucketed by loose signature.
Bucketing by ``(loose signature, matched parent pair)`` confines candidates
to the same structural neighbourhood, so repeated labels elsewhere in the
document can never be cross-matched here.

Inside a bucket:

- one candidate per side: matched directly;
- several candidates: identical subtrees are anchored first with an
  order-preserving alignment over exact fingerprints, then each gap between
  two anchors is paired positionally when both sides of the gap hold the
  same number of candidates.  Unequal gaps are left to the similarity phase.
"""

from __future__ import annotations

import difflib
from collections import deque

from semantic_tree_diff.algorithm.matching import Matching
from semantic_tree_diff.tree.nodes import TreeNode
from semantic_tree_diff.tree.signature import (
    NodeFilter,
    NodeSignature,
    subtree_fingerprints,
)

__all__ = ["HashMatcher"]


class HashMatcher:
    """Top-down, order-preserving signature matcher.

    Args:
        include: Optional predicate selecting the nodes that take part in
            matching.  Rejected nodes are never paired.
    """

    def __init__(self, include: NodeFilter | None = None) -> None:
        self._include = include

    def match(self, tree1: TreeNode, tree2: TreeNode, matching: Matching) -> int:
        """Extend ``matching`` in place with phase-1 pairs.

        When the matching is empty the roots are paired first, provided
        their loose signatures agree.  Otherwise every existing pair seeds
        the traversal, which is how propagation below similarity-phase pairs
        works.

        Returns:
            Number of pairs added.
        """
        fp1 = subtree_fingerprints(tree1, self._include)
        fp2 = subtree_fingerprints(tree2, self._include)
        before = len(matching)

        queue: deque[tuple[TreeNode, TreeNode]] = deque()
        if (
            not matching.matched1(tree1)
            and not matching.matched2(tree2)
            and NodeSignature.loose(tree1) == NodeSignature.loose(tree2)
            and self._keep(tree1)
            and self._keep(tree2)
        ):
            matching.add(tree1, tree2)
        # Seed shallow pairs first so parents are always expanded before
        # their children.
        queue.extend(sorted(matching, key=lambda pair: pair[0].depth))

        while queue:
            parent1, parent2 = queue.popleft()
            queue.extend(self._match_children(parent1, parent2, matching, fp1, fp2))

        return len(matching) - before

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _keep(self, node: TreeNode) -> bool:
        return self._include is None or self._include(node)

    def _buckets(
        self, parent: TreeNode, matched: bool, matching: Matching
    ) -> dict[NodeSignature, list[TreeNode]]:
        """Unmatched significant children of ``parent`` grouped by loose signature."""
        is_matched = matching.matched1 if matched else matching.matched2
        buckets: dict[NodeSignature, list[TreeNode]] = {}
        for child in parent.children:
            if not self._keep(child) or is_matched(child):
                continue
            buckets.setdefault(NodeSignature.loose(child), []).append(child)
        return buckets

    def _match_children(
        self,
        parent1: TreeNode,
        parent2: TreeNode,
        matching: Matching,
        fp1: dict[TreeNode, int],
        fp2: dict[TreeNode, int],
    ) -> list[tuple[TreeNode, TreeNode]]:
        buckets1 = self._buckets(parent1, True, matching)
        buckets2 = self._buckets(parent2, False, matching)

        added: list[tuple[TreeNode, TreeNode]] = []
        for signature, candidates1 in buckets1.items():
            candidates2 = buckets2.get(signature)
            if not candidates2:
                continue
            if len(candidates1) == 1 and len(candidates2) == 1:
                pairs = [(candidates1[0], candidates2[0])]
            else:
                pairs = self._align(candidates1, candidates2, fp1, fp2)
            for node1, node2 in pairs:
                matching.add(node1, node2)
                added.append((node1, node2))
        return added

    @staticmethod
    def _align(
        candidates1: list[TreeNode],
        candidates2: list[TreeNode],
        fp1: dict[TreeNode, int],
        fp2: dict[TreeNode, int],
    ) -> list[tuple[TreeNode, TreeNode]]:
        """Pair a multi-candidate bucket by relative document order."""
        seq1 = [fp1[n] for n in candidates1]
        seq2 = [fp2[n] for n in candidates2]
        matcher = difflib.SequenceMatcher(None, seq1, seq2, autojunk=False)

        pairs: list[tuple[TreeNode, TreeNode]] = []
        i_prev = j_prev = 0
        # The final matching block is a zero-length sentinel at the ends of
        # both sequences, so the trailing gap is handled by the same loop.
        for block in matcher.get_matching_blocks():
            gap1 = candidates1[i_prev : block.a]
            gap2 = candidates2[j_prev : block.b]
            if gap1 and len(gap1) == len(gap2):
                pairs.extend(zip(gap1, gap2, strict=True))
            for k in range(block.size):
                pairs.append((candidates1[block.a + k], candidates2[block.b + k]))
            i_prev = block.a + block.size
            j_prev = block.b + block.size
        return pairs
