"""Matching: the partial injection between the nodes of two trees.

A Matching is built once per comparison by ``TreeMatcher`` and only read
afterwards.  Nodes hash by identity, so two structurally identical nodes
are still distinct keys.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from semantic_tree_diff.exceptions import MatchingInvariantError
from semantic_tree_diff.tree.nodes import TreeNode

__all__ = ["MatchStatistics", "Matching"]


class Matching:
    """Partial one-to-one correspondence Tree1 <-> Tree2.

    Every node is the endpoint of at most one pair on its side.  ``add``
    enforces this and raises ``MatchingInvariantError`` on a violation,
    which always indicates a defect in the matcher.
    """

    __slots__ = ("_forward", "_backward")

    def __init__(self) -> None:
        self._forward: dict[TreeNode, TreeNode] = {}
        self._backward: dict[TreeNode, TreeNode] = {}

    def add(self, node1: TreeNode, node2: TreeNode) -> None:
        """Record ``node1`` (Tree1) <-> ``node2`` (Tree2).

        Raises:
            MatchingInvariantError: If either node is already matched.
        """
        if node1 in self._forward:
            msg = f"Tree1 node {node1.path} is already matched"
            raise MatchingInvariantError(msg)
        if node2 in self._backward:
            msg = f"Tree2 node {node2.path} is already matched"
            raise MatchingInvariantError(msg)
        self._forward[node1] = node2
        self._backward[node2] = node1

    def matched1(self, node: TreeNode) -> bool:
        """True when a Tree1 node has a partner."""
        return node in self._forward

    def matched2(self, node: TreeNode) -> bool:
        """True when a Tree2 node has a partner."""
        return node in self._backward

    def partner_of(self, node: TreeNode) -> TreeNode | None:
        """Return the partner of a node from either tree, or None."""
        partner = self._forward.get(node)
        if partner is not None:
            return partner
        return self._backward.get(node)

    def pairs(self) -> list[tuple[TreeNode, TreeNode]]:
        """All pairs, in the order they were added."""
        return list(self._forward.items())

    def __iter__(self) -> Iterator[tuple[TreeNode, TreeNode]]:
        return iter(self._forward.items())

    def __len__(self) -> int:
        return len(self._forward)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self._forward.get(pair[0]) is pair[1]

    def __repr__(self) -> str:
        return f"Matching(pairs={len(self)})"


@dataclass(slots=True)
class MatchStatistics:
    """Per-phase match counts collected by ``TreeMatcher``.

    Attributes:
        nodes1: Number of significant nodes in Tree1.
        nodes2: Number of significant nodes in Tree2.
        hash_matches: Pairs found by the hash phase.
        similarity_matches: Pairs found by the similarity phase.
        propagated_matches: Pairs found by re-running the hash phase below
            similarity-phase pairs.
        phase_timings_ms: Wall-clock duration of each phase that ran.
    """

    nodes1: int = 0
    nodes2: int = 0
    hash_matches: int = 0
    similarity_matches: int = 0
    propagated_matches: int = 0
    phase_timings_ms: dict[str, float] = field(default_factory=dict)

    @property
    def total_matches(self) -> int:
        return self.hash_matches + self.similarity_matches + self.propagated_matches

    @property
    def match_ratio1(self) -> float:
        """Fraction of Tree1 nodes that found a partner (1.0 for empty trees)."""
        return self.total_matches / self.nodes1 if self.nodes1 else 1.0

    @property
    def match_ratio2(self) -> float:
        """Fraction of Tree2 nodes that found a partner (1.0 for empty trees)."""
        return self.total_matches / self.nodes2 if self.nodes2 else 1.0

    def to_dict(self) -> dict[str, object]:
        return {
            "nodes1": self.nodes1,
            "nodes2": self.nodes2,
            "hash_matches": self.hash_matches,
            "similarity_matches": self.similarity_matches,
            "propagated_matches": self.propagated_matches,
            "total_matches": self.total_matches,
            "match_ratio1": self.match_ratio1,
            "match_ratio2": self.match_ratio2,
            "phase_timings_ms": dict(self.phase_timings_ms),
        }
