"""SimilarityMatcher: phase 2 of tree matching, scored optimal assignment.

Nodes left unmatched by the hash phase are grouped by ``(kind, label)``:
label equality is a hard requirement.  Inside each group a cost matrix of
``1 - score`` is built and solved with ``hungarian_match``; pairs scoring
below the configured threshold are forbidden (``np.inf``), so they stay
unmatched and surface as a deletion plus an insertion.

Text and comment nodes carry no identity of their own, so a text/comment
pair is only allowed when the two parents are already partners.  Elements
and processing instructions may be paired across parents, which is how
moved elements are found.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from semantic_tree_diff.algorithm.assignment import hungarian_match
from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.algorithm.matching import Matching
from semantic_tree_diff.algorithm.scoring import NodeFeatures, SimilarityScorer
from semantic_tree_diff.tree.nodes import NodeKind, TreeNode
from semantic_tree_diff.tree.signature import NodeFilter

logger = logging.getLogger(__name__)

__all__ = ["SimilarityMatcher"]

_PARENT_BOUND_KINDS = frozenset({NodeKind.TEXT, NodeKind.COMMENT})

GroupKey = tuple[NodeKind, str]


class SimilarityMatcher:
    """Pairs leftover nodes by weighted similarity and optimal assignment.

    Args:
        config:  Matcher weights and acceptance threshold.
        include: Optional predicate selecting the nodes that take part.
    """

    def __init__(
        self, config: MatcherConfig, include: NodeFilter | None = None
    ) -> None:
        self._config = config
        self._include = include
        self._scorer = SimilarityScorer(config, include)

    @property
    def scorer(self) -> SimilarityScorer:
        return self._scorer

    def match(self, tree1: TreeNode, tree2: TreeNode, matching: Matching) -> int:
        """Extend ``matching`` in place with phase-2 pairs.

        Returns:
            Number of pairs added.
        """
        groups1 = self._unmatched_groups(tree1, matching.matched1)
        groups2 = self._unmatched_groups(tree2, matching.matched2)

        added = 0
        for key, candidates1 in groups1.items():
            candidates2 = groups2.get(key)
            if not candidates2:
                continue
            for node1, node2 in self._assign(key, candidates1, candidates2, matching):
                matching.add(node1, node2)
                added += 1
        return added

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _unmatched_groups(
        self, root: TreeNode, is_matched: Callable[[TreeNode], bool]
    ) -> dict[GroupKey, list[tuple[TreeNode, NodeFeatures]]]:
        keep = self._include
        nodes = [n for n in root.iter_subtree() if keep is None or keep(n)]
        span = max(len(nodes) - 1, 1)
        groups: dict[GroupKey, list[tuple[TreeNode, NodeFeatures]]] = {}
        for index, node in enumerate(nodes):
            if is_matched(node):
                continue
            features = self._scorer.features(node, index / span)
            groups.setdefault((node.kind, node.label), []).append((node, features))
        return groups

    def _assign(
        self,
        key: GroupKey,
        candidates1: list[tuple[TreeNode, NodeFeatures]],
        candidates2: list[tuple[TreeNode, NodeFeatures]],
        matching: Matching,
    ) -> list[tuple[TreeNode, TreeNode]]:
        parent_bound = key[0] in _PARENT_BOUND_KINDS
        cost = np.full((len(candidates1), len(candidates2)), np.inf)
        for i, (node1, features1) in enumerate(candidates1):
            for j, (node2, features2) in enumerate(candidates2):
                if parent_bound and not _parents_partnered(node1, node2, matching):
                    continue
                cost[i, j] = 1.0 - self._scorer.score(features1, features2)

        row_ind, col_ind = hungarian_match(
            cost, max_cost=1.0 - self._config.threshold
        )
        logger.debug(
            "similarity group %s/%s: %dx%d candidates, %d assigned",
            key[0],
            key[1],
            len(candidates1),
            len(candidates2),
            len(row_ind),
        )
        return [
            (candidates1[r][0], candidates2[c][0])
            for r, c in zip(row_ind.tolist(), col_ind.tolist(), strict=True)
        ]


def _parents_partnered(node1: TreeNode, node2: TreeNode, matching: Matching) -> bool:
    parent1, parent2 = node1.parent, node2.parent
    if parent1 is None or parent2 is None:
        return False
    return matching.partner_of(parent1) is parent2
