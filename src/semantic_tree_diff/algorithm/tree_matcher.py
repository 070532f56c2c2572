"""TreeMatcher: runs the matching phases and returns a Matching.

Phases, each toggled by ``MatcherConfig``:

1. hash       : signature bucketing under matched parents (HashMatcher)
2. similarity : scored optimal assignment of leftovers (SimilarityMatcher)
3. propagation: the hash phase again, seeded by every pair found so far,
                so children of phase-2 pairs are paired structurally

The matcher is cheap to build and owns its similarity cache, so callers
create one per comparison.
"""

from __future__ import annotations

import logging
import time

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.algorithm.hash_matcher import HashMatcher
from semantic_tree_diff.algorithm.matching import Matching, MatchStatistics
from semantic_tree_diff.algorithm.similarity_matcher import SimilarityMatcher
from semantic_tree_diff.tree.nodes import TreeNode
from semantic_tree_diff.tree.signature import NodeFilter

logger = logging.getLogger(__name__)

__all__ = ["TreeMatcher"]


class TreeMatcher:
    """Two-phase tree matcher.

    Example::

        matcher = TreeMatcher()
        matching = matcher.match(tree1, tree2)
        matching.partner_of(tree1)   # tree2 when the root labels agree
        matcher.statistics.hash_matches

    Args:
        config:  Phase toggles, weights and threshold.  Defaults to
            ``MatcherConfig()``.
        include: Optional predicate selecting the nodes that take part in
            matching.  The comparator passes the whitespace-significance
            predicate here.
    """

    def __init__(
        self,
        config: MatcherConfig | None = None,
        include: NodeFilter | None = None,
    ) -> None:
        self._config = config if config is not None else MatcherConfig()
        self._include = include
        self._hash = HashMatcher(include)
        self._similarity = SimilarityMatcher(self._config, include)
        self.statistics = MatchStatistics()

    @property
    def config(self) -> MatcherConfig:
        return self._config

    def match(self, tree1: TreeNode, tree2: TreeNode) -> Matching:
        """Compute a Matching between ``tree1`` and ``tree2``.

        ``statistics`` is reset and refilled on every call.
        """
        matching = Matching()
        stats = MatchStatistics(
            nodes1=self._count(tree1),
            nodes2=self._count(tree2),
        )

        if self._config.enable_hash_matching:
            t0 = time.perf_counter()
            stats.hash_matches = self._hash.match(tree1, tree2, matching)
            stats.phase_timings_ms["hash"] = (time.perf_counter() - t0) * 1000.0

        if self._config.enable_similarity_matching:
            t0 = time.perf_counter()
            stats.similarity_matches = self._similarity.match(tree1, tree2, matching)
            stats.phase_timings_ms["similarity"] = (time.perf_counter() - t0) * 1000.0

            if self._config.enable_propagation and stats.similarity_matches:
                t0 = time.perf_counter()
                stats.propagated_matches = self._hash.match(tree1, tree2, matching)
                stats.phase_timings_ms["propagation"] = (
                    time.perf_counter() - t0
                ) * 1000.0

        self.statistics = stats
        logger.debug(
            "matched %d pairs (hash=%d, similarity=%d, propagated=%d) "
            "over %d/%d nodes",
            stats.total_matches,
            stats.hash_matches,
            stats.similarity_matches,
            stats.propagated_matches,
            stats.nodes1,
            stats.nodes2,
        )
        return matching

    def _count(self, root: TreeNode) -> int:
        keep = self._include
        return sum(1 for n in root.iter_subtree() if keep is None or keep(n))
