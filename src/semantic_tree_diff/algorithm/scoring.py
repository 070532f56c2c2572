"""Pairwise similarity scoring for the similarity phase of tree matching.

Each candidate node is summarised once into a ``NodeFeatures`` record, and
every cross pair of a ``(kind, label)`` group is scored from the two
records.  All four terms are in [0, 1]:

- attribute overlap : Jaccard over ``(name, value)`` pairs (namespace
  declarations excluded); 1.0 when neither side has attributes
- text similarity   : ``difflib`` ratio over whitespace-collapsed text
- subtree overlap   : multiset Jaccard over the structural signatures of
  all significant descendants; 1.0 for two leaves
- position proximity: 1 - |relative pre-order position difference|

Text ratios are memoised in a ``cachetools.LRUCache`` owned by one scorer,
so nothing is shared between comparisons.
"""

from __future__ import annotations

import difflib
import re
from collections import Counter
from dataclasses import dataclass

from cachetools import LRUCache

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.tree.nodes import TreeNode
from semantic_tree_diff.tree.signature import NodeFilter, NodeSignature

__all__ = ["NodeFeatures", "SimilarityScorer"]

_WS_RUN = re.compile(r"\s+")


@dataclass(frozen=True, slots=True)
class NodeFeatures:
    """Per-node inputs to the pair score."""

    attributes: frozenset[tuple[str, str]]
    text: str
    subtree: Counter[NodeSignature]
    position: float


class SimilarityScorer:
    """Scores candidate pairs using the weights of a ``MatcherConfig``.

    Args:
        config:  Matcher weights and cache capacity.
        include: Optional predicate; rejected descendants are ignored when
            building subtree signatures and text.
    """

    def __init__(
        self, config: MatcherConfig, include: NodeFilter | None = None
    ) -> None:
        self._config = config
        self._include = include
        self._text_cache: LRUCache[tuple[str, str], float] = LRUCache(
            maxsize=config.text_cache_size
        )

    # ------------------------------------------------------------------
    # Feature extraction
    # ------------------------------------------------------------------

    def features(self, node: TreeNode, position: float) -> NodeFeatures:
        """Summarise ``node`` for scoring.

        Args:
            node:     Candidate node.
            position: Relative pre-order position of the node in its tree,
                      in [0, 1].
        """
        descendants = [
            d
            for d in node.iter_subtree()
            if d is not node and (self._include is None or self._include(d))
        ]
        if node.is_element and node.value is None:
            raw_text = "".join(d.value or "" for d in descendants if d.is_text)
        else:
            raw_text = node.value or ""
        return NodeFeatures(
            attributes=frozenset(node.plain_attributes().items()),
            text=_WS_RUN.sub(" ", raw_text).strip(),
            subtree=Counter(
                NodeSignature.structural(d, self._include) for d in descendants
            ),
            position=position,
        )

    # ------------------------------------------------------------------
    # Terms
    # ------------------------------------------------------------------

    @staticmethod
    def attribute_overlap(
        a: frozenset[tuple[str, str]], b: frozenset[tuple[str, str]]
    ) -> float:
        if not a and not b:
            return 1.0
        return len(a & b) / len(a | b)

    def text_similarity(self, a: str, b: str) -> float:
        if a == b:
            return 1.0
        if not a or not b:
            return 0.0
        key = (a, b) if a <= b else (b, a)
        cached = self._text_cache.get(key)
        if cached is None:
            matcher = difflib.SequenceMatcher(None, key[0], key[1], autojunk=False)
            cached = matcher.ratio()
            self._text_cache[key] = cached
        return cached

    @staticmethod
    def subtree_overlap(
        a: Counter[NodeSignature], b: Counter[NodeSignature]
    ) -> float:
        if not a and not b:
            return 1.0
        shared = sum((a & b).values())
        union = sum((a | b).values())
        return shared / union

    @staticmethod
    def position_proximity(a: float, b: float) -> float:
        return max(0.0, 1.0 - abs(a - b))

    # ------------------------------------------------------------------
    # Combined score
    # ------------------------------------------------------------------

    def score(self, a: NodeFeatures, b: NodeFeatures) -> float:
        """Weighted pair score in [0, 1]."""
        cfg = self._config
        return (
            cfg.w_attributes * self.attribute_overlap(a.attributes, b.attributes)
            + cfg.w_text * self.text_similarity(a.text, b.text)
            + cfg.w_subtree * self.subtree_overlap(a.subtree, b.subtree)
            + cfg.w_position * self.position_proximity(a.position, b.position)
        )

    @property
    def cached_ratios(self) -> int:
        """Number of text ratios currently memoised."""
        return int(self._text_cache.currsize)
