"""Tests for Matching and the two-phase TreeMatcher.

Covers:
- Matching injectivity and lookups
- Hash phase: identical trees, value-only changes, repeated sibling labels
- Similarity phase: elements moved across parents, threshold, phase toggles
- Propagation below similarity-phase pairs
- MatchStatistics bookkeeping
"""

from __future__ import annotations

import pytest

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.algorithm.matching import Matching, MatchStatistics
from semantic_tree_diff.algorithm.tree_matcher import TreeMatcher
from semantic_tree_diff.exceptions import MatchingInvariantError
from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.nodes import TreeNode

E = TreeBuilder.element
T = TreeBuilder.text


def _find(root: TreeNode, label: str, index: int = 0) -> TreeNode:
    return [n for n in root.iter_subtree() if n.label == label][index]


def _assert_injective(matching: Matching) -> None:
    pairs = matching.pairs()
    left = [id(a) for a, _ in pairs]
    right = [id(b) for _, b in pairs]
    assert len(set(left)) == len(left)
    assert len(set(right)) == len(right)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


class TestMatching:
    def test_add_and_lookup_both_directions(self) -> None:
        a, b = E("a"), E("a")
        m = Matching()
        m.add(a, b)
        assert m.matched1(a)
        assert m.matched2(b)
        assert m.partner_of(a) is b
        assert m.partner_of(b) is a
        assert (a, b) in m
        assert len(m) == 1

    def test_unmatched_lookup_returns_none(self) -> None:
        m = Matching()
        assert m.partner_of(E("a")) is None
        assert ("x", "y") not in m

    def test_tree1_node_cannot_be_matched_twice(self) -> None:
        a, b, c = E("a"), E("a"), E("a")
        m = Matching()
        m.add(a, b)
        with pytest.raises(MatchingInvariantError, match="Tree1"):
            m.add(a, c)

    def test_tree2_node_cannot_be_matched_twice(self) -> None:
        a, b, c = E("a"), E("a"), E("a")
        m = Matching()
        m.add(a, b)
        with pytest.raises(MatchingInvariantError, match="Tree2"):
            m.add(c, b)

    def test_pairs_keep_insertion_order(self) -> None:
        nodes = [E(str(i)) for i in range(4)]
        m = Matching()
        m.add(nodes[2], nodes[3])
        m.add(nodes[0], nodes[1])
        assert m.pairs() == [(nodes[2], nodes[3]), (nodes[0], nodes[1])]


class TestMatchStatistics:
    def test_ratios(self) -> None:
        stats = MatchStatistics(
            nodes1=4, nodes2=8, hash_matches=3, similarity_matches=1
        )
        assert stats.total_matches == 4
        assert stats.match_ratio1 == 1.0
        assert stats.match_ratio2 == 0.5

    def test_empty_trees_ratio_is_one(self) -> None:
        assert MatchStatistics().match_ratio1 == 1.0

    def test_to_dict(self) -> None:
        data = MatchStatistics(nodes1=1, nodes2=1, hash_matches=1).to_dict()
        assert data["total_matches"] == 1
        assert data["phase_timings_ms"] == {}


# ---------------------------------------------------------------------------
# TreeMatcher
# ---------------------------------------------------------------------------


class TestHashPhase:
    def test_identical_trees_fully_matched(self) -> None:
        def doc() -> TreeNode:
            return E("r", {"id": "1"}, [E("p", children=[T("x")]), E("q")])

        t1, t2 = doc(), doc()
        matcher = TreeMatcher()
        m = matcher.match(t1, t2)
        assert len(m) == 4
        for a, b in zip(t1.iter_subtree(), t2.iter_subtree(), strict=True):
            assert m.partner_of(a) is b
        assert matcher.statistics.hash_matches == 4
        assert matcher.statistics.similarity_matches == 0

    def test_value_change_keeps_pair(self) -> None:
        t1 = E("r", children=[E("p", {"id": "1"}, [T("old")])])
        t2 = E("r", children=[E("p", {"id": "2"}, [T("new")])])
        m = TreeMatcher().match(t1, t2)
        assert m.partner_of(_find(t1, "#text")) is _find(t2, "#text")
        assert m.partner_of(_find(t1, "p")) is _find(t2, "p")

    def test_reordered_unique_children_matched(self) -> None:
        t1 = E("r", children=[E("a"), E("b")])
        t2 = E("r", children=[E("b"), E("a")])
        m = TreeMatcher().match(t1, t2)
        assert m.partner_of(_find(t1, "a")) is _find(t2, "a")
        assert m.partner_of(_find(t1, "b")) is _find(t2, "b")

    def test_repeated_labels_align_in_order(self) -> None:
        t1 = E("ul", children=[E("li", children=[T(v)]) for v in "abc"])
        t2 = E("ul", children=[E("li", children=[T(v)]) for v in "aBc"])
        m = TreeMatcher().match(t1, t2)
        for i in range(3):
            assert m.partner_of(t1.children[i]) is t2.children[i]

    def test_inserted_repeated_sibling_leaves_one_unmatched(self) -> None:
        t1 = E("ul", children=[E("li", children=[T(v)]) for v in "ac"])
        t2 = E("ul", children=[E("li", children=[T(v)]) for v in "abc"])
        m = TreeMatcher().match(t1, t2)
        assert m.partner_of(t1.children[0]) is t2.children[0]
        assert m.partner_of(t1.children[1]) is t2.children[2]
        assert not m.matched2(t2.children[1])

    def test_different_root_labels_not_matched(self) -> None:
        m = TreeMatcher().match(E("a"), E("b"))
        assert len(m) == 0

    def test_filtered_nodes_never_matched(self) -> None:
        t1 = E("r", children=[T("\n  "), E("p")])
        t2 = E("r", children=[T("\n    "), E("p")])
        matcher = TreeMatcher(include=lambda n: not n.is_blank_text)
        m = matcher.match(t1, t2)
        assert not m.matched1(t1.children[0])
        assert matcher.statistics.nodes1 == 2


class TestSimilarityPhase:
    def _moved(self) -> tuple[TreeNode, TreeNode]:
        x1 = E("x", {"id": "1"}, [T("t")])
        x2 = E("x", {"id": "1"}, [T("t")])
        t1 = E("r", children=[E("a", children=[x1]), E("b")])
        t2 = E("r", children=[E("a"), E("b", children=[x2])])
        return t1, t2

    def test_moved_element_found_and_propagated(self) -> None:
        t1, t2 = self._moved()
        matcher = TreeMatcher()
        m = matcher.match(t1, t2)
        assert m.partner_of(_find(t1, "x")) is _find(t2, "x")
        assert m.partner_of(_find(t1, "#text")) is _find(t2, "#text")
        stats = matcher.statistics
        assert stats.similarity_matches + stats.propagated_matches == 2
        _assert_injective(m)

    def test_similarity_disabled_leaves_moved_element_unmatched(self) -> None:
        t1, t2 = self._moved()
        m = TreeMatcher(MatcherConfig(enable_similarity_matching=False)).match(t1, t2)
        assert not m.matched1(_find(t1, "x"))

    def test_threshold_one_rejects_imperfect_pairs(self) -> None:
        t1, t2 = self._moved()
        m = TreeMatcher(MatcherConfig(threshold=1.0)).match(t1, t2)
        assert not m.matched1(_find(t1, "x"))

    def test_threshold_bounds_dissimilar_pairs(self) -> None:
        # Same label, nothing else in common: scores about 0.36.
        x1 = E("x", {"id": "1"}, [T("aaa")])
        x2 = E("x", {"id": "9"}, [T("zzz")])
        t1 = E("r", children=[E("a", children=[x1]), E("b")])
        t2 = E("r", children=[E("a"), E("b", children=[x2])])
        assert not TreeMatcher().match(t1, t2).matched1(x1)
        m = TreeMatcher(MatcherConfig(threshold=0.0)).match(t1, t2)
        assert m.partner_of(x1) is x2

    def test_text_nodes_not_paired_across_unmatched_parents(self) -> None:
        t1 = E("r", children=[E("a", children=[T("same")])])
        t2 = E("r", children=[E("b", children=[T("same")])])
        m = TreeMatcher().match(t1, t2)
        assert not m.matched1(_find(t1, "#text"))

    def test_statistics_reset_per_call(self) -> None:
        matcher = TreeMatcher()
        matcher.match(E("r", children=[E("a")]), E("r", children=[E("a")]))
        matcher.match(E("r"), E("r"))
        assert matcher.statistics.total_matches == 1
        assert "hash" in matcher.statistics.phase_timings_ms


class TestInjectivity:
    @pytest.mark.parametrize(
        ("left", "right"),
        [
            ("abcabc", "cbacba"),
            ("aaaa", "aa"),
            ("ab", "bbbbaa"),
        ],
    )
    def test_every_node_in_at_most_one_pair(self, left: str, right: str) -> None:
        t1 = E("r", children=[E(c, children=[E(c, children=[T(c)])]) for c in left])
        t2 = E("r", children=[E(c, children=[E(c, children=[T(c)])]) for c in right])
        m = TreeMatcher().match(t1, t2)
        _assert_injective(m)
        for a, b in m:
            assert a.label == b.label
