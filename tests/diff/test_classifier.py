"""Tests for DiffClassifier: normative/informative and formatting flags."""

from __future__ import annotations

import pytest

from semantic_tree_diff.diff.classifier import DiffClassifier
from semantic_tree_diff.diff.models import DiffNode
from semantic_tree_diff.exceptions import ClassificationError, ConfigurationError
from semantic_tree_diff.options.dimensions import MatchDimension
from semantic_tree_diff.options.match_options import resolve_match_options
from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.nodes import Namespace, TreeNode

E = TreeBuilder.element
T = TreeBuilder.text
_D = MatchDimension


def _classifier(fmt: str = "xml", **match: str) -> DiffClassifier:
    return DiffClassifier(resolve_match_options(fmt, match=match))


def _text_pair(
    value1: str, value2: str, parent: str = "p"
) -> tuple[TreeNode, TreeNode, TreeNode, TreeNode]:
    """Two ``<parent>`` roots, each holding one text node.

    The roots are returned too so the weak parent links stay valid.
    """
    root1 = E(parent, children=[T(value1)])
    root2 = E(parent, children=[T(value2)])
    return root1, root2, root1.children[0], root2.children[0]


class TestStructure:
    def test_structure_always_normative(self) -> None:
        options = resolve_match_options("xml", match_profile="content_only")
        classifier = DiffClassifier(options)
        diff = DiffNode(_D.ELEMENT_STRUCTURE, "removed", node1=E("p"))
        assert classifier.classify(diff).normative

    def test_structure_normative_even_when_everything_ignored(self) -> None:
        classifier = _classifier(
            text_content="ignore", comments="ignore", attribute_presence="ignore"
        )
        diff = DiffNode(_D.ELEMENT_STRUCTURE, "added", node2=E("p"))
        assert classifier.classify(diff).normative


class TestBehaviours:
    def test_strict_is_normative(self) -> None:
        *_roots, t1, t2 = _text_pair("a", "a ")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        assert _classifier(text_content="strict").classify(diff).normative

    @pytest.mark.parametrize("behavior", ["strip", "compact", "ignore"])
    def test_tolerant_behaviours_are_informative(self, behavior: str) -> None:
        *_roots, t1, t2 = _text_pair("apple", "pear")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        assert _classifier(text_content=behavior).classify(diff).informative

    def test_normalize_equal_after_normalization(self) -> None:
        *_roots, t1, t2 = _text_pair(" a \n b ", "a b")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        result = _classifier(text_content="normalize").classify(diff)
        assert result.informative
        assert result.formatting

    def test_normalize_still_different(self) -> None:
        *_roots, t1, t2 = _text_pair("a b", "a c")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        assert _classifier(text_content="normalize").classify(diff).normative

    def test_normalize_is_literal_inside_sensitive_element(self) -> None:
        *_roots, t1, t2 = _text_pair("a  b", "a b", parent="pre")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        assert _classifier("html", text_content="normalize").classify(diff).normative

    def test_blank_text_is_informative(self) -> None:
        *_roots, t1, _ = _text_pair("  ", "x")
        diff = DiffNode(_D.TEXT_CONTENT, "removed", node1=t1)
        result = _classifier(text_content="strict").classify(diff)
        assert result.informative
        assert result.formatting

    def test_attribute_value_uses_key(self) -> None:
        p1 = E("p", {"class": " a  b"})
        p2 = E("p", {"class": "a b"})
        diff = DiffNode(_D.ATTRIBUTE_VALUES, "x", p1, p2, key="class")
        assert _classifier(attribute_values="normalize").classify(diff).informative


class TestNamespaces:
    def test_prefix_rename_with_same_uri_is_informative(self) -> None:
        doc1 = E("doc", {"xmlns:a": "urn:x"})
        doc2 = E("doc", {"xmlns:b": "urn:x"})
        diff = DiffNode(_D.NAMESPACE_DECLARATIONS, "x", doc1, doc2)
        assert _classifier().classify(diff).informative

    def test_different_uris_are_normative(self) -> None:
        doc1 = E("doc", {"xmlns:a": "urn:x"})
        doc2 = E("doc", {"xmlns:a": "urn:y"})
        diff = DiffNode(_D.NAMESPACE_DECLARATIONS, "x", doc1, doc2)
        assert _classifier().classify(diff).normative

    def test_namespace_uri_compared_after_trimming(self) -> None:
        doc1 = E("x:doc", namespace=Namespace("x", "urn:a "))
        doc2 = E("x:doc", namespace=Namespace("x", "urn:a"))
        diff = DiffNode(_D.NAMESPACE_URI, "x", doc1, doc2)
        assert _classifier(namespace_uri="normalize").classify(diff).informative


class TestFormattingFlag:
    def test_normative_never_formatting(self) -> None:
        *_roots, t1, t2 = _text_pair("a b", "ab")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        result = _classifier(text_content="strict").classify(diff)
        assert result.normative
        assert not result.formatting

    def test_only_textual_dimensions_are_formatting(self) -> None:
        c1 = TreeBuilder.comment(" a")
        c2 = TreeBuilder.comment("a")
        diff = DiffNode(_D.COMMENTS, "x", c1, c2)
        result = _classifier(comments="ignore").classify(diff)
        assert result.informative
        assert not result.formatting

    def test_real_change_under_ignore_is_not_formatting(self) -> None:
        *_roots, t1, t2 = _text_pair("apple", "pear")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        assert not _classifier(text_content="ignore").classify(diff).formatting


class TestIdempotence:
    def test_reclassifying_is_noop(self) -> None:
        *_roots, t1, t2 = _text_pair("a", "b")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        classifier = _classifier()
        classifier.classify(diff)
        classifier.classify(diff)
        assert diff.normative

    def test_conflicting_options_raise(self) -> None:
        *_roots, t1, t2 = _text_pair("a", "b")
        diff = DiffNode(_D.TEXT_CONTENT, "x", t1, t2)
        _classifier(text_content="strict").classify(diff)
        with pytest.raises(ClassificationError):
            _classifier(text_content="ignore").classify(diff)

    def test_classify_all_preserves_order(self) -> None:
        diffs = [
            DiffNode(_D.ELEMENT_STRUCTURE, "a", node1=E("a")),
            DiffNode(_D.COMMENTS, "b", node1=TreeBuilder.comment("b")),
        ]
        result = DiffClassifier(resolve_match_options("html")).classify_all(diffs)
        assert result == diffs
        assert [d.normative for d in result] == [True, False]

    def test_missing_dimension_for_format(self) -> None:
        diff = DiffNode(_D.COMMENTS, "x", node1=TreeBuilder.comment("c"))
        with pytest.raises(ConfigurationError, match="not defined for format json"):
            DiffClassifier(resolve_match_options("json")).classify(diff)
