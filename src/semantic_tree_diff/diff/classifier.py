"""DiffClassifier: decide whether each DiffNode is normative or informative.

A difference is *normative* when it changes what the document means under
the resolved options, and *informative* when it is reported but tolerated.
Informative text differences that vanish once all whitespace is removed are
additionally flagged as *formatting*.

Rules, first match wins:

1. ``element_structure`` is always normative, whatever its behaviour.
2. ``text_content`` between two blank sides (a missing side counts as
   blank) is informative formatting.
3. ``strict`` is normative.
4. ``normalize`` is normative only if the two values still differ after
   normalization for the dimension.  Inside a whitespace-sensitive element
   text is compared literally.
5. ``strip``, ``compact`` and ``ignore`` are informative.

Classification is pure: re-classifying a DiffNode writes the same flags.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from semantic_tree_diff.diff.formatting import equal_ignoring_whitespace, is_blank
from semantic_tree_diff.diff.models import DiffNode
from semantic_tree_diff.options.dimensions import MatchBehavior, MatchDimension
from semantic_tree_diff.options.match_options import (
    ResolvedMatchOptions,
    normalize_text,
)
from semantic_tree_diff.options.whitespace import WhitespaceSensitivity
from semantic_tree_diff.tree.nodes import TreeNode

logger = logging.getLogger(__name__)

__all__ = ["DiffClassifier"]

_D = MatchDimension
_TEXTUAL = frozenset({_D.TEXT_CONTENT, _D.STRUCTURAL_WHITESPACE})


class DiffClassifier:
    """Applies the resolved behaviour table to DiffNodes."""

    def __init__(
        self,
        options: ResolvedMatchOptions,
        whitespace: WhitespaceSensitivity | None = None,
    ) -> None:
        self._options = options
        self._whitespace = whitespace or WhitespaceSensitivity(options)

    def classify(self, diff: DiffNode) -> DiffNode:
        """Classify ``diff`` in place and return it.

        Raises:
            ClassificationError: If ``diff`` already carries different flags.
        """
        normative = self._is_normative(diff)
        formatting = (
            not normative
            and diff.dimension in _TEXTUAL
            and equal_ignoring_whitespace(*self._values(diff))
        )
        diff.set_classification(normative=normative, formatting=formatting)
        return diff

    def classify_all(self, diffs: Iterable[DiffNode]) -> list[DiffNode]:
        classified = [self.classify(d) for d in diffs]
        if logger.isEnabledFor(logging.DEBUG):
            normative = sum(1 for d in classified if d.normative)
            logger.debug(
                "classified %d diff nodes: %d normative, %d informative",
                len(classified),
                normative,
                len(classified) - normative,
            )
        return classified

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _is_normative(self, diff: DiffNode) -> bool:
        if diff.dimension == _D.ELEMENT_STRUCTURE:
            return True

        value1, value2 = self._values(diff)
        if diff.dimension == _D.TEXT_CONTENT and is_blank(value1) and is_blank(value2):
            return False

        behavior = self._options.behavior_for(diff.dimension)
        if behavior == MatchBehavior.STRICT:
            return True
        if behavior == MatchBehavior.NORMALIZE:
            return self._differs_after_normalize(diff, value1, value2)
        return False

    def _differs_after_normalize(
        self, diff: DiffNode, value1: str | None, value2: str | None
    ) -> bool:
        if diff.dimension == _D.NAMESPACE_DECLARATIONS:
            # Prefixes are only names for URIs; the bound URIs must agree.
            return self._declared_uris(diff.node1) != self._declared_uris(diff.node2)
        if diff.dimension == _D.NAMESPACE_URI:
            return (value1 or "").strip() != (value2 or "").strip()

        node = diff.node
        if node is not None and self._whitespace.is_sensitive(node):
            return (value1 or "") != (value2 or "")
        return normalize_text(value1 or "") != normalize_text(value2 or "")

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    @staticmethod
    def _declared_uris(node: TreeNode | None) -> frozenset[str]:
        if node is None:
            return frozenset()
        return frozenset(node.namespace_declarations().values())

    @staticmethod
    def _values(diff: DiffNode) -> tuple[str | None, str | None]:
        """The compared values of each side for the DiffNode's dimension."""
        return _value_of(diff, diff.node1), _value_of(diff, diff.node2)


def _value_of(diff: DiffNode, node: TreeNode | None) -> str | None:
    if node is None:
        return None
    if diff.dimension == _D.ATTRIBUTE_VALUES and diff.key is not None:
        return node.attributes.get(diff.key)
    if diff.dimension == _D.NAMESPACE_URI:
        return node.namespace.uri if node.namespace is not None else None
    return node.value
