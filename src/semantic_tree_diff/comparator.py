"""SemanticComparator: orchestrator that wires matching, diffing and reporting.

This is the central wiring layer between the algorithm packages and the
public API.  One ``compare()`` call runs the whole pipeline:

1. resolve the match options for the call (``MatchOptionsResolver``)
2. build trees from parsed JSON/YAML data when needed (``TreeBuilder``)
3. match the trees (``TreeMatcher``), ignoring collapsible whitespace
4. enumerate differences (``DiffConstructor``) and classify them
   (``DiffClassifier``)
5. serialize both trees, align the lines and link DiffNodes
   (``DiffNodeMapper``)
6. group lines into blocks and contexts (``DiffReportBuilder``)

Every stage gets fresh objects, so no state is shared between calls.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any

from semantic_tree_diff.algorithm.config import MatcherConfig
from semantic_tree_diff.algorithm.tree_matcher import TreeMatcher
from semantic_tree_diff.diff.builders import DiffReportBuilder, ReportOptions
from semantic_tree_diff.diff.classifier import DiffClassifier
from semantic_tree_diff.diff.constructor import DiffConstructor
from semantic_tree_diff.diff.mapper import DiffNodeMapper
from semantic_tree_diff.options.dimensions import DocumentFormat, Preprocessing
from semantic_tree_diff.options.match_options import (
    GlobalMatchSettings,
    MatchOptionsResolver,
)
from semantic_tree_diff.options.profiles import MatchProfile
from semantic_tree_diff.options.whitespace import WhitespaceSensitivity
from semantic_tree_diff.result import ComparisonResult
from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.nodes import TreeNode
from semantic_tree_diff.tree.serializer import serialize

__all__ = ["SemanticComparator"]


class SemanticComparator:
    """Orchestrator for semantic tree comparison.

    Example::

        from semantic_tree_diff.comparator import SemanticComparator

        cmp = SemanticComparator()
        result = cmp.compare({"a": 1, "b": 2}, {"b": 2, "a": 1}, "json")
        result.equivalent            # True: key order is ignored for JSON
        result.informative_differences[0].dimension   # key_order

    Markup documents are passed as ``TreeNode`` trees produced by a parser
    adapter; JSON and YAML documents may also be passed as parsed data.
    """

    def __init__(
        self,
        config: MatcherConfig | None = None,
        global_settings: GlobalMatchSettings | None = None,
        profiles: Iterable[MatchProfile] = (),
    ) -> None:
        """Initialise the comparator.

        Args:
            config: Matching hyper-parameters.  Defaults to ``MatcherConfig()``.
            global_settings: Caller-wide profile and options, applied beneath
                every per-call setting.
            profiles: Caller-defined profiles made available by name.
        """
        self._config = config if config is not None else MatcherConfig()
        self._resolver = MatchOptionsResolver(global_settings, profiles)
        self._builder = TreeBuilder()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compare(
        self,
        left: TreeNode | Any,
        right: TreeNode | Any,
        fmt: DocumentFormat | str = DocumentFormat.XML,
        *,
        match_profile: str | MatchProfile | None = None,
        match: Mapping[str, str] | None = None,
        preprocessing: Preprocessing | str | None = None,
        whitespace_sensitive_elements: Iterable[str] | None = None,
        whitespace_insensitive_elements: Iterable[str] | None = None,
        respect_xml_space: bool = True,
        report_options: ReportOptions | None = None,
        text1: str | None = None,
        text2: str | None = None,
    ) -> ComparisonResult:
        """Compare two documents and return a ComparisonResult.

        Args:
            left:  First document: a ``TreeNode`` root, or parsed JSON/YAML
                data when ``fmt`` is json or yaml.
            right: Second document, same rules.
            fmt:   Document format; selects defaults and valid dimensions.
            match_profile: Per-call profile name or ``MatchProfile``.
            match: Per-call ``dimension -> behavior`` overrides.
            preprocessing: Per-call preprocessing mode, recorded in the
                resolved options for parser adapters.
            whitespace_sensitive_elements: Extra whitespace-sensitive names.
            whitespace_insensitive_elements: Names removed from the format's
                default sensitive set.
            respect_xml_space: Honour ``xml:space`` attributes.
            report_options: Report presentation settings.
            text1: Text to line-diff for the first document.  Defaults to the
                serialized tree.
            text2: Same for the second document.

        Raises:
            ConfigurationError: For any invalid option name or value.
            TypeError: If a markup document is not a ``TreeNode``.
        """
        t0 = time.perf_counter()

        options = self._resolver.resolve(
            fmt,
            match_profile=match_profile,
            match=match,
            preprocessing=preprocessing,
            whitespace_sensitive_elements=whitespace_sensitive_elements,
            whitespace_insensitive_elements=whitespace_insensitive_elements,
            respect_xml_space=respect_xml_space,
        )
        tree1 = self._as_tree(left, options.format)
        tree2 = self._as_tree(right, options.format)

        whitespace = WhitespaceSensitivity(options)
        significant = whitespace.is_significant
        matcher = TreeMatcher(self._config, include=significant)
        matching = matcher.match(tree1, tree2)

        diff_nodes = DiffConstructor(options, whitespace).build(tree1, tree2, matching)
        diff_nodes = DiffClassifier(options, whitespace).classify_all(diff_nodes)

        if text1 is None:
            text1 = serialize(tree1, options.format, include=significant)
        if text2 is None:
            text2 = serialize(tree2, options.format, include=significant)
        lines = DiffNodeMapper(diff_nodes).map(text1, text2)
        report = DiffReportBuilder(report_options).build(lines)

        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        return ComparisonResult(
            equivalent=not any(d.normative for d in diff_nodes),
            diff_nodes=diff_nodes,
            report=report,
            options=options,
            statistics=matcher.statistics,
            computation_time_ms=elapsed_ms,
            tree1=tree1,
            tree2=tree2,
        )

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def _as_tree(self, value: Any, fmt: DocumentFormat) -> TreeNode:
        if isinstance(value, TreeNode):
            return value
        if fmt.is_markup:
            msg = (
                f"{fmt} documents must be passed as TreeNode trees, "
                f"got {type(value).__name__}"
            )
            raise TypeError(msg)
        return self._builder.build(value, str(fmt))
