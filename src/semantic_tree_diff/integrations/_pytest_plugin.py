"""pytest plugin for semantic-tree-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.
"""

from __future__ import annotations

from typing import Any

import pytest

from semantic_tree_diff import compare


@pytest.fixture(scope="session")
def assert_documents_equivalent() -> Any:
    """Fixture that returns a callable document equivalence asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to compare() which creates a fresh SemanticComparator per call).

    Usage in tests::

        def test_key_order(assert_documents_equivalent):
            assert_documents_equivalent({"a": 1, "b": 2}, {"b": 2, "a": 1}, "json")

        def test_value_change(assert_documents_equivalent):
            with pytest.raises(AssertionError, match="text_content"):
                assert_documents_equivalent({"a": 1}, {"a": 2}, "json")

    Returns:
        A callable ``_assert(actual, expected, fmt="xml", **options) -> None``
        that raises ``AssertionError`` when any difference is normative.
    """

    def _assert(actual: Any, expected: Any, fmt: str = "xml", **options: Any) -> None:
        """Assert that two documents are semantically equivalent.

        Args:
            actual:    The document produced by the code under test.
            expected:  The expected/reference document.
            fmt:       Document format.
            **options: Forwarded to ``compare`` (``match_profile``, ``match``...).

        Raises:
            AssertionError: When at least one difference is normative, with a
                message listing each normative difference.
        """
        result = compare(actual, expected, fmt, **options)
        if not result.equivalent:
            details = "\n".join(
                f"  {d.path or '/'}: {d.describe()}"
                for d in result.normative_differences
            )
            raise AssertionError(
                f"{fmt} documents not equivalent: "
                f"{len(result.normative_differences)} normative difference(s)\n"
                f"{details}"
            )

    return _assert
