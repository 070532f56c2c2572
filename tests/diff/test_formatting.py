"""Tests for whitespace-only and formatting-only detection."""

from __future__ import annotations

import pytest

from semantic_tree_diff.diff.formatting import (
    equal_ignoring_whitespace,
    formatting_only,
    is_blank,
)


@pytest.mark.parametrize("text", [None, "", "  ", "\n\t "])
def test_is_blank(text: str | None) -> None:
    assert is_blank(text)


def test_is_blank_false_for_content() -> None:
    assert not is_blank(" x ")


class TestEqualIgnoringWhitespace:
    def test_removes_all_whitespace(self) -> None:
        assert equal_ignoring_whitespace("a b\n c", "abc")

    def test_none_is_empty(self) -> None:
        assert equal_ignoring_whitespace(None, " \n")

    def test_content_change(self) -> None:
        assert not equal_ignoring_whitespace("a b", "a c")


class TestFormattingOnly:
    @pytest.mark.parametrize(
        ("line1", "line2"),
        [
            ("<p  id='1'>", "<p id='1'>"),
            ("  <p>", "<p>"),
            ("<br />", "<br/>"),
            ("< p>", "<p>"),
            ("a\tb", "a b"),
        ],
    )
    def test_formatting_changes(self, line1: str, line2: str) -> None:
        assert formatting_only(line1, line2)

    @pytest.mark.parametrize(
        ("line1", "line2"),
        [
            ("<p>a</p>", "<p>b</p>"),
            ("ab", "a b"),
            ("", "<p>"),
            ("  ", "\t"),
            ("<p>", "<p>"),
            (None, "<p>"),
        ],
    )
    def test_not_formatting(self, line1: str | None, line2: str | None) -> None:
        assert not formatting_only(line1, line2)
