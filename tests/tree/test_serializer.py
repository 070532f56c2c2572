"""Tests for the one-node-per-line serializer."""

from __future__ import annotations

from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.serializer import serialize

E = TreeBuilder.element
T = TreeBuilder.text


class TestMarkup:
    def test_nested_elements(self) -> None:
        root = E(
            "doc",
            {"id": "1"},
            [E("p", children=[T("hello")]), TreeBuilder.comment("note"), E("br")],
        )
        assert serialize(root).split("\n") == [
            '<doc id="1">',
            "  <p>",
            "    hello",
            "  </p>",
            "  <!--note-->",
            "  <br/>",
            "</doc>",
        ]

    def test_processing_instruction(self) -> None:
        root = E("r", children=[TreeBuilder.processing_instruction("pi", "a=1")])
        assert serialize(root).split("\n")[1] == "  <?pi a=1?>"

    def test_newlines_in_text_are_escaped(self) -> None:
        root = E("r", children=[T("a\nb")])
        assert serialize(root).split("\n")[1] == "  a\\nb"

    def test_include_filters_nodes(self) -> None:
        root = E("r", children=[T("\n  "), E("p")])
        text = serialize(root, "xml", include=lambda n: not n.is_blank_text)
        assert text == "<r>\n  <p/>\n</r>"

    def test_quotes_in_attributes_are_escaped(self) -> None:
        assert serialize(E("a", {"t": 'x"y'})) == '<a t="x&quot;y"/>'


class TestData:
    def test_json(self) -> None:
        root = TreeBuilder().build({"name": "Ada", "tags": ["x"], "e": {}})
        assert serialize(root, "json").split("\n") == [
            "{",
            '  "name": "Ada"',
            '  "tags": [',
            '    "x"',
            "  ]",
            '  "e": {}',
            "}",
        ]

    def test_yaml(self) -> None:
        root = TreeBuilder().build({"name": "Ada", "tags": ["x"]}, "yaml")
        assert serialize(root, "yaml").split("\n") == [
            'name: "Ada"',
            "tags:",
            '  - "x"',
        ]

    def test_json_scalar_root(self) -> None:
        assert serialize(TreeBuilder().build(3), "json") == "3"
