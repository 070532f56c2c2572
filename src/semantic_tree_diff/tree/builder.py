"""TreeBuilder: converts parsed JSON/YAML values into the unified node shape.

Markup documents reach the core through a caller's own parser adapter, which
uses the ``element`` / ``text`` / ``comment`` / ``processing_instruction``
factories below.  JSON and YAML documents can be handed over already parsed
(``json.load`` / ``yaml.safe_load`` output) and are converted by ``build``.

Every JSON/YAML ``{path, value}`` pair becomes one synthetic ELEMENT node:

- label: the object key, ``"item"`` for array entries, ``"$"`` for the root
- value: the JSON encoding of a scalar (``'"x"'``, ``"1"``, ``"true"``,
  ``"null"``), or the container marker ``"{}"`` / ``"[]"``
- children: the members of a container, in document order

Encoding scalars as JSON text keeps ``"5"`` (string) and ``5`` (number)
distinct, so a type change surfaces as a ``text_content`` difference.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from semantic_tree_diff.tree.nodes import Namespace, NodeKind, TreeNode

__all__ = [
    "ARRAY_ITEM_LABEL",
    "ARRAY_MARKER",
    "OBJECT_MARKER",
    "ROOT_LABEL",
    "TreeBuilder",
    "is_container",
]

ROOT_LABEL = "$"
ARRAY_ITEM_LABEL = "item"
OBJECT_MARKER = "{}"
ARRAY_MARKER = "[]"


@dataclass
class TreeBuilder:
    """Builds unified trees from parsed data values or factory calls.

    The dispatch order in ``_encode_scalar`` matters: bool MUST be checked
    before int because ``isinstance(True, int)`` is True.

    Example::

        builder = TreeBuilder()
        tree = builder.build({"user": {"name": "Ada"}}, "json")
        # $ {} -> user {} -> name "Ada"
    """

    def build(
        self, value: Any, fmt: str = "json", label: str = ROOT_LABEL
    ) -> TreeNode:
        """Convert a parsed JSON/YAML value into a TreeNode tree.

        Args:
            value: dict, list, str, int, float, bool or None.  Nested values
                   follow the same rules.
            fmt:   ``"json"`` or ``"yaml"``.  Both formats share one encoding.
            label: Label of the root node.  Defaults to ``"$"``.

        Returns:
            The root of the synthetic tree.

        Raises:
            ValueError: If ``fmt`` is a markup format.
            TypeError: If ``value`` (or anything nested in it) is not a
                JSON-compatible type.
        """
        if fmt not in ("json", "yaml"):
            msg = f"TreeBuilder.build only converts json/yaml data, got {fmt!r}"
            raise ValueError(msg)
        return self._build_member(label, value)

    # ------------------------------------------------------------------
    # Markup factories
    # ------------------------------------------------------------------

    @staticmethod
    def element(
        label: str,
        attributes: Mapping[str, str] | None = None,
        children: Iterable[TreeNode] = (),
        namespace: Namespace | None = None,
        source_line: int | None = None,
    ) -> TreeNode:
        """Create an ELEMENT node; ``children`` get their parent link set."""
        node = TreeNode(
            kind=NodeKind.ELEMENT,
            label=label,
            attributes=dict(attributes or {}),
            namespace=namespace,
            source_line=source_line,
        )
        for child in children:
            node.append(child)
        return node

    @staticmethod
    def text(value: str, source_line: int | None = None) -> TreeNode:
        node = TreeNode.of_kind(NodeKind.TEXT, value)
        node.source_line = source_line
        return node

    @staticmethod
    def comment(value: str, source_line: int | None = None) -> TreeNode:
        node = TreeNode.of_kind(NodeKind.COMMENT, value)
        node.source_line = source_line
        return node

    @staticmethod
    def processing_instruction(
        target: str, data: str = "", source_line: int | None = None
    ) -> TreeNode:
        """Create a PROCESSING_INSTRUCTION node labelled by its target."""
        return TreeNode(
            kind=NodeKind.PROCESSING_INSTRUCTION,
            label=target,
            value=data,
            source_line=source_line,
        )

    # ------------------------------------------------------------------
    # Data conversion
    # ------------------------------------------------------------------

    def _build_member(self, label: str, value: Any) -> TreeNode:
        if isinstance(value, dict):
            node = TreeNode(kind=NodeKind.ELEMENT, label=label, value=OBJECT_MARKER)
            for key, child in value.items():
                node.append(self._build_member(str(key), child))
            return node

        if isinstance(value, (list, tuple)):
            node = TreeNode(kind=NodeKind.ELEMENT, label=label, value=ARRAY_MARKER)
            for item in value:
                node.append(self._build_member(ARRAY_ITEM_LABEL, item))
            return node

        return TreeNode(
            kind=NodeKind.ELEMENT, label=label, value=self._encode_scalar(value)
        )

    @staticmethod
    def _encode_scalar(value: Any) -> str:
        # CRITICAL: bool before int, bool subclasses int
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return "null"
        if isinstance(value, (str, int, float)):
            return json.dumps(value, ensure_ascii=False)
        msg = f"Unsupported data value type: {type(value)!r}"
        raise TypeError(msg)


def is_container(node: TreeNode) -> bool:
    """True for synthetic JSON/YAML object or array nodes."""
    return node.is_element and node.value in (OBJECT_MARKER, ARRAY_MARKER)
