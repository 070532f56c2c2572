"""Render a unified tree as one-node-per-line indented text.

The line-level report diffs two of these renderings, so the layout is
chosen for stable line alignment rather than round-tripping: every node
lands on its own line, element open/close tags sit on separate lines, and
newlines inside text values are shown as a literal ``\\n``.

Markup (xml/html)::

    <doc id="1">
      <p>
        hello
      </p>
      <!--note-->
    </doc>

JSON::

    {
      "name": "Ada"
      "tags": [
        "x"
      ]
    }

YAML::

    name: "Ada"
    tags:
      - "x"
"""

from __future__ import annotations

from semantic_tree_diff.tree.builder import ARRAY_ITEM_LABEL, ARRAY_MARKER, is_container
from semantic_tree_diff.tree.nodes import NodeKind, TreeNode
from semantic_tree_diff.tree.signature import NodeFilter

__all__ = ["serialize"]

_INDENT = "  "


def serialize(
    root: TreeNode, fmt: str = "xml", include: NodeFilter | None = None
) -> str:
    """Serialize ``root`` to indented text, one node per line.

    Args:
        root:    Tree to render.
        fmt:     ``"xml"``, ``"html"``, ``"json"`` or ``"yaml"``.
        include: Optional predicate; rejected nodes are not rendered.

    Returns:
        The rendering, lines joined with ``"\\n"`` (no trailing newline).
    """
    lines: list[str] = []
    if fmt == "json":
        _json_lines(root, 0, lines, include, in_array=False, is_root=True)
    elif fmt == "yaml":
        _yaml_root(root, lines, include)
    else:
        _markup_lines(root, 0, lines, include)
    return "\n".join(lines)


def _visible(children: list[TreeNode], include: NodeFilter | None) -> list[TreeNode]:
    if include is None:
        return list(children)
    return [c for c in children if include(c)]


def _one_line(value: str | None) -> str:
    return (value or "").replace("\r", "\\r").replace("\n", "\\n")


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


def _open_tag(node: TreeNode) -> str:
    attrs = "".join(
        f' {name}="{value.replace(chr(34), "&quot;")}"'
        for name, value in node.attributes.items()
    )
    return f"<{node.label}{attrs}"


def _markup_lines(
    node: TreeNode, depth: int, lines: list[str], include: NodeFilter | None
) -> None:
    pad = _INDENT * depth
    if node.kind == NodeKind.TEXT:
        lines.append(pad + _one_line(node.value))
        return
    if node.kind == NodeKind.COMMENT:
        lines.append(f"{pad}<!--{_one_line(node.value)}-->")
        return
    if node.kind == NodeKind.PROCESSING_INSTRUCTION:
        data = f" {_one_line(node.value)}" if node.value else ""
        lines.append(f"{pad}<?{node.label}{data}?>")
        return

    children = _visible(node.children, include)
    if not children:
        lines.append(f"{pad}{_open_tag(node)}/>")
        return
    lines.append(f"{pad}{_open_tag(node)}>")
    for child in children:
        _markup_lines(child, depth + 1, lines, include)
    lines.append(f"{pad}</{node.label}>")


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _json_lines(
    node: TreeNode,
    depth: int,
    lines: list[str],
    include: NodeFilter | None,
    *,
    in_array: bool,
    is_root: bool = False,
) -> None:
    pad = _INDENT * depth
    prefix = "" if (is_root or in_array) else f'"{node.label}": '

    if not is_container(node):
        lines.append(f"{pad}{prefix}{_one_line(node.value)}")
        return

    is_array = node.value == ARRAY_MARKER
    open_, close = ("[", "]") if is_array else ("{", "}")
    children = _visible(node.children, include)
    if not children:
        lines.append(f"{pad}{prefix}{open_}{close}")
        return
    lines.append(f"{pad}{prefix}{open_}")
    for child in children:
        _json_lines(child, depth + 1, lines, include, in_array=is_array)
    lines.append(f"{pad}{close}")


# ---------------------------------------------------------------------------
# YAML
# ---------------------------------------------------------------------------


def _yaml_root(root: TreeNode, lines: list[str], include: NodeFilter | None) -> None:
    if not is_container(root):
        lines.append(_one_line(root.value))
        return
    for child in _visible(root.children, include):
        _yaml_lines(child, 0, lines, include)


def _yaml_lines(
    node: TreeNode, depth: int, lines: list[str], include: NodeFilter | None
) -> None:
    pad = _INDENT * depth
    if node.kind == NodeKind.COMMENT:
        lines.append(f"{pad}#{_one_line(node.value)}")
        return

    prefix = "- " if node.label == ARRAY_ITEM_LABEL else f"{node.label}: "
    if not is_container(node):
        lines.append(f"{pad}{prefix}{_one_line(node.value)}")
        return

    children = _visible(node.children, include)
    if not children:
        lines.append(f"{pad}{prefix}{node.value}")
        return
    lines.append(f"{pad}{prefix.rstrip()}")
    for child in children:
        _yaml_lines(child, depth + 1, lines, include)
