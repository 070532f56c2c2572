"""TreeNode dataclass and NodeKind StrEnum for the unified document tree.

Every supported format (XML, HTML, JSON, YAML) is converted once, by an
adapter, into this single closed node shape.  The comparison core never
branches on which parser produced a tree.

Ownership runs strictly downward: a node owns its ``children`` list, while
the upward link is a ``weakref`` to the parent.  Upward traversal therefore
cannot keep a detached subtree alive and cannot form an ownership cycle.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto

__all__ = [
    "XML_NAMESPACE",
    "Namespace",
    "NodeKind",
    "TreeNode",
    "is_namespace_declaration",
]

# Namespace URI bound to the reserved ``xml`` prefix.
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def is_namespace_declaration(name: str) -> bool:
    """Return True for ``xmlns`` and ``xmlns:*`` attribute names."""
    return name == "xmlns" or name.startswith("xmlns:")


class NodeKind(StrEnum):
    """The closed set of node variants in a unified document tree.

    - ELEMENT                -> "element"                : markup element, or a
                                                          synthetic JSON/YAML member
    - TEXT                   -> "text"                   : character data
    - COMMENT                -> "comment"                : ``<!-- ... -->`` or ``# ...``
    - PROCESSING_INSTRUCTION -> "processing_instruction" : ``<?target data?>``
    """

    ELEMENT = auto()
    TEXT = auto()
    COMMENT = auto()
    PROCESSING_INSTRUCTION = auto()


# Labels carried by the non-element variants.
_KIND_LABELS: dict[NodeKind, str] = {
    NodeKind.TEXT: "#text",
    NodeKind.COMMENT: "#comment",
}


@dataclass(frozen=True, slots=True)
class Namespace:
    """Namespace binding of an element: optional prefix plus URI."""

    prefix: str | None
    uri: str


@dataclass(eq=False, slots=True, weakref_slot=True)
class TreeNode:
    """A node in the unified document tree.

    Nodes compare and hash by identity, so they can be used directly as keys
    of a ``Matching``.

    Attributes:
        kind:        Which variant this node is (see NodeKind).
        label:       Element name (qualified, e.g. ``"ns:item"``), JSON/YAML
                     member key, PI target, or ``"#text"`` / ``"#comment"``.
        value:       Text of TEXT/COMMENT/PI nodes; scalar value (as text) of
                     synthetic JSON/YAML members; None for markup elements.
        attributes:  Ordered attribute map.  Insertion order is document order
                     and is significant for ``attribute_order`` diffs.
                     Namespace declarations (``xmlns``/``xmlns:*``) live here.
        namespace:   Namespace binding of an element, if any.
        children:    Ordered child nodes.  Use ``append`` so the weak parent
                     link is set.
        source_line: 1-based line in the source document, when the adapter
                     knows it.
    """

    kind: NodeKind
    label: str
    value: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    namespace: Namespace | None = None
    children: list[TreeNode] = field(default_factory=list)
    source_line: int | None = None
    _parent_ref: weakref.ReferenceType[TreeNode] | None = field(
        default=None, init=False, repr=False
    )

    def __post_init__(self) -> None:
        for child in self.children:
            child._parent_ref = weakref.ref(self)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def of_kind(cls, kind: NodeKind, value: str | None = None) -> TreeNode:
        """Build a TEXT or COMMENT node carrying its conventional label."""
        return cls(kind=kind, label=_KIND_LABELS[kind], value=value)

    def append(self, child: TreeNode) -> TreeNode:
        """Append ``child`` and point its weak parent link at this node.

        Returns:
            The appended child, for chaining in adapters.
        """
        child._parent_ref = weakref.ref(self)
        self.children.append(child)
        return child

    # ------------------------------------------------------------------
    # Variant predicates
    # ------------------------------------------------------------------

    @property
    def is_element(self) -> bool:
        return self.kind == NodeKind.ELEMENT

    @property
    def is_text(self) -> bool:
        return self.kind == NodeKind.TEXT

    @property
    def is_comment(self) -> bool:
        return self.kind == NodeKind.COMMENT

    @property
    def is_processing_instruction(self) -> bool:
        return self.kind == NodeKind.PROCESSING_INSTRUCTION

    @property
    def is_blank_text(self) -> bool:
        """True for TEXT nodes whose value is empty or whitespace-only."""
        return self.is_text and not (self.value or "").strip()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def parent(self) -> TreeNode | None:
        """The parent node, or None for a root (or a detached node)."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def ancestors(self) -> Iterator[TreeNode]:
        """Yield ancestors from the parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def iter_subtree(self) -> Iterator[TreeNode]:
        """Yield this node and every descendant in document (pre-)order."""
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def depth(self) -> int:
        """Number of ancestors (0 for a root)."""
        return sum(1 for _ in self.ancestors())

    @property
    def position(self) -> int:
        """Index of this node among its parent's children (0 for a root)."""
        parent = self.parent
        if parent is None:
            return 0
        for idx, sibling in enumerate(parent.children):
            if sibling is self:
                return idx
        return 0

    @property
    def path(self) -> str:
        """XPath-like location, e.g. ``/doc/p[2]/#text``.

        A positional predicate is only added when the parent holds more than
        one child with the same label.
        """
        segments: list[str] = []
        node: TreeNode | None = self
        while node is not None:
            parent = node.parent
            segment = node.label
            if parent is not None:
                same = [c for c in parent.children if c.label == node.label]
                if len(same) > 1:
                    idx = next(i for i, c in enumerate(same) if c is node)
                    segment = f"{node.label}[{idx + 1}]"
            segments.append(segment)
            node = parent
        return "/" + "/".join(reversed(segments))

    # ------------------------------------------------------------------
    # Content accessors
    # ------------------------------------------------------------------

    def text_content(self) -> str:
        """Concatenated text of this node's TEXT descendants (or own value)."""
        if not self.is_element:
            return self.value or ""
        if self.value is not None:
            return self.value
        return "".join(
            node.value or "" for node in self.iter_subtree() if node.is_text
        )

    def attribute(self, name: str) -> str | None:
        """Return the value of attribute ``name``, or None when absent."""
        return self.attributes.get(name)

    def plain_attributes(self) -> dict[str, str]:
        """Attributes excluding namespace declarations, in document order."""
        return {
            k: v for k, v in self.attributes.items() if not is_namespace_declaration(k)
        }

    def namespace_declarations(self) -> dict[str, str]:
        """``xmlns``/``xmlns:*`` declarations on this element, in document order."""
        return {
            k: v for k, v in self.attributes.items() if is_namespace_declaration(k)
        }
