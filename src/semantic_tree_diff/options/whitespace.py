"""Whitespace sensitivity: is the whitespace around a text node significant?

Decision for a text node, highest priority first:

1. ``xml:space`` on the parent or the nearest ancestor carrying it, only
   when ``respect_xml_space`` is enabled: ``preserve`` means sensitive,
   ``default`` means not sensitive;
2. the caller whitelist (``whitespace_sensitive_elements``);
3. the caller blacklist (``whitespace_insensitive_elements``), which
   overrides the built-in defaults;
4. the format defaults: ``pre``, ``code``, ``textarea``, ``script`` and
   ``style`` for HTML, nothing for XML/JSON/YAML.

Steps 2-4 apply to the element-level question and a text node is sensitive
when any enclosing element is.  Whitespace-only text under a non-sensitive
element is collapsible: it takes part in neither matching nor diffing.
"""

from __future__ import annotations

from types import MappingProxyType

from semantic_tree_diff.options.dimensions import DocumentFormat
from semantic_tree_diff.options.match_options import ResolvedMatchOptions
from semantic_tree_diff.tree.nodes import TreeNode

__all__ = [
    "DEFAULT_SENSITIVE_ELEMENTS",
    "XML_SPACE_ATTRIBUTE",
    "WhitespaceSensitivity",
]

XML_SPACE_ATTRIBUTE = "xml:space"

DEFAULT_SENSITIVE_ELEMENTS: MappingProxyType[DocumentFormat, frozenset[str]] = (
    MappingProxyType(
        {
            DocumentFormat.XML: frozenset(),
            DocumentFormat.HTML: frozenset(
                {"pre", "code", "textarea", "script", "style"}
            ),
            DocumentFormat.JSON: frozenset(),
            DocumentFormat.YAML: frozenset(),
        }
    )
)


def _local_name(label: str) -> str:
    return label.rsplit(":", 1)[-1]


class WhitespaceSensitivity:
    """Answers whitespace questions for one set of resolved options.

    Args:
        options: Resolved options carrying the format, the caller lists and
            the ``respect_xml_space`` switch.
    """

    def __init__(self, options: ResolvedMatchOptions) -> None:
        self._options = options
        self._whitelist = options.whitespace_sensitive_elements
        self._blacklist = options.whitespace_insensitive_elements
        self._defaults = DEFAULT_SENSITIVE_ELEMENTS[options.format]

    def element_sensitive(self, name: str) -> bool:
        """Element-level answer, without ``xml:space``.

        Both the qualified name and the local name are checked, so
        ``h:pre`` follows the rules for ``pre``.
        """
        names = {name, _local_name(name)}
        if names & self._whitelist:
            return True
        if names & self._blacklist:
            return False
        return bool(names & self._defaults)

    def xml_space(self, node: TreeNode) -> str | None:
        """Value of ``xml:space`` on ``node`` or its nearest ancestor."""
        current: TreeNode | None = node
        while current is not None:
            value = current.attributes.get(XML_SPACE_ATTRIBUTE)
            if value is not None:
                return value
            current = current.parent
        return None

    def is_sensitive(self, node: TreeNode) -> bool:
        """Whether whitespace in or around ``node`` is significant.

        For a text node the decision is taken at its parent; for an element
        it is taken at the element itself.  A detached text node is never
        sensitive.
        """
        anchor = node if node.is_element else node.parent
        if anchor is None:
            return False

        if self._options.respect_xml_space:
            space = self.xml_space(anchor)
            if space == "preserve":
                return True
            if space == "default":
                return False

        current: TreeNode | None = anchor
        while current is not None:
            if current.is_element and self.element_sensitive(current.label):
                return True
            current = current.parent
        return False

    def is_significant(self, node: TreeNode) -> bool:
        """False only for collapsible whitespace-only text nodes."""
        if not node.is_blank_text:
            return True
        return self.is_sensitive(node)
