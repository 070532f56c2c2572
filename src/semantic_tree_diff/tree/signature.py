"""NodeSignature: structural fingerprint used to find match candidates cheaply.

Two forms are derived from a node:

- ``loose``      : (kind, label, namespace URI).  Drives hash-phase bucketing.
- ``structural`` : loose + attribute *names* + significant child count.  Used
                   for subtree-overlap scoring in the similarity phase.

Signatures never include attribute values or text: a node whose only change
is a value must still land in the same bucket as its counterpart, so the
change is reported as a modification and not as a delete + insert.

``subtree_fingerprints`` is the exact counterpart: it hashes everything,
values included, and is only used to anchor identical subtrees.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from semantic_tree_diff.tree.nodes import NodeKind, TreeNode

__all__ = ["NodeFilter", "NodeSignature", "subtree_fingerprints"]

# Predicate deciding whether a node takes part in matching and diffing.
NodeFilter = Callable[[TreeNode], bool]


def _keep_all(node: TreeNode) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class NodeSignature:
    """Frozen structural fingerprint of a single node.

    Attributes:
        kind:            Node variant.
        label:           Node label.
        namespace_uri:   URI of the element's namespace, if any.
        attribute_names: Sorted non-declaration attribute names, or None in
                         the loose form.
        child_count:     Number of significant children, or None in the loose
                         form.
    """

    kind: NodeKind
    label: str
    namespace_uri: str | None = None
    attribute_names: tuple[str, ...] | None = None
    child_count: int | None = None

    @classmethod
    def loose(cls, node: TreeNode) -> NodeSignature:
        """Label-level signature used for hash-phase bucketing."""
        uri = node.namespace.uri if node.namespace is not None else None
        return cls(kind=node.kind, label=node.label, namespace_uri=uri)

    @classmethod
    def structural(
        cls, node: TreeNode, include: NodeFilter | None = None
    ) -> NodeSignature:
        """Shape-level signature: loose form plus attribute names and arity.

        Args:
            node:    Node to fingerprint.
            include: Optional predicate; children it rejects are not counted.
        """
        keep = include or _keep_all
        uri = node.namespace.uri if node.namespace is not None else None
        return cls(
            kind=node.kind,
            label=node.label,
            namespace_uri=uri,
            attribute_names=tuple(sorted(node.plain_attributes())),
            child_count=sum(1 for c in node.children if keep(c)),
        )

    def relax(self) -> NodeSignature:
        """Drop the structural parts, returning the loose form."""
        return NodeSignature(self.kind, self.label, self.namespace_uri)


def subtree_fingerprints(
    root: TreeNode, include: NodeFilter | None = None
) -> dict[TreeNode, int]:
    """Compute an exact content hash for every node of a tree.

    Two nodes share a fingerprint when their whole subtrees (labels, values,
    attributes in order, namespaces and significant children) are identical.
    Computed bottom-up in one pass, so the total cost is linear in tree size.

    Args:
        root:    Tree root.
        include: Optional predicate; rejected nodes (and their subtrees) do
                 not contribute to their parent's fingerprint.

    Returns:
        Mapping from node to its fingerprint, for every included node.
    """
    keep = include or _keep_all
    result: dict[TreeNode, int] = {}
    # Post-order without recursion: reverse of a pre-order visits children
    # before their parent.
    order = [n for n in root.iter_subtree() if keep(n)]
    for node in reversed(order):
        uri = node.namespace.uri if node.namespace is not None else None
        children = tuple(result[c] for c in node.children if c in result)
        result[node] = hash(
            (
                node.kind,
                node.label,
                node.value,
                uri,
                tuple(node.attributes.items()),
                children,
            )
        )
    return result
