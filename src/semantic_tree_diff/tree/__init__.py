"""Tree subpackage for the unified document node model.

Re-exports the public API for the tree module:
- TreeNode: dataclass representing a node of any supported format
- NodeKind: StrEnum of the four node variants (element, text, comment, PI)
- Namespace: prefix/URI binding of an element
- NodeSignature: structural fingerprint used for match candidacy
- TreeBuilder: converts parsed JSON/YAML values, and builds markup nodes
- serialize: renders a tree as one-node-per-line text
"""

from semantic_tree_diff.tree.builder import TreeBuilder
from semantic_tree_diff.tree.nodes import Namespace, NodeKind, TreeNode
from semantic_tree_diff.tree.serializer import serialize
from semantic_tree_diff.tree.signature import NodeSignature

__all__ = [
    "Namespace",
    "NodeKind",
    "NodeSignature",
    "TreeBuilder",
    "TreeNode",
    "serialize",
]
