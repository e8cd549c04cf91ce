"""Tree subpackage: the navigable mirror of a JSON document.

Re-exports the public API for the tree module:
- TreeNode: dataclass representing one addressable value
- NodeKind: StrEnum of the three node kinds (OBJECT, ARRAY, LEAF)
- TreeBuilder: converts any valid JSON value into a TreeNode tree
- PathSegment / SegmentKind: parsed address segments
"""

from jq_view.tree.builder import TreeBuilder, find_node, find_parent
from jq_view.tree.nodes import NodeKind, TreeNode
from jq_view.tree.paths import ROOT, PathSegment, SegmentKind

__all__ = [
    "ROOT",
    "NodeKind",
    "PathSegment",
    "SegmentKind",
    "TreeBuilder",
    "TreeNode",
    "find_node",
    "find_parent",
]
