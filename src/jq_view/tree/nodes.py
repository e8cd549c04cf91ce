"""TreeNode dataclass and NodeKind StrEnum for the navigable JSON mirror.

One TreeNode exists per addressable value: every object field, and for
arrays of objects the fields of the first element (the per-item schema).
Nodes are mutated in place by the mutation engine and discarded wholesale
when a new document is loaded.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

__all__ = ["NodeKind", "TreeNode"]


class NodeKind(StrEnum):
    """The three structural kinds of tree node.

    - OBJECT -> "object" : JSON object {}
    - ARRAY  -> "array"  : JSON array []
    - LEAF   -> "leaf"   : string, number, bool or null
    """

    OBJECT = auto()
    ARRAY = auto()
    LEAF = auto()


@dataclass(slots=True, eq=False)
class TreeNode:
    """A node in the navigable tree.

    Attributes:
        key:         Field name this value is reached under; "root" for the
                     document root.
        address:     Canonical address (see ``jq_view.tree.paths``).
        kind:        Which kind of node this is (see NodeKind).
        children:    Ordered child nodes. For arrays these describe the
                     fields of the first element, not the elements.
        expanded:    Display only; irrelevant to synthesis.
        selected:    Meaningful only for selectable nodes.
        array_arity: Element count of the source array; 0 for non-arrays.
        value:       Original scalar value for leaves; None otherwise.
    """

    key: str
    address: str
    kind: NodeKind
    children: list[TreeNode] = field(default_factory=list)
    expanded: bool = False
    selected: bool = False
    array_arity: int = 0
    value: Any = None

    @property
    def is_container(self) -> bool:
        return self.kind is not NodeKind.LEAF

    @property
    def is_array(self) -> bool:
        return self.kind is NodeKind.ARRAY

    @property
    def is_selectable(self) -> bool:
        """Leaves, and arrays without a per-item schema (plain lists)."""
        if self.kind is NodeKind.LEAF:
            return True
        return self.kind is NodeKind.ARRAY and not self.children

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and its descendants, depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()
