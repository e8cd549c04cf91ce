"""TreeBuilder: converts any valid JSON value into a navigable TreeNode tree.

Objects produce one child per key, in key order, at ``parent.key``.
Arrays whose first element is an object produce one child per key of that
first element at ``parent[].key``; those children are the array's per-item
schema, so an array node never carries more than one generation of
children however long the array is. Every other array (empty, scalars,
nulls, nested arrays) is a plain list node without children.

The root has address ``$``, key ``"root"`` and starts expanded; all other
nodes start collapsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jq_view.tree.nodes import NodeKind, TreeNode
from jq_view.tree.paths import ROOT, child_address

__all__ = ["JsonValue", "TreeBuilder", "find_node", "find_parent"]

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None

ROOT_KEY = "root"


@dataclass
class TreeBuilder:
    """Converts any valid JSON value into a TreeNode tree.

    Scalars of every JSON type become LEAF nodes that keep the original
    typed value, so True and 1 stay distinguishable for display.

    Example::
        builder = TreeBuilder()
        tree = builder.build({"items": [{"x": 1, "y": 2}]})
        # tree: OBJECT($) -> ARRAY($.items) -> [LEAF($.items[].x), LEAF($.items[].y)]
    """

    def build(self, value: JsonValue) -> TreeNode:
        """Build the tree for a whole document.

        Args:
            value: Any valid JSON value (dict, list, str, int, float, bool, None).

        Returns:
            The root TreeNode, expanded and unselected.

        Raises:
            TypeError: If value (or anything nested in it) is not a JSON type.
        """
        root = self._build(value, ROOT_KEY, ROOT)
        root.expanded = True
        return root

    def _build(self, value: Any, key: str, address: str) -> TreeNode:
        if isinstance(value, dict):
            return self._build_object(value, key, address)

        if isinstance(value, list):
            return self._build_array(value, key, address)

        if value is None or isinstance(value, (bool, str, int, float)):
            return TreeNode(key=key, address=address, kind=NodeKind.LEAF, value=value)

        msg = f"Unsupported JSON value type: {type(value)!r}"
        raise TypeError(msg)

    def _build_object(self, obj: dict[str, Any], key: str, address: str) -> TreeNode:
        node = TreeNode(key=key, address=address, kind=NodeKind.OBJECT)
        node.children = self._build_fields(obj, address, parent_is_array=False)
        return node

    def _build_array(self, arr: list[Any], key: str, address: str) -> TreeNode:
        node = TreeNode(
            key=key, address=address, kind=NodeKind.ARRAY, array_arity=len(arr)
        )
        if arr and isinstance(arr[0], dict):
            node.children = self._build_fields(arr[0], address, parent_is_array=True)
        return node

    def _build_fields(
        self, obj: dict[str, Any], address: str, parent_is_array: bool
    ) -> list[TreeNode]:
        return [
            self._build(val, k, child_address(address, k, parent_is_array))
            for k, val in obj.items()
        ]


def find_node(root: TreeNode, address: str) -> TreeNode | None:
    """Return the node at *address*, or None if no node lives there."""
    for node in root.walk():
        if node.address == address:
            return node
    return None


def find_parent(root: TreeNode, address: str) -> tuple[TreeNode | None, int]:
    """Return ``(parent, index)`` for the node at *address*.

    ``(None, -1)`` is returned for the root and for unknown addresses.
    """
    for node in root.walk():
        for index, child in enumerate(node.children):
            if child.address == address:
                return node, index
    return None, -1
