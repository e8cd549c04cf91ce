"""Expansion helpers for the tree view.

These only touch ``TreeNode.expanded``; nothing here affects the
synthesized expression.
"""

from __future__ import annotations

from jq_view.tree.nodes import TreeNode
from jq_view.tree.paths import ROOT

__all__ = ["collapse_all", "collapse_unselected", "expand_all", "has_selection"]


def expand_all(root: TreeNode) -> None:
    for node in root.walk():
        if node.children:
            node.expanded = True


def collapse_all(root: TreeNode) -> None:
    """Collapse every container except the root."""
    for node in root.walk():
        if node.children:
            node.expanded = node.address == ROOT


def has_selection(node: TreeNode) -> bool:
    """Return True if *node* or any descendant is a selected selectable node."""
    return any(n.selected and n.is_selectable for n in node.walk())


def collapse_unselected(root: TreeNode) -> None:
    """Keep branches leading to a selection open and collapse the rest."""
    if not root.children:
        return
    if not has_selection(root):
        collapse_all(root)
        return
    root.expanded = True
    for child in root.children:
        if not child.children:
            continue
        if has_selection(child):
            collapse_unselected(child)
        else:
            collapse_all(child)
