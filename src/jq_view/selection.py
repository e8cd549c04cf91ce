"""Selection tracker: derives the ordered selection from the current tree.

The selection is never stored. It is recomputed after every edit by a
depth-first, pre-order walk over the current (post-reorder, post-move)
child order, and that walk's counter is the only authority on output field
order.
"""

from __future__ import annotations

from dataclasses import dataclass

from jq_view.mutations import MoveLedger
from jq_view.tree.builder import find_node
from jq_view.tree.nodes import TreeNode
from jq_view.tree.paths import format_address, parse_address

__all__ = ["SelectionEntry", "collect_selected", "toggle_selected"]


@dataclass(frozen=True, slots=True)
class SelectionEntry:
    """One selected field, in output order.

    Attributes:
        display_address: Current address in the edited tree; defines where
                         the field appears in the output.
        source_address:  Address in the original document; defines where the
                         value is read from.
        field_name:      Key of the selected node, used as the output key.
        order:           Position in the pre-order walk.
        array_sources:   Original-document address of every array on the
                         display path, one per ``[]`` marker, outermost
                         first. Empty means each array reads from where it
                         is displayed.
    """

    display_address: str
    source_address: str
    field_name: str
    order: int
    array_sources: tuple[str, ...] = ()

    @property
    def is_relocated(self) -> bool:
        return self.source_address != self.display_address


def collect_selected(
    root: TreeNode, ledger: MoveLedger | None = None
) -> list[SelectionEntry]:
    """Collect selected nodes in display order.

    Args:
        root:   The tree to walk.
        ledger: Move provenance used to resolve source addresses. Without a
                ledger every source address equals its display address.

    Returns:
        One SelectionEntry per selected selectable node, ordered by walk
        position.
    """
    entries: list[SelectionEntry] = []
    for node in root.walk():
        if not (node.selected and node.is_selectable):
            continue
        source = _resolve(node.address, ledger)
        entries.append(
            SelectionEntry(
                display_address=node.address,
                source_address=source,
                field_name=node.key,
                order=len(entries),
                array_sources=_array_sources(node.address, ledger),
            )
        )
    return entries


def _resolve(address: str, ledger: MoveLedger | None) -> str:
    return ledger.resolve(address) if ledger is not None else address


def _array_sources(address: str, ledger: MoveLedger | None) -> tuple[str, ...]:
    segments = parse_address(address)
    return tuple(
        _resolve(format_address(segments[:i]), ledger)
        for i, segment in enumerate(segments)
        if segment.is_iterate
    )


def toggle_selected(root: TreeNode, address: str) -> bool:
    """Flip the selection of the node at *address*.

    Returns:
        True if a selectable node was toggled, False otherwise.
    """
    node = find_node(root, address)
    if node is None or not node.is_selectable:
        return False
    node.selected = not node.selected
    return True
