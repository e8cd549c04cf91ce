"""Mutation engine: sibling reorder and move-into for the navigable tree.

Two operations change the tree after it is built:

- ``reorder`` moves a node before or after one of its siblings. Addresses
  encode the key chain, not sibling position, so only traversal order
  changes; that order is what drives output field order.
- ``move_into`` detaches a subtree and appends it to another container,
  rewriting every address in the subtree. The move is recorded in a
  ``MoveLedger`` so each moved field can still be read from where it lives
  in the original document.

The ledger is an explicit mapping from current display address to
``MoveRecord``; nodes carry no back-links. Resolution is always a single
hop: a re-moved node keeps its first original address, and records nested
inside a moved subtree are rebased along with it.

Precondition violations are not errors. Both operations return False and
leave the tree untouched.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterator
from dataclasses import dataclass

from jq_view.tree.builder import find_node, find_parent
from jq_view.tree.nodes import TreeNode
from jq_view.tree.paths import (
    child_address,
    format_address,
    is_prefix,
    parse_address,
    rebase,
)

__all__ = ["MoveLedger", "MoveRecord", "TreeEditor"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """Provenance of one moved subtree.

    Attributes:
        original_address:   Where the subtree lives in the original document.
                            Fixed at the first move.
        new_parent_address: Container the subtree currently lives in.
        key:                Field name under the new parent.
        into_array:         True when the new parent is an array node, so the
                            subtree sits behind its ``[]`` marker.
    """

    original_address: str
    new_parent_address: str
    key: str
    into_array: bool = False

    @property
    def address(self) -> str:
        """Current display address of the moved subtree."""
        return child_address(self.new_parent_address, self.key, self.into_array)


class MoveLedger:
    """Mapping of moved-subtree display addresses to their MoveRecords.

    Lives exactly as long as one tree; cleared when a new document is loaded.
    """

    def __init__(self) -> None:
        self._records: dict[str, MoveRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: object) -> bool:
        return address in self._records

    def __iter__(self) -> Iterator[MoveRecord]:
        return iter(self._records.values())

    @property
    def records(self) -> list[MoveRecord]:
        return list(self._records.values())

    def get(self, address: str) -> MoveRecord | None:
        return self._records.get(address)

    def clear(self) -> None:
        self._records.clear()

    def resolve(self, address: str) -> str:
        """Return the original-document address for a display address.

        The record with the longest address that is a segment prefix of
        *address* wins; the unmatched suffix is appended to its original
        address. Addresses no record covers resolve to themselves.
        """
        segments = parse_address(address)
        best: MoveRecord | None = None
        best_len = -1
        for record in self._records.values():
            head = parse_address(record.address)
            if len(head) > best_len and segments[: len(head)] == head:
                best, best_len = record, len(head)
        if best is None:
            return address
        return format_address(
            parse_address(best.original_address) + segments[best_len:]
        )

    def relocate(
        self,
        from_address: str,
        new_parent_address: str,
        key: str,
        into_array: bool,
    ) -> MoveRecord:
        """Record that the subtree at *from_address* moved under a new parent.

        Upserts the record for the subtree itself and rebases every record
        nested inside it, so all of them keep resolving in one hop.

        Returns:
            The record now stored for the moved subtree.
        """
        new_address = child_address(new_parent_address, key, into_array)
        existing = self._records.get(from_address)
        if existing is not None:
            moved = dataclasses.replace(
                existing,
                new_parent_address=new_parent_address,
                key=key,
                into_array=into_array,
            )
        else:
            moved = MoveRecord(
                original_address=self.resolve(from_address),
                new_parent_address=new_parent_address,
                key=key,
                into_array=into_array,
            )

        records: dict[str, MoveRecord] = {}
        for address, record in self._records.items():
            if address == from_address:
                continue
            if is_prefix(from_address, address):
                record = dataclasses.replace(
                    record,
                    new_parent_address=rebase(
                        record.new_parent_address, from_address, new_address
                    ),
                )
            records[record.address] = record
        records[moved.address] = moved
        self._records = records
        return moved


class TreeEditor:
    """Applies reorder and move-into operations to one tree in place.

    Args:
        root:   The tree to edit.
        ledger: Where move provenance is recorded. A fresh ledger is created
                when omitted.
    """

    def __init__(self, root: TreeNode, ledger: MoveLedger | None = None) -> None:
        self.root = root
        self.ledger = ledger if ledger is not None else MoveLedger()

    def reorder(self, from_address: str, to_address: str, insert_after: bool) -> bool:
        """Move a node immediately before or after one of its siblings.

        Returns:
            True if the order changed; False for a rejected no-op (same node,
            unknown address, or the two nodes are not siblings).
        """
        if from_address == to_address:
            logger.debug("reorder rejected: %s onto itself", from_address)
            return False

        parent, from_idx = find_parent(self.root, from_address)
        to_parent, to_idx = find_parent(self.root, to_address)
        if parent is None or parent is not to_parent:
            logger.debug(
                "reorder rejected: %s and %s are not siblings", from_address, to_address
            )
            return False

        new_idx = to_idx
        if from_idx < to_idx:
            new_idx -= 1
        if insert_after:
            new_idx += 1

        moved = parent.children.pop(from_idx)
        parent.children.insert(new_idx, moved)
        return True

    def move_into(self, from_address: str, target_address: str) -> bool:
        """Move the subtree at *from_address* into the container at *target_address*.

        The subtree is appended to the target's children under its own key,
        every address in it is rewritten, the move is recorded in the ledger,
        and the target is expanded. A selected plain-list target is
        deselected, since it now has a per-item schema instead of a value.

        Returns:
            True if the subtree moved; False for a rejected no-op.
        """
        source = find_node(self.root, from_address)
        target = find_node(self.root, target_address)
        if source is None or target is None:
            logger.debug(
                "move rejected: unknown address %s or %s", from_address, target_address
            )
            return False

        if is_prefix(from_address, target_address):
            logger.debug(
                "move rejected: %s is %s or one of its descendants",
                target_address,
                from_address,
            )
            return False

        parent, index = find_parent(self.root, from_address)
        if parent is None:
            logger.debug("move rejected: the root cannot be moved")
            return False

        if not target.is_container:
            logger.debug("move rejected: %s is not a container", target_address)
            return False

        if any(c.key == source.key and c is not source for c in target.children):
            logger.debug(
                "move rejected: %s already has a field named %r",
                target_address,
                source.key,
            )
            return False

        parent.children.pop(index)
        record = self.ledger.relocate(
            from_address, target.address, source.key, target.is_array
        )
        _readdress(source, record.address)
        target.children.append(source)
        target.expanded = True
        target.selected = False
        logger.debug("moved %s to %s", from_address, record.address)
        return True


def _readdress(node: TreeNode, address: str) -> None:
    node.address = address
    for child in node.children:
        _readdress(child, child_address(address, child.key, node.is_array))
