"""Ordered key trie folded into jq object-construction syntax.

A trie is a tagged variant: ``TrieLeaf`` holds the value expression for one
output field, ``TrieBranch`` maps segment names to further nodes. Every
node carries the smallest selection order beneath it, and each object level
is emitted in ascending order, never in key order.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from jq_view.tree.paths import render_key

__all__ = ["TrieBranch", "TrieField", "TrieLeaf", "TrieNode", "build_trie", "fold_trie"]


@dataclass(frozen=True, slots=True)
class TrieField:
    """Input to :func:`build_trie`: one output field.

    Attributes:
        path:       Output key chain, outermost first. Never empty.
        expression: jq expression producing the field's value.
        order:      Selection order of the field.
    """

    path: Sequence[str]
    expression: str
    order: int


@dataclass(frozen=True, slots=True)
class TrieLeaf:
    expression: str
    order: int


@dataclass(slots=True)
class TrieBranch:
    order: int
    children: dict[str, TrieNode] = field(default_factory=dict)


TrieNode = TrieLeaf | TrieBranch


def build_trie(fields: Iterable[TrieField]) -> TrieBranch:
    """Insert fields, lowest order first, into a fresh trie."""
    ordered = sorted(fields, key=lambda f: f.order)
    root = TrieBranch(order=ordered[0].order if ordered else 0)
    for item in ordered:
        node = root
        for name in item.path[:-1]:
            child = node.children.get(name)
            if not isinstance(child, TrieBranch):
                child = TrieBranch(order=item.order)
                node.children[name] = child
            node = child
        node.children[item.path[-1]] = TrieLeaf(item.expression, item.order)
    return root


def fold_trie(branch: TrieBranch, compress: bool) -> str:
    """Render *branch* as a jq object construction.

    Args:
        branch:   The level to render.
        compress: Collapse single-child chains into one dotted key.

    Returns:
        Text such as ``{a: .a, b: {c: .b.c}}``.
    """
    entries = sorted(branch.children.items(), key=lambda kv: kv[1].order)
    parts = [_fold_entry(name, node, compress) for name, node in entries]
    return "{" + ", ".join(parts) + "}"


def _fold_entry(name: str, node: TrieNode, compress: bool) -> str:
    if isinstance(node, TrieLeaf):
        return f"{render_key(name)}: {node.expression}"

    if compress:
        names = [name]
        current = node
        while len(current.children) == 1:
            ((child_name, child),) = current.children.items()
            names.append(child_name)
            if isinstance(child, TrieLeaf):
                return f"{_dotted(names)}: {child.expression}"
            current = child
        if len(names) > 1:
            return f"{_dotted(names)}: {fold_trie(current, compress)}"

    return f"{render_key(name)}: {fold_trie(node, compress)}"


def _dotted(names: list[str]) -> str:
    return json.dumps(".".join(names), ensure_ascii=False)
