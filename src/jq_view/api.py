"""Public API functions for jq-view.

Each call builds fresh objects, so there is no global state shared between
calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from jq_view.engine import QueryEngine
from jq_view.selection import SelectionEntry, collect_selected, toggle_selected
from jq_view.synthesis import ExpressionSynthesizer, SynthesisConfig
from jq_view.tree import TreeBuilder, TreeNode

__all__ = ["build_tree", "execute", "expression_for", "synthesize_expression"]


def build_tree(document: Any) -> TreeNode:
    """Return the navigable tree for a parsed JSON document."""
    return TreeBuilder().build(document)


def synthesize_expression(
    entries: Sequence[SelectionEntry],
    config: SynthesisConfig | None = None,
) -> str:
    """Return the jq expression reproducing an ordered selection.

    Args:
        entries: Output of ``collect_selected``; may be empty.
        config:  Synthesis options. Defaults to ``SynthesisConfig()``.

    Returns:
        ``.`` for an empty selection, otherwise a projection expression.
    """
    return ExpressionSynthesizer(config).synthesize(entries)


def expression_for(
    document: Any,
    addresses: Iterable[str],
    config: SynthesisConfig | None = None,
) -> str:
    """Select *addresses* on a fresh tree of *document* and synthesize.

    Field order follows the document's key order, as it would on screen
    before any reordering. Addresses that do not name a selectable node are
    ignored.

    Example::

        expression_for({"a": {"b": {"c": 1}}}, ["$.a.b.c"])
        # '{"a.b.c": .a.b.c}'
    """
    tree = build_tree(document)
    for address in dict.fromkeys(addresses):
        toggle_selected(tree, address)
    return synthesize_expression(collect_selected(tree), config)


def execute(expression: str, document: bytes | str) -> str:
    """Run *expression* against JSON text and return indented JSON.

    Raises:
        QueryError: When the expression or the document is rejected.
    """
    return QueryEngine().execute(expression, document)
