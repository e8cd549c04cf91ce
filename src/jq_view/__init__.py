"""jq-view - synthesize jq projections from selections over a JSON tree."""

from __future__ import annotations

from jq_view.api import build_tree, execute, expression_for, synthesize_expression
from jq_view.engine import QueryEngine
from jq_view.errors import DocumentError, JqViewError, QueryError
from jq_view.mutations import MoveLedger, MoveRecord, TreeEditor
from jq_view.result import QueryResult, QueryTicket
from jq_view.selection import SelectionEntry, collect_selected
from jq_view.session import EditSession
from jq_view.synthesis import ExpressionSynthesizer, SynthesisConfig

__version__: str = "0.1.0"
__all__: list[str] = [
    "DocumentError",
    "EditSession",
    "ExpressionSynthesizer",
    "JqViewError",
    "MoveLedger",
    "MoveRecord",
    "QueryEngine",
    "QueryError",
    "QueryResult",
    "QueryTicket",
    "SelectionEntry",
    "SynthesisConfig",
    "TreeEditor",
    "build_tree",
    "collect_selected",
    "execute",
    "expression_for",
    "synthesize_expression",
]
