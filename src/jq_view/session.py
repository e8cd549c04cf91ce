"""EditSession: one interactive editing session over one document at a time.

The session is the event loop's view of the core. Every edit event
(toggle, reorder, move, compression switch) is handled to completion:

    mutate tree -> collect selection -> synthesize expression

before the method returns. Executing the expression is separate and may be
asynchronous. Each request gets a monotonic token and a response is only
applied while its token is the latest one issued, so a slow response to an
earlier edit can never overwrite the result of a later one.

Loading a new document discards the tree, the move ledger and the
selection together, and invalidates every request still in flight.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from jq_view.documents import load_document
from jq_view.engine import QueryEngine
from jq_view.errors import DocumentError, QueryError
from jq_view.mutations import MoveLedger, TreeEditor
from jq_view.result import QueryResult, QueryTicket
from jq_view.selection import SelectionEntry, collect_selected, toggle_selected
from jq_view.synthesis import ExpressionSynthesizer, SynthesisConfig
from jq_view.tree import TreeBuilder, TreeNode
from jq_view.tree.display import collapse_all, collapse_unselected, expand_all

__all__ = ["EditSession"]

logger = logging.getLogger(__name__)


class EditSession:
    """Owns the tree, move ledger, selection and current expression.

    Example::

        session = EditSession({"items": [{"x": 1, "y": 2}]})
        session.toggle("$.items[].x")
        session.expression            # '{items: [.items[] | {x: .x}]}'
        session.execute().result      # '{\\n  "items": [...]\\n}'

    Args:
        document: The parsed JSON document to edit.
        config:   Synthesis options. Defaults to ``SynthesisConfig()``.
        engine:   Executes expressions. Defaults to a fresh ``QueryEngine``.
        filename: Name of the file the document came from, if any.
    """

    def __init__(
        self,
        document: Any,
        config: SynthesisConfig | None = None,
        engine: QueryEngine | None = None,
        filename: str | None = None,
    ) -> None:
        self._synthesizer = ExpressionSynthesizer(config)
        self._engine = engine if engine is not None else QueryEngine()
        self._builder = TreeBuilder()
        self._issued = 0
        self.result = ""
        self.error = ""
        self._load(document, filename)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def document(self) -> Any:
        return self._document

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def tree(self) -> TreeNode:
        return self._tree

    @property
    def ledger(self) -> MoveLedger:
        return self._ledger

    @property
    def config(self) -> SynthesisConfig:
        return self._synthesizer.config

    @property
    def selection(self) -> list[SelectionEntry]:
        return list(self._selection)

    @property
    def expression(self) -> str:
        return self._expression

    @property
    def latest_token(self) -> int:
        return self._issued

    def _load(self, document: Any, filename: str | None) -> None:
        self._tree = self._builder.build(document)
        self._document = document
        self._raw = json.dumps(document, ensure_ascii=False).encode()
        self._filename = filename
        self._ledger = MoveLedger()
        self._editor = TreeEditor(self._tree, self._ledger)
        self._refresh()

    def _refresh(self) -> None:
        self._selection = collect_selected(self._tree, self._ledger)
        self._expression = self._synthesizer.synthesize(self._selection)

    # ------------------------------------------------------------------
    # Edit events
    # ------------------------------------------------------------------

    def toggle(self, address: str) -> bool:
        """Flip the selection of one field. Returns False for a no-op."""
        changed = toggle_selected(self._tree, address)
        if changed:
            self._refresh()
        return changed

    def reorder(self, from_address: str, to_address: str, insert_after: bool) -> bool:
        """Drag-reorder among siblings. Returns False for a no-op."""
        changed = self._editor.reorder(from_address, to_address, insert_after)
        if changed:
            self._refresh()
        return changed

    def move_into(self, from_address: str, target_address: str) -> bool:
        """Drag a subtree into another container. Returns False for a no-op."""
        changed = self._editor.move_into(from_address, target_address)
        if changed:
            self._refresh()
        return changed

    def set_compression(self, enabled: bool) -> None:
        config = dataclasses.replace(self.config, compress_paths=enabled)
        self._synthesizer = ExpressionSynthesizer(config)
        self._refresh()

    def expand_all(self) -> None:
        expand_all(self._tree)

    def collapse_all(self) -> None:
        collapse_all(self._tree)

    def collapse_unselected(self) -> None:
        collapse_unselected(self._tree)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def switch_document(self, document: Any, filename: str | None = None) -> None:
        """Replace the document, discarding all tree, move and selection state."""
        logger.info("switching document to %s", filename or "<unnamed>")
        # responses to requests against the old document must not apply
        self._issued += 1
        self._load(document, filename)

    def load_file(self, directory: str | Path, filename: str) -> bool:
        """Switch to *filename* in *directory*.

        Loader failures are recorded in ``error`` instead of raised.

        Returns:
            True if a new document was loaded; False when *filename* is
            already current or could not be loaded.
        """
        if filename == self._filename:
            return False
        try:
            document = load_document(directory, filename)
        except DocumentError as exc:
            self.error = str(exc)
            return False
        self.switch_document(document, filename)
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def submit(self) -> QueryTicket:
        """Issue a request for the current expression."""
        self._issued += 1
        return QueryTicket(self._issued, self._expression, self._raw)

    def complete(
        self, ticket: QueryTicket, result: str | None = None, error: str | None = None
    ) -> QueryResult:
        """Apply the response to *ticket* unless a newer request exists.

        An error clears the previous result; a result clears the previous
        error.
        """
        outcome = QueryResult(ticket.token, result or "", error or "")
        if ticket.token != self._issued:
            logger.debug(
                "dropping stale response %d (latest %d)", ticket.token, self._issued
            )
            return outcome
        self.result = outcome.result
        self.error = outcome.error
        return dataclasses.replace(outcome, applied=True)

    def execute(self) -> QueryResult:
        """Run the current expression synchronously and apply the response."""
        ticket = self.submit()
        try:
            output = self._engine.execute(ticket.expression, ticket.document)
        except QueryError as exc:
            return self.complete(ticket, error=str(exc))
        return self.complete(ticket, result=output)

    async def execute_async(self) -> QueryResult:
        """Run the current expression in a worker thread.

        If another request is submitted while this one is in flight, this
        response is dropped when it arrives.
        """
        ticket = self.submit()
        try:
            output = await asyncio.to_thread(
                self._engine.execute, ticket.expression, ticket.document
            )
        except QueryError as exc:
            return self.complete(ticket, error=str(exc))
        return self.complete(ticket, result=output)
