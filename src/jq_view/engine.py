"""QueryEngine: runs jq expressions through the ``jq`` bindings.

The engine is the source of truth for what counts as a valid expression;
jq-view never validates generated text itself. Compiled programs are kept
in a per-instance ``LRUCache`` because every edit re-runs a slightly
different expression against the same document, and toggling back and
forth between selections revisits earlier expressions.

Example::

    engine = QueryEngine()
    engine.execute("{a: .a}", b'{"a": 1, "b": 2}')
    # '{\\n  "a": 1\\n}'
"""

from __future__ import annotations

import json
import logging
from typing import Any

import jq
from cachetools import LRUCache

from jq_view.errors import QueryError

__all__ = ["QueryEngine", "execute"]

logger = logging.getLogger(__name__)


class QueryEngine:
    """Compiles, caches and runs jq programs.

    Two separate ``QueryEngine`` instances never share compiled programs.

    Args:
        max_cache_size: Maximum number of compiled programs held in memory.
            When exceeded, the least-recently-used program is silently
            evicted. Defaults to 128.
    """

    def __init__(self, max_cache_size: int = 128) -> None:
        self._programs: LRUCache[str, Any] = LRUCache(maxsize=max_cache_size)

    @property
    def cache_size(self) -> int:
        return int(self._programs.currsize)

    def compile(self, expression: str) -> Any:
        """Return the compiled program for *expression*.

        Raises:
            QueryError: ``parse error: ...`` when jq rejects the expression.
        """
        program = self._programs.get(expression)
        if program is None:
            logger.debug("compiling jq program: %s", expression)
            try:
                program = jq.compile(expression)
            except ValueError as exc:
                raise QueryError(f"parse error: {exc}") from exc
            self._programs[expression] = program
        return program

    def run(self, expression: str, value: Any) -> list[Any]:
        """Run *expression* against an already-parsed JSON value.

        Returns:
            Every value the program emits, in order.

        Raises:
            QueryError: On compile or runtime failure.
        """
        program = self.compile(expression)
        try:
            return list(program.input_value(value).all())
        except ValueError as exc:
            raise QueryError(str(exc)) from exc

    def execute(self, expression: str, document: bytes | str) -> str:
        """Run *expression* against raw JSON text and return indented JSON.

        A single output value is returned as is; zero or several outputs are
        returned as a JSON array of all of them.

        Raises:
            QueryError: ``json error: ...`` for invalid input, otherwise as
                :meth:`run`.
        """
        try:
            value = json.loads(document)
        except ValueError as exc:
            raise QueryError(f"json error: {exc}") from exc

        results = self.run(expression, value)
        output = results[0] if len(results) == 1 else results
        return json.dumps(output, indent=2, ensure_ascii=False)


def execute(expression: str, document: bytes | str) -> str:
    """Run *expression* once with a throwaway engine."""
    return QueryEngine().execute(expression, document)
