"""QueryTicket and QueryResult dataclasses for expression execution.

A ticket is issued for every execution request and carries a monotonic
token. The result reports whether the response was applied to the session
or dropped because a newer request had been issued in the meantime.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["QueryResult", "QueryTicket"]


@dataclass(frozen=True, slots=True)
class QueryTicket:
    """One execution request.

    Attributes:
        token:      Monotonic request number; higher is newer.
        expression: The jq expression to run.
        document:   The JSON text it runs against.
    """

    token: int
    expression: str
    document: bytes


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Outcome of one execution request.

    Attributes:
        token:   Token of the ticket this answers.
        result:  Indented JSON output; empty on error.
        error:   Opaque error message from the engine; empty on success.
        applied: False when the response was stale and therefore dropped.
    """

    token: int
    result: str = ""
    error: str = ""
    applied: bool = False

    @property
    def ok(self) -> bool:
        return not self.error
