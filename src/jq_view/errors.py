"""Exception hierarchy for jq-view.

Only the collaborators around the core raise these. Tree mutations never
raise on bad input (they are no-ops) and synthesis has no failure mode.
"""

from __future__ import annotations

__all__ = ["DocumentError", "JqViewError", "QueryError"]


class JqViewError(Exception):
    """Base class for all jq-view errors."""


class QueryError(JqViewError):
    """A jq expression could not be compiled or run, or its input was not JSON."""


class DocumentError(JqViewError):
    """A document could not be listed, located, read or parsed."""
