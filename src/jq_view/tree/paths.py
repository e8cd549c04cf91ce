"""Canonical node addresses and their segment-level parsing and rendering.

An address is the root marker ``$`` followed by segments:

- ``.name``       field access for jq identifiers
- ``."a b"``      field access for any other key (JSON-quoted)
- ``[]``          array-scope marker, "for every element of this array"

Examples::

    $                   the document root
    $.meta.owner        field ``owner`` of object ``meta``
    $.items[].x         field ``x`` of every element of ``items``
    $[].id              field ``id`` of every element of a root array

Field segments are rendered exactly as jq renders field access, so
``address[1:]`` of any address is itself a valid jq path expression.
Prefix tests work on parsed segments, never on raw characters: ``$.a`` is
not a prefix of ``$.ab``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = [
    "ROOT",
    "PathSegment",
    "SegmentKind",
    "child_address",
    "format_address",
    "has_iteration",
    "is_prefix",
    "parse_address",
    "rebase",
    "render_access",
    "render_key",
]

ROOT = "$"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

# Reserved words cannot appear bare after "." or as an object key in every
# jq release, so they are always quoted.
_KEYWORDS = frozenset(
    {
        "__loc__",
        "and",
        "as",
        "catch",
        "def",
        "elif",
        "else",
        "end",
        "foreach",
        "if",
        "import",
        "include",
        "label",
        "not",
        "or",
        "reduce",
        "then",
        "try",
    }
)

_TOKEN = re.compile(
    r"""
    \.(?P<bare>[A-Za-z_][A-Za-z0-9_]*)
    | \.(?P<quoted>"(?:[^"\\]|\\.)*")
    | (?P<iterate>\[\])
    """,
    re.VERBOSE,
)


class SegmentKind(StrEnum):
    """The two kinds of address segment."""

    FIELD = auto()
    ITERATE = auto()


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One step of an address.

    Attributes:
        kind: FIELD for a named key, ITERATE for the ``[]`` marker.
        name: The raw key for FIELD segments; empty for ITERATE.
    """

    kind: SegmentKind
    name: str = ""

    @classmethod
    def field(cls, name: str) -> PathSegment:
        return cls(SegmentKind.FIELD, name)

    @classmethod
    def iterate(cls) -> PathSegment:
        return cls(SegmentKind.ITERATE)

    @property
    def is_iterate(self) -> bool:
        return self.kind is SegmentKind.ITERATE

    def render(self) -> str:
        if self.is_iterate:
            return "[]"
        if _is_plain_identifier(self.name):
            return f".{self.name}"
        return "." + json.dumps(self.name, ensure_ascii=False)


def _is_plain_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name)) and name not in _KEYWORDS


def parse_address(address: str) -> tuple[PathSegment, ...]:
    """Split an address into its segments.

    Args:
        address: A canonical address starting with ``$``.

    Returns:
        The segments after the root marker; empty for the root itself.

    Raises:
        ValueError: If the string is not a well-formed address.
    """
    if not address.startswith(ROOT):
        msg = f"address must start with {ROOT!r}, got {address!r}"
        raise ValueError(msg)

    segments: list[PathSegment] = []
    pos = len(ROOT)
    while pos < len(address):
        match = _TOKEN.match(address, pos)
        if match is None:
            msg = f"malformed address {address!r} at offset {pos}"
            raise ValueError(msg)
        if match.group("bare") is not None:
            segments.append(PathSegment.field(match.group("bare")))
        elif match.group("quoted") is not None:
            segments.append(PathSegment.field(json.loads(match.group("quoted"))))
        else:
            segments.append(PathSegment.iterate())
        pos = match.end()
    return tuple(segments)


def format_address(segments: Sequence[PathSegment]) -> str:
    """Inverse of :func:`parse_address`."""
    return ROOT + "".join(segment.render() for segment in segments)


def child_address(parent: str, key: str, parent_is_array: bool) -> str:
    """Address of the field *key* under *parent*.

    Children of an array node describe the per-item schema, so they live
    behind the array-scope marker: ``parent[].key``.
    """
    marker = "[]" if parent_is_array else ""
    return parent + marker + PathSegment.field(key).render()


def has_iteration(segments: Sequence[PathSegment]) -> bool:
    return any(segment.is_iterate for segment in segments)


def is_prefix(prefix: str, address: str) -> bool:
    """Return True if *prefix* names *address* or one of its ancestors."""
    head = parse_address(prefix)
    return parse_address(address)[: len(head)] == head


def rebase(address: str, old_prefix: str, new_prefix: str) -> str:
    """Replace the leading *old_prefix* segments of *address* with *new_prefix*.

    Raises:
        ValueError: If *old_prefix* is not a prefix of *address*.
    """
    old = parse_address(old_prefix)
    segments = parse_address(address)
    if segments[: len(old)] != old:
        msg = f"{old_prefix!r} is not a prefix of {address!r}"
        raise ValueError(msg)
    return format_address(parse_address(new_prefix) + segments[len(old) :])


def render_access(segments: Sequence[PathSegment], base: str = "") -> str:
    """Render segments as a jq field-access chain.

    Args:
        segments: The path to render.
        base: A term the chain is applied to, such as ``$root``. When empty
            the chain starts at the current input.

    Returns:
        ``.items[].x`` style text; ``.`` (or *base*) when there are no
        segments. A leading iteration becomes ``.[]`` on the current input
        and ``$root[]`` on a variable.
    """
    chain = "".join(segment.render() for segment in segments)
    if base:
        return base + chain
    if not chain:
        return "."
    if chain.startswith("["):
        return "." + chain
    return chain


def render_key(name: str) -> str:
    """Render an object-construction key: bare when possible, else quoted."""
    if _is_plain_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)
