"""ExpressionSynthesizer: turns an ordered selection into one jq expression.

Shape of the output for a non-empty selection::

    [. as $root |] <fragment> [* <fragment> ...]

- Fields whose display address has no ``[]`` marker form one object
  construction built from a key trie (see ``trie.py``).
- Fields behind a ``[]`` marker are grouped by the display prefix up to and
  including their first marker. Each group becomes a list construction
  ``[<array> | <object>]`` wrapped in one ``{key: ...}`` layer per field in
  front of the marker. The object inside is built by the same procedure
  one scope deeper, so nested arrays of objects nest naturally.
- Fragments are combined with jq's object merge ``*``.
- A selected document root (a scalar or plain-list document) is read
  whole as ``.``.
- When any field was relocated, the original document is bound to
  ``$root`` first so relocated fields can be read from it.

Reads inside a list construction are relative to the current element when
the field's source lies inside the iterated array, and absolute through
``$root`` otherwise. When the iterated array itself was moved, the
iteration reads from the array's original location.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from jq_view.selection import SelectionEntry
from jq_view.synthesis.config import SynthesisConfig
from jq_view.synthesis.trie import TrieField, build_trie, fold_trie
from jq_view.tree.paths import (
    PathSegment,
    has_iteration,
    parse_address,
    render_access,
    render_key,
)

__all__ = ["IDENTITY", "ExpressionSynthesizer", "synthesize_expression"]

IDENTITY = "."

Segments = tuple[PathSegment, ...]


@dataclass(frozen=True, slots=True)
class _Field:
    display: Segments
    source: Segments
    order: int
    arrays: tuple[Segments, ...] = ()

    @property
    def is_relocated(self) -> bool:
        return self.display != self.source


@dataclass(frozen=True, slots=True)
class _Scope:
    """Where an object construction is evaluated.

    ``display_base``/``source_base`` are the absolute display and source
    prefixes already consumed by enclosing list constructions. The top
    scope evaluates against the document itself.
    """

    display_base: Segments = ()
    source_base: Segments = ()
    top: bool = True


class ExpressionSynthesizer:
    """Builds jq expressions from ordered selections.

    Example::

        synthesizer = ExpressionSynthesizer(SynthesisConfig(compress_paths=False))
        synthesizer.synthesize(collect_selected(tree, ledger))
        # '{a: {b: {c: .a.b.c}}}'
    """

    def __init__(self, config: SynthesisConfig | None = None) -> None:
        self._config = config if config is not None else SynthesisConfig()

    @property
    def config(self) -> SynthesisConfig:
        return self._config

    def synthesize(self, entries: Sequence[SelectionEntry]) -> str:
        """Return the jq expression for *entries*.

        Args:
            entries: Selection in any order; ``order`` decides field order.

        Returns:
            ``.`` for an empty selection, otherwise a projection expression.
        """
        if not entries:
            return IDENTITY

        fields = [
            _Field(
                display=parse_address(entry.display_address),
                source=parse_address(entry.source_address),
                order=entry.order,
                arrays=tuple(parse_address(a) for a in entry.array_sources),
            )
            for entry in sorted(entries, key=lambda e: e.order)
        ]
        expression = self._emit(fields, _Scope())
        if any(f.is_relocated for f in fields):
            expression = f". as {self._config.root_reference} | {expression}"
        return expression

    # ------------------------------------------------------------------
    # Object level
    # ------------------------------------------------------------------

    def _emit(self, fields: list[_Field], scope: _Scope) -> str:
        depth = len(scope.display_base)
        whole: list[_Field] = []
        plain: list[_Field] = []
        groups: dict[Segments, list[_Field]] = {}
        for item in fields:
            rest = item.display[depth:]
            if not rest:
                whole.append(item)
            elif not has_iteration(rest):
                plain.append(item)
            else:
                marker = next(i for i, seg in enumerate(rest) if seg.is_iterate)
                groups.setdefault(rest[: marker + 1], []).append(item)

        fragments = [self._read(item, scope) for item in whole]
        if plain:
            trie = build_trie(
                TrieField(
                    path=[seg.name for seg in item.display[depth:]],
                    expression=self._read(item, scope),
                    order=item.order,
                )
                for item in plain
            )
            fragments.append(fold_trie(trie, self._config.compress_paths))
        for prefix, members in groups.items():
            fragments.append(self._emit_group(prefix, members, scope))
        return " * ".join(fragments)

    def _read(self, item: _Field, scope: _Scope) -> str:
        """Value expression for one field evaluated in *scope*."""
        root = self._config.root_reference
        if scope.top:
            return render_access(item.source, root if item.is_relocated else "")
        if _starts_with(item.source, scope.source_base):
            return render_access(item.source[len(scope.source_base) :])
        return render_access(item.source, root)

    # ------------------------------------------------------------------
    # Array level
    # ------------------------------------------------------------------

    def _emit_group(
        self, prefix: Segments, members: list[_Field], scope: _Scope
    ) -> str:
        display_base = scope.display_base + prefix
        source_base = self._iterated_source(prefix, display_base, members, scope)
        inner = _Scope(display_base, source_base, top=False)

        body = self._emit(members, inner)
        iterate = self._iterate(source_base, display_base, scope)
        expression = f"[{iterate} | {body}]"
        for seg in reversed(prefix[:-1]):
            expression = f"{{{render_key(seg.name)}: {expression}}}"
        return expression

    def _iterated_source(
        self,
        prefix: Segments,
        display_base: Segments,
        members: list[_Field],
        scope: _Scope,
    ) -> Segments:
        """Original location of the array a group iterates over.

        This is where the displayed array node itself resolves to, so it only
        differs from the display location when that array (or a container
        around it) was moved. Fields moved into the array from elsewhere
        never change what is iterated. Entries built without array sources
        fall back to the display prefix mapped into the enclosing scope.
        """
        index = sum(1 for seg in display_base if seg.is_iterate) - 1
        for item in members:
            if index < len(item.arrays):
                return item.arrays[index] + (PathSegment.iterate(),)
        return scope.source_base + prefix

    def _iterate(
        self, source_base: Segments, display_base: Segments, scope: _Scope
    ) -> str:
        root = self._config.root_reference
        if scope.top:
            moved = source_base != display_base
            return render_access(source_base, root if moved else "")
        if _starts_with(source_base, scope.source_base):
            return render_access(source_base[len(scope.source_base) :])
        return render_access(source_base, root)


def _starts_with(segments: Segments, prefix: Segments) -> bool:
    return segments[: len(prefix)] == prefix


def synthesize_expression(
    entries: Sequence[SelectionEntry], config: SynthesisConfig | None = None
) -> str:
    """Synthesize with a fresh ExpressionSynthesizer."""
    return ExpressionSynthesizer(config).synthesize(entries)
