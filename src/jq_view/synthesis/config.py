"""SynthesisConfig: options for expression synthesis.

SynthesisConfig is a frozen (immutable) dataclass. Changing an option
means building a new config and re-synthesizing; nothing is cached
between calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["SynthesisConfig"]

_VARIABLE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")


@dataclass(frozen=True, slots=True)
class SynthesisConfig:
    """Immutable configuration for the expression synthesizer.

    Attributes:
        compress_paths: When True, chains of single-child nesting levels are
            collapsed into one quoted dotted key (``"a.b.c": .a.b.c``).
            Default True.
        root_variable: Name (without ``$``) the original document is bound
            to when relocated fields must be read from it. Default "root".
    """

    compress_paths: bool = True
    root_variable: str = "root"

    def __post_init__(self) -> None:
        if not _VARIABLE.match(self.root_variable):
            msg = f"root_variable must be a jq identifier, got {self.root_variable!r}"
            raise ValueError(msg)

    @property
    def root_reference(self) -> str:
        return f"${self.root_variable}"
