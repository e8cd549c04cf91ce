"""Synthesis subpackage: selection -> jq expression.

Re-exports:
- SynthesisConfig: frozen options (path compression, root variable name)
- ExpressionSynthesizer: builds the expression for an ordered selection
- synthesize_expression: one-shot helper
"""

from jq_view.synthesis.config import SynthesisConfig
from jq_view.synthesis.synthesizer import (
    IDENTITY,
    ExpressionSynthesizer,
    synthesize_expression,
)

__all__ = [
    "IDENTITY",
    "ExpressionSynthesizer",
    "SynthesisConfig",
    "synthesize_expression",
]
