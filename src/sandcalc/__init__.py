"""
sandcalc - a small arithmetic expression evaluator.

Text is tokenized, parsed by recursive descent into an expression tree,
and the tree is reduced to a single float.
"""

from __future__ import annotations

from ._version import __version__

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import CalcError, CalcSyntaxError, ManifestError
from .core.expression_lang import calculate

__all__ = [
    "__version__",
    "ir",
    "calculate",
    "CalcError",
    "CalcSyntaxError",
    "ManifestError",
]
