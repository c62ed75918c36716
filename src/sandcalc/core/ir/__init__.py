"""
sandcalc intermediate representation (IR) types.

All types are re-exported from this package for convenience.
"""

from .expressions import BinaryExpr, BinaryOp, Expr, Literal

__all__ = [
    "BinaryExpr",
    "BinaryOp",
    "Expr",
    "Literal",
]
