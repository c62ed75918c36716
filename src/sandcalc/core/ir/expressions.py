"""
Expression tree types for sandcalc.

A parsed expression is a strict tree: every interior node is a binary
operation owning its two children, and every leaf is a float literal.
Constants are resolved at parse time, so no name survives into the tree.

Supports:
- Arithmetic: +, -, *, /, %
- Exponentiation: ^
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class BinaryOp(StrEnum):
    """Binary operators for expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"


# ---------------------------------------------------------------------------
# AST node types
# ---------------------------------------------------------------------------


class Literal(BaseModel):
    """A float literal, either written in the source or resolved from a constant."""

    value: float = Field(description="The literal value")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class BinaryExpr(BaseModel):
    """Binary operation: left op right."""

    op: BinaryOp
    left: Expr
    right: Expr

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"({self.left} {self.op.value} {self.right})"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

Expr = Literal | BinaryExpr

# Rebuild models for recursive forward references
BinaryExpr.model_rebuild()
