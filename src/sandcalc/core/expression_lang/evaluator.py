"""
Expression evaluator for sandcalc.

Reduces an expression tree to a single float. Pure evaluation: no I/O, no
side effects, and no use of Python's eval().

Arithmetic follows IEEE 754 rather than Python's exception-raising float
operations: dividing by zero gives a signed infinity (or NaN for 0/0), a
zero modulus gives NaN, and out-of-domain or overflowing powers give NaN or
a signed infinity.
"""

from __future__ import annotations

import math

from sandcalc.core.errors import CalcError
from sandcalc.core.ir.expressions import BinaryExpr, BinaryOp, Expr, Literal


def evaluate(expr: Expr) -> float:
    """Evaluate an expression tree.

    Args:
        expr: Parsed expression AST.

    Returns:
        The computed value; may be inf or NaN.

    Raises:
        CalcError: Only for a node type outside the expression IR.
    """
    return _interpret(expr)


def _interpret(expr: Expr) -> float:
    """Dispatch evaluation to the appropriate handler."""
    if isinstance(expr, Literal):
        return expr.value

    if isinstance(expr, BinaryExpr):
        return _interpret_binary(expr)

    raise CalcError(f"Unknown expression type: {type(expr).__name__}")


def _interpret_binary(expr: BinaryExpr) -> float:
    """Evaluate a binary expression, left operand first.

    Operator chains fold to the left, so the left spine is walked in a loop;
    recursion depth follows bracket and right-operand nesting only.
    """
    pending: list[tuple[BinaryOp, Expr]] = []
    node: Expr = expr
    while isinstance(node, BinaryExpr):
        pending.append((node.op, node.right))
        node = node.left

    result = _interpret(node)
    for op, right in reversed(pending):
        result = _apply(op, result, _interpret(right))
    return result


def _apply(op: BinaryOp, left: float, right: float) -> float:
    if op == BinaryOp.ADD:
        return left + right
    if op == BinaryOp.SUB:
        return left - right
    if op == BinaryOp.MUL:
        return left * right
    if op == BinaryOp.DIV:
        return _divide(left, right)
    if op == BinaryOp.MOD:
        return _modulo(left, right)
    if op == BinaryOp.POW:
        return _power(left, right)

    raise CalcError(f"Unknown binary op: {op}")


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _modulo(left: float, right: float) -> float:
    """Truncated remainder; the result takes the sign of the dividend."""
    if right == 0 or math.isinf(left):
        return math.nan
    return math.fmod(left, right)


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return _signed_infinity(base, exponent)
    except ValueError:
        # Zero to a negative power is a pole; everything else is a domain error
        if base == 0:
            return _signed_infinity(base, exponent)
        return math.nan


def _signed_infinity(base: float, exponent: float) -> float:
    """Infinity carrying the sign base ** exponent would have."""
    negative = math.copysign(1.0, base) < 0 and _is_odd_integer(exponent)
    return -math.inf if negative else math.inf


def _is_odd_integer(value: float) -> bool:
    return value.is_integer() and math.fmod(value, 2.0) != 0
