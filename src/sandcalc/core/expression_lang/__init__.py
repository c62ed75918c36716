"""
sandcalc expression language.

Tokenizer, parser, and evaluator for single-line arithmetic expressions.

Usage:
    from sandcalc.core.expression_lang import calculate, parse_expr, evaluate

    calculate("(2 + 3) * 4")
    # 20.0

    expr = parse_expr("2 ^ 3 ^ 2")
    evaluate(expr)
    # 64.0
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sandcalc.core.errors import CalcSyntaxError
from sandcalc.core.expression_lang.evaluator import evaluate
from sandcalc.core.expression_lang.parser import parse, parse_expr, to_operator
from sandcalc.core.expression_lang.tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


def calculate(source: str, constants: Mapping[str, float] | None = None) -> float:
    """Run the whole pipeline on one expression.

    Args:
        source: Expression text, already trimmed by the caller.
        constants: Optional constant table; defaults to the built-ins.

    Returns:
        The value of the expression.

    Raises:
        CalcSyntaxError: From whichever stage fails first, with the source
            attached for column reporting.
    """
    logger.debug("Calculating %r", source)
    try:
        tokens = tokenize(source)
        expr = parse(tokens, constants)
        result = evaluate(expr)
    except CalcSyntaxError as e:
        raise e.with_source(source)
    except RecursionError:
        raise CalcSyntaxError("Expression nested too deeply") from None

    logger.debug("Result of %r is %r", source, result)
    return result


__all__ = [
    "Token",
    "TokenKind",
    "calculate",
    "evaluate",
    "parse",
    "parse_expr",
    "to_operator",
    "tokenize",
]
