"""
Recursive descent parser for sandcalc expressions.

Grammar (precedence low to high):
    expression  → term (("+" | "-") term)*
    term        → exponent (("*" | "/" | "%") exponent)*
    exponent    → factor ("^" factor)*
    factor      → NUMBER | IDENT | "(" expression ")"

Every level folds to the left, including "^": 2 ^ 3 ^ 2 is (2 ^ 3) ^ 2.
There is no unary minus, so "-5" is rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sandcalc.core.constants import BUILTIN_CONSTANTS
from sandcalc.core.errors import CalcSyntaxError
from sandcalc.core.expression_lang.tokenizer import Token, TokenKind, tokenize
from sandcalc.core.ir.expressions import BinaryExpr, BinaryOp, Expr, Literal

logger = logging.getLogger(__name__)

_OPERATORS: dict[TokenKind, BinaryOp] = {
    TokenKind.PLUS: BinaryOp.ADD,
    TokenKind.MINUS: BinaryOp.SUB,
    TokenKind.STAR: BinaryOp.MUL,
    TokenKind.SLASH: BinaryOp.DIV,
    TokenKind.PERCENT: BinaryOp.MOD,
    TokenKind.CARET: BinaryOp.POW,
}


def to_operator(token: Token) -> BinaryOp:
    """Map an operator token to its BinaryOp.

    Raises:
        CalcSyntaxError: If the token is not one of the six operators.
    """
    op = _OPERATORS.get(token.kind)
    if op is None:
        raise CalcSyntaxError(f"Operator expected, got {token.describe()}", token.pos)
    return op


class _Parser:
    """Recursive descent parser for expressions."""

    def __init__(self, tokens: list[Token], constants: Mapping[str, float]) -> None:
        self.tokens = tokens
        self.constants = constants
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    # -- Grammar rules --

    def parse_expression(self) -> Expr:
        """term (('+' | '-') term)*, stopping at ')' or end of input."""
        left = self.parse_term()
        while True:
            tok = self.current
            if tok.kind in (TokenKind.PLUS, TokenKind.MINUS):
                self.advance()
                right = self.parse_term()
                left = BinaryExpr(op=to_operator(tok), left=left, right=right)
            elif tok.kind in (TokenKind.EOF, TokenKind.RPAREN):
                return left
            else:
                raise CalcSyntaxError(
                    f"Expected operator or end of input, got {tok.describe()}",
                    tok.pos,
                )

    def parse_term(self) -> Expr:
        """exponent (('*' | '/' | '%') exponent)*"""
        left = self.parse_exponent()
        while self.current.kind in (TokenKind.STAR, TokenKind.SLASH, TokenKind.PERCENT):
            tok = self.advance()
            right = self.parse_exponent()
            left = BinaryExpr(op=to_operator(tok), left=left, right=right)
        return left

    def parse_exponent(self) -> Expr:
        """factor ('^' factor)*"""
        left = self.parse_factor()
        while self.current.kind == TokenKind.CARET:
            tok = self.advance()
            right = self.parse_factor()
            left = BinaryExpr(op=to_operator(tok), left=left, right=right)
        return left

    def parse_factor(self) -> Expr:
        """NUMBER | IDENT | '(' expression ')'"""
        tok = self.advance()

        if tok.kind == TokenKind.NUMBER:
            return Literal(value=tok.value)

        if tok.kind == TokenKind.IDENT:
            return Literal(value=self._resolve_constant(tok))

        if tok.kind == TokenKind.LPAREN:
            expr = self.parse_expression()
            closing = self.advance()
            if closing.kind != TokenKind.RPAREN:
                raise CalcSyntaxError(
                    f"Expected closing bracket, got {closing.describe()}",
                    closing.pos,
                )
            return expr

        raise CalcSyntaxError(
            f"Expected number or opening bracket, got {tok.describe()}",
            tok.pos,
        )

    def _resolve_constant(self, tok: Token) -> float:
        name = str(tok.value)
        if name not in self.constants:
            raise CalcSyntaxError(f"Unidentified variable {name!r}", tok.pos)
        return self.constants[name]


def parse(tokens: list[Token], constants: Mapping[str, float] | None = None) -> Expr:
    """Parse a token list into an expression tree.

    Args:
        tokens: Output of tokenize(); must end with an EOF token.
        constants: Name -> value table for identifiers. Defaults to the
            built-in table.

    Returns:
        Root of the expression tree.

    Raises:
        CalcSyntaxError: If the tokens do not form a single expression.
    """
    if not tokens or tokens[-1].kind != TokenKind.EOF:
        raise CalcSyntaxError("Token stream must end with EOF")
    if tokens[0].kind == TokenKind.EOF:
        raise CalcSyntaxError("Empty expression", tokens[0].pos)

    parser = _Parser(tokens, BUILTIN_CONSTANTS if constants is None else constants)
    expr = parser.parse_expression()

    # parse_expression stops at ')' as well as EOF; at top level only EOF may remain
    if parser.current.kind != TokenKind.EOF:
        raise CalcSyntaxError("Unexpected closing bracket", parser.current.pos)

    root = expr.op.value if isinstance(expr, BinaryExpr) else "literal"
    logger.debug("Parsed %d tokens into a tree rooted at %r", len(tokens), root)
    return expr


def parse_expr(source: str, constants: Mapping[str, float] | None = None) -> Expr:
    """Parse an expression string into an AST.

    Args:
        source: Expression string (e.g., "2 + 3 * pi")
        constants: Optional constant table; defaults to the built-ins.

    Returns:
        Parsed expression AST.

    Raises:
        CalcSyntaxError: If tokenization or parsing fails.
    """
    return parse(tokenize(source), constants)
