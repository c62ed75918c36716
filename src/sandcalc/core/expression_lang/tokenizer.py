"""
Tokenizer for sandcalc expressions.

Converts an expression string into a sequence of typed tokens.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum, auto

from sandcalc.core.errors import CalcSyntaxError

logger = logging.getLogger(__name__)


class TokenKind(StrEnum):
    """Token types for the expression language."""

    # Literals and names
    NUMBER = auto()
    IDENT = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()

    # End of input
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A single token from the expression tokenizer."""

    kind: TokenKind
    value: float | str | None
    pos: int

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value!r}"
        if self.kind == TokenKind.IDENT:
            return f"identifier {self.value!r}"
        return repr(_SYMBOLS[self.kind])


_SINGLE_CHAR: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}
_SYMBOLS: dict[TokenKind, str] = {kind: char for char, kind in _SINGLE_CHAR.items()}

# Digits and decimal points, maximal run; validity is decided by float()
_NUMBER_RE = re.compile(r"[0-9.]+")
# ASCII letters only
_IDENT_RE = re.compile(r"[A-Za-z]+")


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF.

    Raises:
        CalcSyntaxError: On the first character that starts no token, or on
            a digit run that is not a valid number (".", "1.2.3").
    """
    tokens: list[Token] = []
    i = 0
    n = len(source)

    while i < n:
        c = source[i]

        if c.isspace():
            i += 1
            continue

        m = _NUMBER_RE.match(source, i)
        if m:
            text = m.group(0)
            try:
                value = float(text)
            except ValueError:
                raise CalcSyntaxError(f"Invalid number {text!r}", i) from None
            tokens.append(Token(TokenKind.NUMBER, value, i))
            i = m.end()
            continue

        m = _IDENT_RE.match(source, i)
        if m:
            tokens.append(Token(TokenKind.IDENT, m.group(0), i))
            i = m.end()
            continue

        if c in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[c], None, i))
            i += 1
            continue

        raise CalcSyntaxError(f"Unrecognised character {c!r}", i)

    tokens.append(Token(TokenKind.EOF, None, n))
    logger.debug("Tokenized %d characters into %d tokens", n, len(tokens))
    return tokens
