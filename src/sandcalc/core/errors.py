"""
Error types for sandcalc lexing, parsing, evaluation, and configuration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class CalcError(Exception):
    """Base exception for all sandcalc errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(message)

    def format(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.message}\n{self.context.format()}"
        return self.message


class CalcSyntaxError(CalcError):
    """
    Raised when an expression cannot be tokenized or parsed.

    Examples:
    - Unrecognised character
    - Malformed number
    - Operator or operand expected
    - Unbalanced brackets
    - Unknown constant name
    """

    def __init__(
        self,
        message: str,
        pos: int | None = None,
        context: Optional["ErrorContext"] = None,
    ):
        super().__init__(message, context)
        self.pos = pos

    def with_source(self, source: str) -> "CalcSyntaxError":
        """Attach the expression text so the error can point at the column."""
        if self.context is None and self.pos is not None:
            self.context = ErrorContext(source=source, column=self.pos)
        return self


class ManifestError(CalcError):
    """
    Raised when a sandcalc.toml file cannot be loaded.

    Examples:
    - Malformed TOML
    - Constant with a non-numeric value
    - Constant name the tokenizer can never produce
    - Negative display precision
    """

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


@dataclass
class ErrorContext:
    """
    Location of an error inside a single-line expression.

    Attributes:
        source: The expression text
        column: 0-indexed column of the offending character or token
    """

    source: str
    column: int

    def format(self) -> str:
        """
        Format the expression with a marker under the error column.

        Returns:
            Two lines: the source and a caret, e.g. "2 $ 3" / "  ^"
        """
        column = min(max(self.column, 0), len(self.source))
        return f"{self.source}\n{' ' * column}^"
