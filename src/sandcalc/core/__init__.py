"""Core sandcalc functionality: IR, tokenizer, parser, evaluator, constants, manifest loading."""

from . import ir
from .constants import BUILTIN_CONSTANTS, build_constant_table
from .errors import (
    CalcError,
    CalcSyntaxError,
    ErrorContext,
    ManifestError,
)
from .expression_lang import calculate, evaluate, parse, parse_expr, tokenize
from .manifest import CalcManifest, load_manifest, resolve_manifest_path

__all__ = [
    "ir",
    "BUILTIN_CONSTANTS",
    "build_constant_table",
    "CalcError",
    "CalcSyntaxError",
    "ErrorContext",
    "ManifestError",
    "calculate",
    "evaluate",
    "parse",
    "parse_expr",
    "tokenize",
    "CalcManifest",
    "load_manifest",
    "resolve_manifest_path",
]
