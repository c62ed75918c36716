"""
Named constants that identifiers in an expression resolve to.

The built-in table is fixed at import time. Projects may add their own
names through the ``[constants]`` table of ``sandcalc.toml``; the merged
table is built once per run and handed to the parser read-only.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from numbers import Real
from types import MappingProxyType

from sandcalc.core.errors import ManifestError

BUILTIN_CONSTANTS: Mapping[str, float] = MappingProxyType({"pi": math.pi})


def is_valid_constant_name(name: str) -> bool:
    """Only ASCII letters, matching what the tokenizer emits as an identifier."""
    return bool(name) and name.isascii() and name.isalpha()


def build_constant_table(extra: Mapping[str, float] | None = None) -> Mapping[str, float]:
    """Merge configured constants over the built-ins into a read-only mapping.

    Args:
        extra: Additional name -> value pairs, usually from a manifest.

    Returns:
        A new read-only mapping. The built-in table is returned unchanged
        when there is nothing to add.

    Raises:
        ManifestError: If a name is not a plain identifier, redefines a
            built-in, or maps to something other than a real number.
    """
    if not extra:
        return BUILTIN_CONSTANTS

    table = dict(BUILTIN_CONSTANTS)
    for name, value in extra.items():
        if not isinstance(name, str) or not is_valid_constant_name(name):
            raise ManifestError(f"Invalid constant name {name!r}: use ASCII letters only")
        if name in BUILTIN_CONSTANTS:
            raise ManifestError(f"Constant {name!r} is built in and cannot be redefined")
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ManifestError(
                f"Constant {name!r} must be a number, got {type(value).__name__}"
            )
        table[name] = float(value)

    return MappingProxyType(table)
