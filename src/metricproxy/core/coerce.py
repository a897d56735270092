"""Coercion of located JSON values into float metric values."""

from __future__ import annotations
import re
from typing import Any

from .model import CoercionError

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_DIGITS = {
    10: re.compile(r"[+-]?[0-9]+"),
    16: re.compile(r"[+-]?[0-9a-fA-F]+"),
}


# longest digit run, leading zeros aside, that can still fit in 64 bits
_MAX_SIGNIFICANT = {10: 19, 16: 16}


def parse_int64(text: str, base: int) -> int:
    """Parse `text` as a signed 64-bit integer in `base` (10 or 16).

    Stricter than ``int()``: no surrounding whitespace, no underscores and
    no base prefix. Raise CoercionError on bad syntax or overflow.
    """
    if not _DIGITS[base].fullmatch(text):
        raise CoercionError(f"invalid syntax for base {base}: {text!r:.40}")
    sign = "-" if text[0] == "-" else ""
    digits = text.lstrip("+-").lstrip("0") or "0"
    if len(digits) > _MAX_SIGNIFICANT[base]:
        raise CoercionError(f"value out of range: {text!r:.40}")
    number = int(sign + digits, base)
    if not INT64_MIN <= number <= INT64_MAX:
        raise CoercionError(f"value out of range: {text!r}")
    return number


def _string_to_float(text: str) -> float:
    if text.startswith("0x"):
        # every leading '0' and 'x' goes, so "0x0" leaves nothing to parse
        return float(parse_int64(text.lstrip("0x"), 16))
    try:
        return float(parse_int64(text, 10))
    except CoercionError:
        pass
    return float(parse_int64(text, 16))


def to_float(value: Any) -> float:
    """Convert a JSON primitive into a float.

    Strings are read as decimal integers, falling back to hexadecimal
    (``0x`` prefixed or bare). Booleans become 1.0/0.0 and integers are
    returned as floats. Every other kind, floats and null included, yields
    0.0 without an error.
    """
    if isinstance(value, str):
        return _string_to_float(value)
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError as e:
            raise CoercionError(f"integer too large for a float: {value}") from e
    return 0.0
