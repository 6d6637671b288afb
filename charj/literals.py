"""
Literal evaluation for token payloads.

Integer literals arrive as `(mantissa, exponent)` digit strings and are
evaluated exactly: Python ints have no width, so `3e100` is the 101 digit
integer, not a float approximation.
"""

from __future__ import annotations

# Stays below the smallest value `sys.set_int_max_str_digits` accepts, so a
# single int() call never trips the interpreter's conversion limit.
_DIGIT_CHUNK = 600


def _digits_to_int(text: str) -> int:
    digits = text.replace("_", "")
    if len(digits) <= _DIGIT_CHUNK:
        return int(digits, 10)
    value = 0
    for idx in range(0, len(digits), _DIGIT_CHUNK):
        chunk = digits[idx : idx + _DIGIT_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk, 10)
    return value


def parse_integer(mantissa: str, exponent: str = "") -> int:
    """
    Evaluate a number token payload.

    Underscore separators are ignored in both parts. An empty exponent means
    the literal is the mantissa itself; otherwise it is `mantissa * 10**exponent`.
    """
    value = _digits_to_int(mantissa)
    if not exponent:
        return value
    return value * 10 ** _digits_to_int(exponent)


def parse_string(payload: str) -> str:
    # Escapes are left as written; the token source owns string contents.
    return payload


__all__ = ["parse_integer", "parse_string"]
