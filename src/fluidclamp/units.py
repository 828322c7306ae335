"""
Numeric rules shared by the resolver.

    parse_size          clamp() bound → pixels (px, rem, em)
    parse_fluid_number  strict @fluid() argument → number
    round_half_away     fixed-precision rounding used for calc() output
    format_number       shortest decimal text, never exponent notation

Every parser here returns None for input it does not accept. None of them
raise on malformed CSS.
"""

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional


# 1rem and 1em are both taken as 16px. For em this is an approximation:
# a real em depends on the parent element's font size.
PX_PER_REM = 16

_SIZE_RE = re.compile(r'^([0-9.]+)(px|rem|em)$')

# Canonical decimal: no leading zeros, no trailing fractional zeros,
# no exponent, no explicit plus sign.
_CANONICAL_NUMBER_RE = re.compile(r'^-?(0|[1-9][0-9]*)(\.[0-9]*[1-9])?$')

# Wide enough to quantize any finite float to a handful of decimals
_ROUNDING_CONTEXT = Context(prec=400)


def parse_size(token: str) -> Optional[float]:
    """
    Parse a clamp() bound such as ``16px``, ``1rem`` or ``0.5em``.

    Args:
        token: Size text; surrounding whitespace is ignored

    Returns:
        Size in pixels, or None for any other unit or malformed number
    """
    match = _SIZE_RE.match(token.strip())
    if not match:
        return None

    try:
        number = float(match.group(1))
    except ValueError:
        # e.g. "1.2.3px" or ".px"
        return None
    if not math.isfinite(number):
        return None

    unit = match.group(2)
    if unit == "px":
        return number
    return number * PX_PER_REM


def parse_fluid_number(token: str) -> Optional[float]:
    """
    Parse an @fluid() argument, accepting canonical decimals only.

    The token must be exactly what format_number() prints for the parsed
    value. So ``320``, ``-4`` and ``0.5`` are accepted while ``22rq3112``,
    ``0320``, ``1.50``, ``+1``, ``-0``, ``1e3`` and ``.5`` are rejected.

    Returns:
        The number, or None if the token is not a canonical decimal
    """
    if not _CANONICAL_NUMBER_RE.match(token):
        return None

    number = float(token)
    if not math.isfinite(number):
        return None
    if format_number(number) != token:
        # "-0", or more digits than a float keeps
        return None
    return number


def round_half_away(value: float, places: int = 5) -> float:
    """
    Round to ``places`` decimals, halves away from zero.

    The float is rounded at its exact binary value, so 1.234565 (stored as
    1.23456499999...) becomes 1.23456.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(
        quantum, rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT
    )
    return float(rounded)


def format_number(value: float) -> str:
    """
    Format a number the way it should appear in CSS output.

    Integral values print without a fraction (``16``), others use the
    shortest text that reads back to the same float (``8.72727``).
    Negative zero prints as ``0``.
    """
    if value == 0:
        return "0"
    if float(value).is_integer():
        return str(int(value))

    text = repr(float(value))
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


__all__ = [
    "PX_PER_REM",
    "parse_size",
    "parse_fluid_number",
    "round_half_away",
    "format_number",
]
