"""
Range Parser

Turns a path parameter into a bounded integer. A parameter is either a
bare non-negative integer ("100") or an inclusive range ("50..150") that
resolves to one value drawn uniformly from [min, max].
"""

import random
import re
from dataclasses import dataclass
from typing import Optional

from .errors import BoundsError, ParseError, RangeFormatError

RANGE_SEPARATOR = ".."

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class ParsedValue:
    """A validated parameter value."""
    value: int
    is_range: bool = False
    requested_range: Optional[str] = None


def _parse_int(token: str, ceiling: int, name: str) -> int:
    if not _INT_PATTERN.fullmatch(token):
        raise ParseError(name, "invalid number")
    # More digits than the ceiling: out of bounds, and never handed to int()
    digits = token.lstrip("+-").lstrip("0")
    if len(digits) > len(str(ceiling)):
        if token.startswith("-"):
            raise BoundsError(name, "value must be non-negative")
        raise BoundsError(name, f"value exceeds maximum of {ceiling}")
    return int(token)


def _check_bounds(value: int, ceiling: int, name: str) -> int:
    if value < 0:
        raise BoundsError(name, f"value {value} must be non-negative")
    if value > ceiling:
        raise BoundsError(name, f"value {value} exceeds maximum of {ceiling}")
    return value


def parse_int_or_range(
    param: str,
    ceiling: int,
    name: str,
    rng: Optional[random.Random] = None,
) -> ParsedValue:
    """
    Parse a single value or a min..max range.

    Args:
        param: Raw parameter text
        ceiling: Largest accepted value (inclusive)
        name: Parameter name used in error messages
        rng: Random source used to sample ranges

    Returns:
        ParsedValue; for ranges the value is sampled from [min, max]

    Raises:
        ParseError: If a token is not an integer
        RangeFormatError: If the range has the wrong number of segments
        BoundsError: If a value is negative, min > max, or above ceiling
    """
    if RANGE_SEPARATOR not in param:
        value = _check_bounds(_parse_int(param, ceiling, name), ceiling, name)
        return ParsedValue(value=value)

    parts = param.split(RANGE_SEPARATOR)
    if len(parts) != 2:
        raise RangeFormatError(name, f"invalid range format {param!r}, expected min..max")

    low = _parse_int(parts[0], ceiling, name)
    high = _parse_int(parts[1], ceiling, name)
    _check_bounds(low, ceiling, name)
    _check_bounds(high, ceiling, name)
    if low > high:
        raise BoundsError(name, f"range minimum {low} is greater than maximum {high}")

    rng = rng or random
    return ParsedValue(
        value=rng.randint(low, high),
        is_range=True,
        requested_range=param,
    )
