"""Numeric utilities for consistent float handling."""

import math
import numbers
from decimal import Decimal


def F(x) -> float:
    """
    Robust float conversion for ints/floats/strings/Decimals.

    Single source of truth for numeric conversions of price data.
    Rejects bools and non-finite values so NaN never enters a series.

    Args:
        x: Value to convert (int, float, str, or Decimal)

    Returns:
        float: Converted value

    Raises:
        TypeError: If type is not supported
        ValueError: If the value is not finite
    """
    if isinstance(x, bool):
        raise TypeError(f"Unsupported numeric type: {type(x)}")
    if isinstance(x, (numbers.Real, Decimal)):
        value = float(x)
    elif isinstance(x, str):
        value = float(x.strip())
    else:
        raise TypeError(f"Unsupported numeric type: {type(x)}")
    if not math.isfinite(value):
        raise ValueError(f"Non-finite numeric value: {x!r}")
    return value


def is_finite_number(x) -> bool:
    """True for real, finite numbers (bools and Decimals excluded)."""
    if isinstance(x, bool) or not isinstance(x, numbers.Real):
        return False
    return math.isfinite(x)
