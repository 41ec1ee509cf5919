"""
Trailing window statistics: simple moving average and population stddev.
"""

import math
from typing import List, Optional, Sequence

from .base import validate_length


def trailing_sma(values: Sequence[float], length: int) -> List[Optional[float]]:
    """
    Compute trailing simple moving average.

    Args:
        values: Source values in temporal order
        length: Window size in bars

    Returns:
        List aligned with ``values``; None until ``length`` values are available
    """
    validate_length(length)
    length = int(length)

    means: List[Optional[float]] = []
    for i in range(len(values)):
        if i < length - 1:
            means.append(None)
            continue
        window = values[i - length + 1:i + 1]
        means.append(sum(window) / length)
    return means


def trailing_stddev(
    values: Sequence[float],
    length: int,
    means: Sequence[Optional[float]],
) -> List[Optional[float]]:
    """
    Compute trailing population standard deviation around ``means``.

    Divides by ``length`` (population formula), not ``length - 1``.

    Args:
        values: Source values in temporal order
        length: Window size in bars
        means: Moving average aligned with ``values``

    Returns:
        List aligned with ``values``; None where the window or mean is missing
    """
    validate_length(length)
    length = int(length)
    if len(means) != len(values):
        raise ValueError("means must be aligned with values")

    deviations: List[Optional[float]] = []
    for i in range(len(values)):
        mean = means[i]
        if i < length - 1 or mean is None:
            deviations.append(None)
            continue
        window = values[i - length + 1:i + 1]
        variance = sum((x - mean) ** 2 for x in window) / length
        deviations.append(math.sqrt(variance))
    return deviations
