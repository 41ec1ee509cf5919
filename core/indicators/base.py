"""
Base indicator helpers shared by all indicator stages.
"""

import numbers
from typing import Iterable, List, Union

from ..models.bands import InvalidParameterError, SourceField
from ..models.ohlcv import Bar


def extract_source(bars: Iterable[Bar], source: Union[SourceField, str]) -> List[float]:
    """
    Project one price field out of each bar.

    Args:
        bars: Bars in temporal order
        source: Field to extract (open/high/low/close)

    Returns:
        List of the same length as ``bars``, element i = field of bar i
    """
    if not isinstance(source, SourceField):
        try:
            source = SourceField(str(source).lower())
        except ValueError:
            raise InvalidParameterError(f"Unknown source field: {source!r}") from None

    name = source.value
    return [getattr(bar, name) for bar in bars]


def validate_length(length: int) -> None:
    """Window lengths must be positive integers."""
    if isinstance(length, bool) or not isinstance(length, numbers.Integral) or length < 1:
        raise InvalidParameterError(f"length must be an integer >= 1, got {length!r}")
