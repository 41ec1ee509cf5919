"""
Bollinger Bands indicator.

Pipeline:
1. Source extraction (open/high/low/close)
2. Basis = SMA(source, length); deviation = population stddev over same window
3. Upper/lower = basis +/- deviation * multiplier
4. Offset = shift band values by N bars, timestamps stay put
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from ..models.bands import BandPoint, BandSeries, BollingerParams
from ..models.config import ConfigHash
from ..models.ohlcv import Bar, OHLCV
from .base import extract_source
from .moving_average import trailing_sma, trailing_stddev

logger = logging.getLogger(__name__)

T = TypeVar('T')

Bands = Tuple[List[Optional[float]], List[Optional[float]], List[Optional[float]]]


def derive_bands(
    means: Sequence[Optional[float]],
    deviations: Sequence[Optional[float]],
    multiplier: float,
) -> Bands:
    """
    Derive basis/upper/lower from aligned mean and deviation series.

    Returns:
        (basis, upper, lower); all three None wherever either input is None
    """
    basis: List[Optional[float]] = []
    upper: List[Optional[float]] = []
    lower: List[Optional[float]] = []

    for mean, dev in zip(means, deviations):
        if mean is None or dev is None:
            basis.append(None)
            upper.append(None)
            lower.append(None)
            continue
        basis.append(mean)
        upper.append(mean + dev * multiplier)
        lower.append(mean - dev * multiplier)

    return basis, upper, lower


def apply_offset(values: Sequence[Optional[T]], offset: int) -> List[Optional[T]]:
    """
    Shift a series by ``offset`` bars.

    Positive offsets delay (value at i moves to i + offset), negative offsets
    advance. Vacated positions are None; values shifted past either end are
    dropped.
    """
    n = len(values)
    if offset == 0:
        return list(values)

    shifted: List[Optional[T]] = [None] * n
    if abs(offset) >= n:
        return shifted

    if offset > 0:
        for i in range(offset, n):
            shifted[i] = values[i - offset]
    else:
        step = -offset
        for i in range(n - step):
            shifted[i] = values[i + step]
    return shifted


def compute_bands(
    series: Union[OHLCV, Sequence[Bar]],
    params: Union[BollingerParams, Mapping[str, Any]],
) -> BandSeries:
    """
    Compute Bollinger Bands over a full OHLCV series.

    Args:
        series: Bars in temporal order (not sorted here)
        params: Indicator parameters, or a mapping accepted by
            ``BollingerParams.from_dict``

    Returns:
        BandSeries with one point per input bar, same timestamps and order

    Raises:
        InvalidParameterError: If params are outside the engine contract
    """
    if not isinstance(params, BollingerParams):
        params = BollingerParams.from_dict(dict(params))

    bars = series.bars if isinstance(series, OHLCV) else tuple(series)
    config_hash = ConfigHash.create(params.to_dict())

    if not bars:
        return BandSeries(points=(), params=params, config_hash=config_hash, metadata=_summarize(()))

    values = extract_source(bars, params.source)
    means = trailing_sma(values, params.length)
    deviations = trailing_stddev(values, params.length, means)
    basis, upper, lower = derive_bands(means, deviations, params.multiplier)

    basis = apply_offset(basis, params.offset)
    upper = apply_offset(upper, params.offset)
    lower = apply_offset(lower, params.offset)

    points = tuple(
        BandPoint(timestamp=bar.timestamp, basis=b, upper=u, lower=l)
        for bar, b, u, l in zip(bars, basis, upper, lower)
    )
    result = BandSeries(
        points=points,
        params=params,
        config_hash=config_hash,
        metadata=_summarize(points),
    )

    logger.debug("bands_computed", extra={
        "bars": len(bars),
        "length": params.length,
        "source": params.source.value,
        "multiplier": params.multiplier,
        "offset": params.offset,
        "present": result.metadata["present"],
    })
    return result


def _summarize(points: Sequence[BandPoint]) -> Dict[str, Any]:
    present = [i for i, p in enumerate(points) if p.is_present]
    return {
        "present": len(present),
        "absent": len(points) - len(present),
        "first_present_index": present[0] if present else None,
    }
