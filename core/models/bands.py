"""
Bollinger Bands parameter and result models.
"""

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import ConfigHash


class InvalidParameterError(ValueError):
    """Raised when indicator parameters violate the engine contract."""


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


class SourceField(Enum):
    """Bar field fed into the indicator."""
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"


@dataclass(frozen=True)
class BollingerParams:
    """Indicator parameters (immutable per computation)."""
    length: int = 20
    source: SourceField = SourceField.CLOSE
    multiplier: float = 2.0
    offset: int = 0

    def __post_init__(self):
        if not _is_integer(self.length):
            raise InvalidParameterError(f"length must be an integer, got {self.length!r}")
        if self.length < 1:
            raise InvalidParameterError(f"length must be >= 1, got {self.length}")
        object.__setattr__(self, 'length', int(self.length))

        if not isinstance(self.source, SourceField):
            try:
                object.__setattr__(self, 'source', SourceField(str(self.source).lower()))
            except ValueError:
                raise InvalidParameterError(f"Unknown source field: {self.source!r}") from None

        if isinstance(self.multiplier, bool) or not isinstance(self.multiplier, numbers.Real):
            raise InvalidParameterError(f"multiplier must be a number, got {self.multiplier!r}")
        if not math.isfinite(self.multiplier) or self.multiplier <= 0:
            raise InvalidParameterError(f"multiplier must be finite and > 0, got {self.multiplier}")
        object.__setattr__(self, 'multiplier', float(self.multiplier))

        if not _is_integer(self.offset):
            raise InvalidParameterError(f"offset must be an integer, got {self.offset!r}")
        object.__setattr__(self, 'offset', int(self.offset))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BollingerParams':
        """Build params from a config mapping, defaults for missing keys."""
        defaults = cls()
        return cls(
            length=data.get('length', defaults.length),
            source=data.get('source', defaults.source),
            multiplier=data.get('multiplier', defaults.multiplier),
            offset=data.get('offset', defaults.offset),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'length': self.length,
            'source': self.source.value,
            'multiplier': self.multiplier,
            'offset': self.offset,
        }


@dataclass(frozen=True)
class BandPoint:
    """Band values at one bar; None marks an absent value."""
    timestamp: int
    basis: Optional[float]
    upper: Optional[float]
    lower: Optional[float]

    @property
    def is_present(self) -> bool:
        """True when all three bands carry a value."""
        return self.basis is not None and self.upper is not None and self.lower is not None

    @property
    def width(self) -> Optional[float]:
        if self.upper is None or self.lower is None:
            return None
        return self.upper - self.lower


@dataclass(frozen=True)
class BandSeries:
    """Band points aligned index-for-index with the input bars."""
    points: Tuple[BandPoint, ...]
    params: BollingerParams
    config_hash: Optional[ConfigHash] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'points', tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def params_hash(self) -> str:
        return self.config_hash.hash_value if self.config_hash else ''

    @property
    def timestamps(self) -> Tuple[int, ...]:
        return tuple(p.timestamp for p in self.points)

    @property
    def basis(self) -> List[Optional[float]]:
        return [p.basis for p in self.points]

    @property
    def upper(self) -> List[Optional[float]]:
        return [p.upper for p in self.points]

    @property
    def lower(self) -> List[Optional[float]]:
        return [p.lower for p in self.points]

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain dicts for the chart renderer (None serialises as JSON null)."""
        return [
            {'timestamp': p.timestamp, 'basis': p.basis, 'upper': p.upper, 'lower': p.lower}
            for p in self.points
        ]

    def to_frame(self):
        """
        Export to a pandas DataFrame indexed by timestamp.

        Absent values become NaN here and only here.
        """
        import pandas as pd

        frame = pd.DataFrame(
            self.to_records(),
            columns=['timestamp', 'basis', 'upper', 'lower'],
        )
        frame[['basis', 'upper', 'lower']] = frame[['basis', 'upper', 'lower']].astype(float)
        return frame.set_index('timestamp')
