"""
OHLCV data models for price bars and time series.
"""

import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

from ..utils.numeric import F


@dataclass(frozen=True)
class Bar:
    """Single OHLCV bar (immutable).

    Prices are not checked against each other (high >= low etc.); malformed
    bars flow through to the indicators unchanged.
    """
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self):
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, numbers.Integral):
            raise TypeError("Bar timestamp must be an integer epoch")
        object.__setattr__(self, 'timestamp', int(self.timestamp))
        for name in ('open', 'high', 'low', 'close', 'volume'):
            object.__setattr__(self, name, F(getattr(self, name)))

    @classmethod
    def from_dict(cls, record: dict) -> 'Bar':
        """Build a bar from a plain record with OHLCV keys."""
        return cls(
            timestamp=int(record['timestamp']),
            open=record['open'],
            high=record['high'],
            low=record['low'],
            close=record['close'],
            volume=record.get('volume', 0),
        )

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp,
            'open': self.open,
            'high': self.high,
            'low': self.low,
            'close': self.close,
            'volume': self.volume,
        }


@dataclass(frozen=True)
class OHLCV:
    """Time series of OHLCV bars, strictly increasing by timestamp."""
    symbol: str
    bars: Tuple[Bar, ...]
    timeframe: str

    def __post_init__(self):
        object.__setattr__(self, 'bars', tuple(self.bars))
        for i in range(1, len(self.bars)):
            if self.bars[i].timestamp <= self.bars[i - 1].timestamp:
                raise ValueError(
                    f"Bar {i}: timestamp {self.bars[i].timestamp} not after "
                    f"{self.bars[i - 1].timestamp}"
                )

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self):
        return iter(self.bars)

    def __getitem__(self, index):
        return self.bars[index]

    @property
    def latest_bar(self) -> Optional[Bar]:
        """Get the most recent bar."""
        return self.bars[-1] if self.bars else None

    @property
    def length(self) -> int:
        """Number of bars."""
        return len(self.bars)

    @property
    def timestamps(self) -> Tuple[int, ...]:
        return tuple(bar.timestamp for bar in self.bars)
