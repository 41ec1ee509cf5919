"""
Data Loader: Switchable Source (JSON | CSV | Synthetic)

Provides unified interface for loading OHLCV series for the indicator engine.
"""

import json
import logging
import os
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.models.ohlcv import Bar, OHLCV
from core.utils.numeric import is_finite_number

logger = logging.getLogger(__name__)

PRICE_FIELDS = ("open", "high", "low", "close")


class DataSource(Enum):
    """Data source types."""
    SYNTHETIC = "synthetic"
    JSON = "json"
    CSV = "csv"


def validate_bars(records: List[Dict[str, Any]]) -> Tuple[bool, List[str]]:
    """
    Validate OHLCV records before building a series.

    Out-of-range OHLC relationships are logged as warnings only; they are
    passed through to the indicators unchanged.

    Args:
        records: List of OHLCV dicts

    Returns:
        Tuple of (is_valid, errors)
    """
    errors = []

    for i, rec in enumerate(records):
        if not isinstance(rec, dict):
            errors.append(f"Bar {i}: not an object")
            continue
        if not is_finite_number(rec.get("timestamp")):
            errors.append(f"Bar {i}: missing or non-numeric timestamp")
        elif not float(rec["timestamp"]).is_integer():
            errors.append(f"Bar {i}: timestamp {rec['timestamp']} is not a whole number")
        bad_fields = [name for name in PRICE_FIELDS if not is_finite_number(rec.get(name))]
        if "volume" in rec and not is_finite_number(rec["volume"]):
            bad_fields.append("volume")
        if bad_fields:
            errors.append(f"Bar {i}: {', '.join(bad_fields)} not a finite number")
            continue
        if rec["high"] < max(rec["open"], rec["close"]) or rec["low"] > min(rec["open"], rec["close"]):
            logger.warning("ohlc_range_inconsistent", extra={"index": i, "timestamp": rec["timestamp"]})

    if errors:
        return False, errors

    timestamps = [rec["timestamp"] for rec in records]
    if len(timestamps) != len(set(timestamps)):
        errors.append("Duplicate timestamps found")
    for i in range(1, len(timestamps)):
        if timestamps[i] <= timestamps[i - 1]:
            errors.append(f"Bar {i}: timestamp not in chronological order")

    return not errors, errors


class DataLoader:
    """
    Unified data loader with switchable sources.

    Supports:
    - JSON record files (list of {timestamp, open, high, low, close, volume})
    - CSV exports (column names normalised, time column parsed by pandas)
    - Synthetic data generation (demos and tests)
    """

    def __init__(self, config: Dict):
        """
        Initialize data loader.

        Args:
            config: Data loader config
                {
                  "source": "synthetic|json|csv",
                  "path": "...",
                  "synthetic": { "base_price": 100.0, "interval_seconds": 60 }
                }
        """
        self.config = config
        self.source = DataSource(config.get("source", "synthetic"))
        self.path = config.get("path")
        self.synthetic_config = config.get("synthetic", {})

        logger.info("Data loader initialized", extra={"source": self.source.value})

    def fetch_ohlcv(self, symbol: str, timeframe: str, count: Optional[int] = None) -> Optional[OHLCV]:
        """
        Fetch OHLCV series from configured source.

        Args:
            symbol: Symbol name (e.g., "BTCUSDT")
            timeframe: Timeframe (e.g., "1h")
            count: Keep only the last N bars (all when None)

        Returns:
            OHLCV series or None on failure
        """
        if self.source == DataSource.SYNTHETIC:
            records = self._fetch_synthetic(count or 100)
        elif self.source == DataSource.JSON:
            records = self._fetch_json()
        elif self.source == DataSource.CSV:
            records = self._fetch_csv()
        else:
            logger.error("Unknown data source", extra={"source": self.source})
            return None

        if records is None:
            return None
        if count is not None:
            records = records[-count:] if count > 0 else []

        return self.build_series(records, symbol, timeframe)

    @staticmethod
    def build_series(records: List[Dict[str, Any]], symbol: str, timeframe: str) -> Optional[OHLCV]:
        """Validate records and wrap them into an OHLCV series."""
        is_valid, errors = validate_bars(records)
        if not is_valid:
            logger.error("OHLCV validation failed", extra={
                "symbol": symbol,
                "errors": errors[:10],
                "error_count": len(errors),
            })
            return None

        bars = tuple(Bar.from_dict(rec) for rec in records)
        logger.info("OHLCV series loaded", extra={
            "symbol": symbol,
            "timeframe": timeframe,
            "bars": len(bars),
        })
        return OHLCV(symbol=symbol, bars=bars, timeframe=timeframe)

    def _fetch_synthetic(self, count: int) -> List[Dict]:
        """
        Generate deterministic synthetic OHLCV data.

        Args:
            count: Number of bars

        Returns:
            List of synthetic OHLCV dicts
        """
        base_price = float(self.synthetic_config.get("base_price", 100.0))
        interval = int(self.synthetic_config.get("interval_seconds", 60))
        start = int(self.synthetic_config.get("start_timestamp", 1_700_000_000))

        bars = []
        for i in range(count):
            # Simulate price movement
            open_price = base_price + (i % 20 - 10) * 0.05
            close_price = open_price + (i % 5 - 2) * 0.3

            bars.append({
                "timestamp": start + i * interval,
                "open": round(open_price, 4),
                "high": round(max(open_price, close_price) + 0.8, 4),
                "low": round(min(open_price, close_price) - 0.5, 4),
                "close": round(close_price, 4),
                "volume": 1000.0 + (i % 7) * 100,
            })
            base_price = close_price

        logger.info("Synthetic data generated", extra={"bars": count})
        return bars

    def _fetch_json(self) -> Optional[List[Dict]]:
        """
        Load OHLCV records from a JSON file.

        Accepts either a bare list of records or {"bars": [...]}.
        """
        if not self.path or not os.path.exists(self.path):
            logger.warning("JSON file not found", extra={"file": self.path})
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("JSON load error", extra={"file": self.path, "error": str(e)})
            return None

        records = data.get("bars", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            logger.error("JSON payload is not a list of bars", extra={"file": self.path})
            return None
        return records

    def _fetch_csv(self) -> Optional[List[Dict]]:
        """
        Load OHLCV records from a CSV file.

        Time column may be epoch seconds or any datetime format pandas parses.
        """
        import pandas as pd

        if not self.path or not os.path.exists(self.path):
            logger.error("CSV file not found", extra={"path": self.path})
            return None

        try:
            df = pd.read_csv(self.path)
        except (OSError, ValueError) as e:
            logger.error("CSV load error", extra={"path": self.path, "error": str(e)})
            return None

        # Standardize column names
        df.columns = [c.strip().lower() for c in df.columns]

        time_col = next((c for c in ["timestamp", "timestamp_utc", "time", "datetime", "date"] if c in df.columns), None)
        if time_col is None:
            logger.error("No timestamp column found in CSV", extra={"columns": list(df.columns)})
            return None
        missing = [c for c in PRICE_FIELDS if c not in df.columns]
        if missing:
            logger.error("CSV missing price columns", extra={"missing": missing})
            return None

        try:
            if pd.api.types.is_numeric_dtype(df[time_col]):
                raw = df[time_col]
                if (raw.dropna() % 1 != 0).any():
                    raise ValueError(f"{time_col} column has non-whole timestamps")
                timestamps = raw.astype("int64")
            else:
                parsed = pd.to_datetime(df[time_col], utc=True)
                timestamps = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)

            bars = []
            for ts, (_, row) in zip(timestamps, df.iterrows()):
                bars.append({
                    "timestamp": int(ts),
                    "open": float(row["open"]),
                    "high": float(row["high"]),
                    "low": float(row["low"]),
                    "close": float(row["close"]),
                    "volume": float(row["volume"]) if "volume" in df.columns else 0.0,
                })
        except (ValueError, TypeError) as e:
            logger.error("CSV conversion error", extra={"path": self.path, "error": str(e)})
            return None

        logger.info("CSV data loaded", extra={"bars": len(bars), "path": self.path})
        return bars

    def get_source(self) -> str:
        """Get current data source."""
        return self.source.value
