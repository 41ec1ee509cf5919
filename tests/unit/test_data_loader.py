"""Tests for infra.data.data_loader.

Covers:
- JSON list and {"bars": [...]} payloads
- CSV with epoch and ISO timestamps
- Synthetic generation
- Validation failures (ordering, duplicates, non-numeric fields)
"""

import json
import logging
from pathlib import Path

import pytest

from core.models.ohlcv import OHLCV
from infra.data.data_loader import DataLoader, DataSource, validate_bars


def _records(n=5):
    return [
        {"timestamp": 1_700_000_000 + 60 * i, "open": 10.0 + i, "high": 11.0 + i,
         "low": 9.0 + i, "close": 10.5 + i, "volume": 100.0}
        for i in range(n)
    ]


def _write_json(tmp_path: Path, payload) -> str:
    path = tmp_path / "ohlcv.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


class TestValidateBars:

    def test_valid_records(self):
        assert validate_bars(_records()) == (True, [])

    def test_empty_is_valid(self):
        assert validate_bars([]) == (True, [])

    def test_unordered(self):
        records = _records()
        records[2], records[3] = records[3], records[2]
        ok, errors = validate_bars(records)
        assert not ok
        assert any("chronological" in e for e in errors)

    def test_duplicates(self):
        records = _records()
        records[1]["timestamp"] = records[0]["timestamp"]
        ok, errors = validate_bars(records)
        assert not ok
        assert "Duplicate timestamps found" in errors

    def test_non_numeric_price(self):
        records = _records()
        records[0]["close"] = "abc"
        records[1]["volume"] = float("nan")
        ok, errors = validate_bars(records)
        assert not ok
        assert errors == [
            "Bar 0: close not a finite number",
            "Bar 1: volume not a finite number",
        ]

    def test_missing_timestamp(self):
        records = _records(2)
        del records[1]["timestamp"]
        ok, errors = validate_bars(records)
        assert not ok
        assert errors == ["Bar 1: missing or non-numeric timestamp"]

    def test_fractional_timestamps(self):
        records = _records(2)
        records[0]["timestamp"] = 1.2
        records[1]["timestamp"] = 1.7
        ok, errors = validate_bars(records)
        assert not ok
        assert errors == [
            "Bar 0: timestamp 1.2 is not a whole number",
            "Bar 1: timestamp 1.7 is not a whole number",
        ]

    def test_whole_float_timestamp_accepted(self):
        records = _records(2)
        records[0]["timestamp"] = float(records[0]["timestamp"])
        assert validate_bars(records) == (True, [])

    def test_inconsistent_range_only_warns(self, caplog):
        records = _records(2)
        records[1]["high"] = 0.0
        with caplog.at_level(logging.WARNING):
            ok, errors = validate_bars(records)
        assert ok and errors == []
        assert "ohlc_range_inconsistent" in caplog.text


class TestJsonSource:

    def test_list_payload(self, tmp_path):
        path = _write_json(tmp_path, _records())
        series = DataLoader({"source": "json", "path": path}).fetch_ohlcv("BTCUSDT", "1m")

        assert isinstance(series, OHLCV)
        assert series.symbol == "BTCUSDT"
        assert series.length == 5
        assert series.bars[0].close == 10.5

    def test_bars_payload_and_count(self, tmp_path):
        path = _write_json(tmp_path, {"bars": _records(10)})
        series = DataLoader({"source": "json", "path": path}).fetch_ohlcv("BTCUSDT", "1m", count=3)

        assert series.length == 3
        assert series.bars[0].timestamp == 1_700_000_000 + 60 * 7

    def test_missing_file(self, tmp_path):
        loader = DataLoader({"source": "json", "path": str(tmp_path / "nope.json")})
        assert loader.fetch_ohlcv("BTCUSDT", "1m") is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert DataLoader({"source": "json", "path": str(path)}).fetch_ohlcv("X", "1m") is None

    def test_invalid_records(self, tmp_path):
        records = _records()
        records.reverse()
        path = _write_json(tmp_path, records)
        assert DataLoader({"source": "json", "path": path}).fetch_ohlcv("X", "1m") is None


class TestCsvSource:

    def test_epoch_timestamps(self, tmp_path):
        path = tmp_path / "ohlcv.csv"
        lines = ["Timestamp,Open,High,Low,Close,Volume"]
        for rec in _records(4):
            lines.append(f"{rec['timestamp']},{rec['open']},{rec['high']},{rec['low']},{rec['close']},{rec['volume']}")
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")

        series = DataLoader({"source": "csv", "path": str(path)}).fetch_ohlcv("ETHUSDT", "1m")

        assert series.length == 4
        assert series.timestamps[0] == 1_700_000_000
        assert series.bars[3].high == 14.0

    def test_iso_timestamps_without_volume(self, tmp_path):
        path = tmp_path / "ohlcv.csv"
        path.write_text(
            "datetime,open,high,low,close\n"
            "2024-01-01T00:00:00Z,1,2,0.5,1.5\n"
            "2024-01-01T00:01:00Z,1.5,2.5,1,2\n",
            encoding="utf-8",
        )

        series = DataLoader({"source": "csv", "path": str(path)}).fetch_ohlcv("ETHUSDT", "1m")

        assert series.timestamps == (1704067200, 1704067260)
        assert series.bars[0].volume == 0.0

    def test_missing_price_column(self, tmp_path):
        path = tmp_path / "ohlcv.csv"
        path.write_text("timestamp,open,high,low\n1,1,2,0\n", encoding="utf-8")
        assert DataLoader({"source": "csv", "path": str(path)}).fetch_ohlcv("X", "1m") is None

    @pytest.mark.parametrize("content", [
        "timestamp,open,high,low,close\n1,1,2,0,1\n,1,2,0,1\n",
        "date,open,high,low,close\nnot-a-date,1,2,0,1\n",
        "timestamp,open,high,low,close\n1.2,1,2,0,1\n1.7,1,2,0,1\n",
    ], ids=["empty_epoch", "unparseable_date", "fractional_epoch"])
    def test_bad_timestamp_cell(self, tmp_path, content, caplog):
        path = tmp_path / "ohlcv.csv"
        path.write_text(content, encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            series = DataLoader({"source": "csv", "path": str(path)}).fetch_ohlcv("X", "1m")
        assert series is None
        assert "CSV conversion error" in caplog.text


class TestSyntheticSource:

    def test_generates_requested_count(self):
        loader = DataLoader({"source": "synthetic"})
        series = loader.fetch_ohlcv("SYN", "1m", count=50)

        assert loader.get_source() == "synthetic"
        assert series.length == 50

    def test_deterministic(self):
        config = {"source": "synthetic", "synthetic": {"base_price": 50.0, "interval_seconds": 300}}
        a = DataLoader(config).fetch_ohlcv("SYN", "5m", count=20)
        b = DataLoader(config).fetch_ohlcv("SYN", "5m", count=20)

        assert a == b
        assert a.timestamps[1] - a.timestamps[0] == 300


def test_unknown_source_rejected():
    with pytest.raises(ValueError):
        DataLoader({"source": "mt5"})
    assert DataSource("csv") is DataSource.CSV
