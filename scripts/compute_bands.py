#!/usr/bin/env python3
"""
Compute Bollinger Bands for an OHLCV file.

Loads bars from JSON or CSV, computes the bands with parameters from the
config (overridable on the command line) and writes the band series as JSON
for a chart renderer.

Usage (from repo root):
    python scripts/compute_bands.py --input data/ohlcv.json --length 20 --multiplier 2 \
                                    --offset 0 --output out/bands.json
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from configs import ConfigError, ConfigLoader
from core.indicators.bollinger import compute_bands
from core.models.bands import BollingerParams, InvalidParameterError, SourceField
from core.utils.log_format import setup_logging
from infra.data.data_loader import DataLoader

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute Bollinger Bands over an OHLCV file")
    parser.add_argument("--input", required=True, help="OHLCV file (.json or .csv)")
    parser.add_argument("--symbol", default="UNKNOWN")
    parser.add_argument("--timeframe", default="1m")
    parser.add_argument("--length", type=int, help="Window length in bars")
    parser.add_argument("--source", choices=[s.value for s in SourceField])
    parser.add_argument("--multiplier", type=float, help="Stddev multiplier")
    parser.add_argument("--offset", type=int, help="Bars to shift the bands (negative advances)")
    parser.add_argument("--config-dir", help="Directory holding bollinger.json")
    parser.add_argument("--output", help="Output JSON path (stdout when omitted)")
    parser.add_argument("--include-style", action="store_true", help="Embed display style in the output")
    parser.add_argument("--log-dir", help="Write JSON logs to this directory")
    return parser.parse_args(argv)


def resolve_params(args: argparse.Namespace, loader: ConfigLoader) -> BollingerParams:
    """Config defaults overridden by whatever was given on the command line."""
    params = loader.load_params().to_dict()
    for name in ("length", "source", "multiplier", "offset"):
        value = getattr(args, name)
        if value is not None:
            params[name] = value
    return BollingerParams.from_dict(params)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.log_dir:
        setup_logging("compute_bands", args.log_dir)

    try:
        loader = ConfigLoader(args.config_dir)
        params = resolve_params(args, loader)
    except (ConfigError, InvalidParameterError) as e:
        logger.error("parameter_error", extra={"error": str(e)})
        print(f"FAIL: {e}", file=sys.stderr)
        return 1

    suffix = Path(args.input).suffix.lower()
    source = "csv" if suffix == ".csv" else "json"
    series = DataLoader({"source": source, "path": args.input}).fetch_ohlcv(args.symbol, args.timeframe)
    if series is None:
        print(f"FAIL: could not load OHLCV data from {args.input}", file=sys.stderr)
        return 1

    bands = compute_bands(series, params)
    payload = {
        "symbol": series.symbol,
        "timeframe": series.timeframe,
        "params": params.to_dict(),
        "params_hash": bands.params_hash,
        "computed_at": bands.config_hash.timestamp,
        "bands": bands.to_records(),
    }
    if args.include_style:
        payload["style"] = loader.load_style().to_dict()

    text = json.dumps(payload, indent=2)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        logger.info("bands_written", extra={"output": str(out), "points": len(bands)})
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
