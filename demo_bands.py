"""
Bollinger Bands Demo

Computes the bands over synthetic data and prints the tail of the series,
then changes a parameter the way a settings panel would.
"""

from configs import config_loader
from core.orchestration.bands_session import BandsSession
from infra.data.data_loader import DataLoader


def _fmt(value) -> str:
    return "       -" if value is None else f"{value:8.4f}"


def print_tail(session: BandsSession, rows: int = 8) -> None:
    bands = session.bands
    print(f"params={session.params.to_dict()} hash={bands.params_hash[:12]}")
    print(f"{'timestamp':>12} {'lower':>8} {'basis':>8} {'upper':>8}")
    for point in bands[-rows:]:
        print(f"{point.timestamp:>12} {_fmt(point.lower)} {_fmt(point.basis)} {_fmt(point.upper)}")
    print()


def main():
    """Run the demo."""
    series = DataLoader({"source": "synthetic"}).fetch_ohlcv("DEMO", "1m", count=60)

    session = BandsSession(series, config_loader.load_params(), config_loader.load_style())
    print_tail(session)

    # Advance 3 bars: the last three rows go empty
    session.update_params(offset=-3, multiplier=1.5)
    print_tail(session)

    print(f"Recomputes: {session.recompute_count}")


if __name__ == "__main__":
    main()
