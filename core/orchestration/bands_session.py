"""
Bands session: indicator state for one chart instance.

Every change to data or parameters triggers exactly one full recompute via
``compute_bands``. Style changes never recompute.
"""

import logging
from dataclasses import replace
from typing import Optional

from ..indicators.bollinger import compute_bands
from ..models.bands import BandSeries, BollingerParams
from ..models.config import BandStyle
from ..models.ohlcv import OHLCV

logger = logging.getLogger(__name__)


class BandsSession:
    def __init__(
        self,
        series: Optional[OHLCV] = None,
        params: Optional[BollingerParams] = None,
        style: Optional[BandStyle] = None,
        enabled: bool = True,
    ):
        self.series = series
        self.params = params or BollingerParams()
        self.style = style or BandStyle()
        self.enabled = enabled
        self.recompute_count = 0
        self._bands: Optional[BandSeries] = None
        self._recompute()

    def _recompute(self) -> None:
        if not self.enabled or self.series is None:
            self._bands = None
            return
        self._bands = compute_bands(self.series, self.params)
        self.recompute_count += 1
        logger.debug("bands_session_recomputed", extra={
            "symbol": self.series.symbol,
            "params_hash": self._bands.params_hash,
            "recompute_count": self.recompute_count,
        })

    def set_series(self, series: OHLCV) -> Optional[BandSeries]:
        self.series = series
        self._recompute()
        return self._bands

    def update_params(self, **changes) -> Optional[BandSeries]:
        """
        Replace some parameters and recompute.

        Invalid values raise InvalidParameterError and leave the session as it was.
        """
        new_params = replace(self.params, **changes)
        if new_params == self.params:
            return self._bands
        self.params = new_params
        self._recompute()
        return self._bands

    def update_style(self, style: BandStyle) -> None:
        self.style = style

    def enable(self) -> Optional[BandSeries]:
        """Add the overlay to the chart."""
        if not self.enabled:
            self.enabled = True
            self._recompute()
        return self._bands

    def disable(self) -> None:
        """Remove the overlay; computed bands are discarded."""
        self.enabled = False
        self._bands = None

    @property
    def bands(self) -> Optional[BandSeries]:
        return self._bands
