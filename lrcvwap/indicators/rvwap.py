"""
Rolling VWAP with volatility-adjusted bands.

Port of the Pine logic:
    rvwap  = ta.vwma(hlc3, win)
    volAdj = ta.ema(ta.tr, 100)
    devNew = math.avg(volAdj, ta.stdev(hlc3, win))
    ubN/lbN = rvwap +/- devNew * multN
plus the SMA / EMA of close drawn alongside it.
"""
import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from .base import Indicator
from .windows import rolling_sum, rolling_std, sma, seeded_ema
from ..shared.defaults import (
    VWAP_WINDOW, VWAP_SMA_LENGTH, VWAP_EMA_LENGTH, VWAP_ATR_PERIOD, VWAP_BAND_MULTS,
)

logger = logging.getLogger(__name__)


def representative_price(candles: pd.DataFrame) -> pd.Series:
    """hlc3 = (high + low + close) / 3."""
    return (candles["high"] + candles["low"] + candles["close"]) / 3


def true_range(candles: pd.DataFrame) -> pd.Series:
    """
    True range per bar.

    TR[i] = max(high - low, |high - close[i-1]|, |low - close[i-1]|);
    the first bar has no previous close, so TR[0] = high - low.
    """
    high, low = candles["high"], candles["low"]
    prev_close = candles["close"].shift(1)
    tr = pd.concat([
        high - low,
        (high - prev_close).abs(),
        (low - prev_close).abs(),
    ], axis=1).max(axis=1)
    if len(tr):
        tr.iloc[0] = high.iloc[0] - low.iloc[0]
    return tr


def volume_weights(candles: pd.DataFrame) -> Tuple[pd.Series, bool]:
    """
    Weights for the volume-weighted average.

    If no candle in the whole series has volume > 0, every weight is 1 and
    the VWMA degrades to a plain moving average. Otherwise the weight is the
    bar volume, and a bar with missing volume weighs 1.

    Returns:
        (weights, uses_volume)
    """
    volume = candles["volume"] if "volume" in candles.columns else pd.Series(np.nan, index=candles.index)
    uses_volume = bool((volume > 0).any())
    if not uses_volume:
        return pd.Series(1.0, index=candles.index), False
    return volume.fillna(1.0).astype(float), True


class RVWAPEngine(Indicator):
    """Rolling VWAP, close SMA/EMA and volatility-adjusted band tiers."""

    def __init__(
        self,
        window: int = VWAP_WINDOW,
        sma_length: int = VWAP_SMA_LENGTH,
        ema_length: int = VWAP_EMA_LENGTH,
        atr_period: int = VWAP_ATR_PERIOD,
        band_mults: Sequence[float] = VWAP_BAND_MULTS,
    ):
        if window < 1:
            raise ValueError(f"VWAP window must be >= 1, got {window}")
        if sma_length < 1 or ema_length < 1:
            raise ValueError(
                f"SMA/EMA lengths must be >= 1, got sma={sma_length}, ema={ema_length}"
            )
        if atr_period < 1:
            raise ValueError(f"ATR period must be >= 1, got {atr_period}")
        if not band_mults:
            raise ValueError("At least one VWAP band multiplier is required")
        self.window = window
        self.sma_length = sma_length
        self.ema_length = ema_length
        self.atr_period = atr_period
        self.band_mults = tuple(float(m) for m in band_mults)

    @property
    def columns(self) -> List[str]:
        cols = ["hlc3", "rvwap", "sma", "ema", "true_range", "vol_adj", "price_stdev", "dev"]
        for tier in range(1, len(self.band_mults) + 1):
            cols += [f"ub{tier}", f"lb{tier}"]
        return cols

    def calculate_rvwap(self, candles: pd.DataFrame) -> pd.Series:
        """Volume-weighted moving average of hlc3 over the window (NaN if weight sum is 0)."""
        price = representative_price(candles).to_numpy(dtype=float)
        weights, _ = volume_weights(candles)
        w = weights.to_numpy(dtype=float)
        weighted_sum = rolling_sum(price * w, self.window)
        weight_sum = rolling_sum(w, self.window)
        rvwap = np.full(len(price), np.nan)
        np.divide(weighted_sum, weight_sum, out=rvwap, where=weight_sum > 0)
        return pd.Series(rvwap, index=candles.index)

    def calculate_volatility(self, candles: pd.DataFrame) -> pd.DataFrame:
        """
        devNew: average of the true-range EMA and the hlc3 standard deviation.

        The EMA period is min(atr_period, number of bars); the hlc3 standard
        deviation is the population estimator over the VWAP window.
        """
        tr = true_range(candles)
        period = min(self.atr_period, len(candles))
        vol_adj = seeded_ema(tr, period)
        hlc3 = representative_price(candles)
        price_stdev = pd.Series(
            rolling_std(hlc3.to_numpy(dtype=float), self.window, ddof=0),
            index=candles.index,
        )
        return pd.DataFrame({
            "true_range": tr,
            "vol_adj": vol_adj,
            "price_stdev": price_stdev,
            "dev": (vol_adj + price_stdev) / 2,
        }, index=candles.index)

    def calculate_bands(self, rvwap: pd.Series, dev: pd.Series) -> pd.DataFrame:
        """ubK = rvwap + multK * dev, lbK = rvwap - multK * dev for each configured tier."""
        cols = {}
        for tier, mult in enumerate(self.band_mults, start=1):
            cols[f"ub{tier}"] = rvwap + dev * mult
            cols[f"lb{tier}"] = rvwap - dev * mult
        return pd.DataFrame(cols, index=rvwap.index)

    def calculate(self, candles: pd.DataFrame) -> pd.DataFrame:
        """Calculate RVWAP, close SMA/EMA, volatility and bands."""
        if len(candles) == 0:
            return pd.DataFrame({c: pd.Series(dtype=float) for c in self.columns}, index=candles.index)

        _, uses_volume = volume_weights(candles)
        if not uses_volume:
            logger.debug("No candle carries volume; RVWAP falls back to an unweighted average")

        close = candles["close"].astype(float)
        rvwap = self.calculate_rvwap(candles)
        volatility = self.calculate_volatility(candles)
        bands = self.calculate_bands(rvwap, volatility["dev"])

        base = pd.DataFrame({
            "hlc3": representative_price(candles),
            "rvwap": rvwap,
            "sma": sma(close, self.sma_length),
            "ema": seeded_ema(close, self.ema_length),
        }, index=candles.index)
        return pd.concat([base, volatility, bands], axis=1)
