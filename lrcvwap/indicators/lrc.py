"""
Linear Regression Channel (LRC).

Midline from the rolling regression plus three standard-deviation band
tiers, and midline crossing detection used by the LRC_CROSS signal.
"""
import logging
from typing import List, Optional, Tuple

import pandas as pd

from .base import Indicator
from .linreg import RollingLinearRegression, REGRESSION_COLUMNS
from ..shared.defaults import (
    LRC_LENGTH, LRC_BAND_MULT, LRC_BAND_MULT_2, LRC_BAND_MULT_3,
    LRC_LEGACY_OFFSET_BARS,
)

logger = logging.getLogger(__name__)

TIER_COUNT = 3


class LRCChannel(Indicator):
    """Regression midline with upper/lower bands at three multipliers."""

    def __init__(
        self,
        length: int = LRC_LENGTH,
        band_mult: float = LRC_BAND_MULT,
        band_mult2: float = LRC_BAND_MULT_2,
        band_mult3: float = LRC_BAND_MULT_3,
        legacy_mid_offset: bool = False,
    ):
        """
        Initialize the channel.

        Args:
            length: Regression window (>= 2)
            band_mult: Tier 1 multiplier of the residual std
            band_mult2: Tier 2 multiplier (EARLY / STRONG threshold)
            band_mult3: Tier 3 multiplier (SUPER threshold)
            legacy_mid_offset: Shift the midline by slope * 1.0 (cosmetic,
                matches an old chart overlay; bands follow the shifted midline)
        """
        self.regression = RollingLinearRegression(length)
        self.multipliers = (band_mult, band_mult2, band_mult3)
        self.legacy_mid_offset = legacy_mid_offset

    @property
    def length(self) -> int:
        return self.regression.length

    @property
    def columns(self) -> List[str]:
        cols = list(REGRESSION_COLUMNS)
        for tier in range(1, TIER_COUNT + 1):
            cols += [f"upper{tier}", f"lower{tier}"]
        return cols

    def calculate(self, candles: pd.DataFrame) -> pd.DataFrame:
        """Calculate regression columns and band tiers from candle closes."""
        reg = self.regression.calculate(candles)
        if self.legacy_mid_offset:
            reg["mid"] = reg["mid"] - reg["slope"] * LRC_LEGACY_OFFSET_BARS
        bands = self.calculate_bands(reg["mid"], reg["residual_std"])
        return pd.concat([reg, bands], axis=1)

    def calculate_bands(self, mid: pd.Series, residual_std: pd.Series) -> pd.DataFrame:
        """
        Band tiers: upperK = mid + kK * residual_std, lowerK = mid - kK * residual_std.

        NaN in mid or residual_std propagates to every tier.
        """
        cols = {}
        for tier, mult in enumerate(self.multipliers, start=1):
            cols[f"upper{tier}"] = mid + mult * residual_std
            cols[f"lower{tier}"] = mid - mult * residual_std
        return pd.DataFrame(cols, index=mid.index)


def cross_masks(
    close: pd.Series,
    mid: pd.Series,
    slope: Optional[pd.Series] = None,
    simple_mode: bool = False,
) -> Tuple[pd.Series, pd.Series]:
    """
    Boolean masks of midline crosses (long, short).

    Long: close[i-1] <= mid[i-1] and close[i] > mid[i].
    Short: close[i-1] >= mid[i-1] and close[i] < mid[i].
    Both require mid[i-1] and mid[i] defined. When slope is given and
    simple_mode is False, long also needs slope[i] > 0 and short slope[i] < 0.
    """
    prev_close = close.shift(1)
    prev_mid = mid.shift(1)
    defined = mid.notna() & prev_mid.notna()

    long_cross = defined & (prev_close <= prev_mid) & (close > mid)
    short_cross = defined & (prev_close >= prev_mid) & (close < mid)

    if slope is not None and not simple_mode:
        long_cross = long_cross & (slope > 0)
        short_cross = short_cross & (slope < 0)

    return long_cross, short_cross


def detect_crosses(
    close: pd.Series,
    mid: pd.Series,
    slope: Optional[pd.Series] = None,
    simple_mode: bool = False,
) -> Tuple[List[int], List[int]]:
    """
    Detect close/midline crosses.

    Args:
        close: Close prices
        mid: LRC midline (same index as close)
        slope: Regression slope; enables the slope gate unless simple_mode
        simple_mode: Bypass the slope gate entirely

    Returns:
        (long_indices, short_indices): ascending bar positions
    """
    long_cross, short_cross = cross_masks(close, mid, slope, simple_mode)
    long_idx = [int(i) for i in long_cross.to_numpy().nonzero()[0]]
    short_idx = [int(i) for i in short_cross.to_numpy().nonzero()[0]]
    return long_idx, short_idx
