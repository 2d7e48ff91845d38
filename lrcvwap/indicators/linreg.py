"""
Rolling linear regression (Pine ta.linreg with offset 0).

For every bar with a full window, fits y = a*x + b by ordinary least squares
over the `length` most recent samples (x = 0 is the oldest sample) and
evaluates the line at x = length - 1.
"""
import logging
from typing import List

import numpy as np
import pandas as pd

from .base import Indicator
from .windows import trailing_windows, pad_front
from ..shared.defaults import LRC_LENGTH

logger = logging.getLogger(__name__)

REGRESSION_COLUMNS = ["slope", "intercept", "mid", "residual_std"]


class RollingLinearRegression(Indicator):
    """Per-bar OLS fit over a trailing window."""

    def __init__(self, length: int = LRC_LENGTH):
        if length < 2:
            raise ValueError(f"Regression length must be >= 2, got {length}")
        self.length = length

    @property
    def columns(self) -> List[str]:
        return list(REGRESSION_COLUMNS)

    def calculate(self, candles: pd.DataFrame) -> pd.DataFrame:
        """Fit the regression on candle closes."""
        return self.calculate_series(candles["close"])

    def calculate_series(self, src: pd.Series) -> pd.DataFrame:
        """
        Calculate slope, intercept, midline and residual std for a scalar series.

        residual_std uses the sample estimator (denominator length - 1).
        The fit is done in mean-centred form, which is algebraically the
        closed-form OLS solution but avoids cancellation on large prices.

        Returns:
            DataFrame with columns slope, intercept, mid, residual_std
            (NaN for bars before the window is full, or everywhere if the
            series is shorter than the window)
        """
        values = src.to_numpy(dtype=float)
        n = len(values)
        length = self.length

        if n < length:
            logger.debug(f"Series of {n} bars shorter than regression window {length}")
            nan = np.full(n, np.nan)
            return pd.DataFrame({c: nan.copy() for c in REGRESSION_COLUMNS}, index=src.index)

        windows = trailing_windows(values, length)
        x = np.arange(length, dtype=float)
        x_mean = x.mean()
        dx = x - x_mean
        sxx = dx @ dx

        y_mean = windows.mean(axis=1)
        slope = ((windows - y_mean[:, None]) @ dx) / sxx
        intercept = y_mean - slope * x_mean
        mid = slope * (length - 1) + intercept

        fitted = intercept[:, None] + slope[:, None] * x
        residual_std = (windows - fitted).std(axis=1, ddof=1)

        return pd.DataFrame(
            {
                "slope": pad_front(slope, n),
                "intercept": pad_front(intercept, n),
                "mid": pad_front(mid, n),
                "residual_std": pad_front(residual_std, n),
            },
            index=src.index,
        )
