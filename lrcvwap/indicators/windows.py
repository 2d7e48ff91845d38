"""
Trailing-window helpers shared by the indicators.

Every helper returns an array/Series aligned to its input with NaN for the
bars before the window is full, so callers never have to re-align.
"""
import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view


def trailing_windows(values: np.ndarray, window: int) -> np.ndarray:
    """
    View of all full trailing windows, shape (len(values) - window + 1, window).

    Row j covers values[j : j + window], i.e. the window ending at bar j + window - 1.
    Callers must check len(values) >= window first.
    """
    return sliding_window_view(np.asarray(values, dtype=float), window)


def pad_front(result: np.ndarray, length: int) -> np.ndarray:
    """Left-pad a per-window result with NaN back to the full series length."""
    out = np.full(length, np.nan)
    if len(result):
        out[length - len(result):] = result
    return out


def rolling_sum(values: np.ndarray, window: int) -> np.ndarray:
    """Exact per-window sum (no running add/remove drift)."""
    n = len(values)
    if window < 1 or n < window:
        return np.full(n, np.nan)
    return pad_front(trailing_windows(values, window).sum(axis=1), n)


def rolling_std(values: np.ndarray, window: int, ddof: int = 0) -> np.ndarray:
    """Per-window standard deviation; ddof=0 is the population estimator."""
    n = len(values)
    if window < 1 or n < window or window - ddof < 1:
        return np.full(n, np.nan)
    return pad_front(trailing_windows(values, window).std(axis=1, ddof=ddof), n)


def sma(values: pd.Series, period: int) -> pd.Series:
    """Simple moving average; NaN until `period` values are available."""
    return values.rolling(period, min_periods=period).mean()


def seeded_ema(values: pd.Series, period: int) -> pd.Series:
    """
    Exponential moving average seeded with the SMA of the first `period` values.

    alpha = 2 / (period + 1). The first defined value is at position period - 1.
    """
    out = pd.Series(np.nan, index=values.index, dtype=float)
    if period < 1 or len(values) < period:
        return out
    tail = values.iloc[period - 1:].astype(float).copy()
    tail.iloc[0] = values.iloc[:period].mean()
    out.iloc[period - 1:] = tail.ewm(alpha=2.0 / (period + 1), adjust=False).mean().to_numpy()
    return out
