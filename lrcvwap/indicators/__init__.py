"""
Indicator calculation module.

Provides the channel and band indicators:
- Rolling linear regression (slope, midline, residual std)
- Linear Regression Channel with three band tiers and midline crosses
- Rolling VWAP with volatility-adjusted bands

All indicators follow a unified interface: candle frame in, index-aligned
DataFrame out, NaN where there is not yet enough history.
"""
from .base import Indicator
from .linreg import RollingLinearRegression
from .lrc import LRCChannel, cross_masks, detect_crosses
from .rvwap import RVWAPEngine, representative_price, true_range, volume_weights

__all__ = [
    'Indicator',
    'RollingLinearRegression',
    'LRCChannel',
    'cross_masks',
    'detect_crosses',
    'RVWAPEngine',
    'representative_price',
    'true_range',
    'volume_weights',
]
