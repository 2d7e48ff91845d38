"""
Shared types and defaults for the indicator engine.

This module provides:
- Candle, Signal, SignalSide and SignalReason
- Centralized default values for all indicator parameters
"""
from .types import Candle, Signal, SignalSide, SignalReason
from .defaults import (
    LRC_LENGTH, LRC_BAND_MULT, LRC_BAND_MULT_2, LRC_BAND_MULT_3,
    VWAP_WINDOW, VWAP_SMA_LENGTH, VWAP_EMA_LENGTH, VWAP_ATR_PERIOD, VWAP_BAND_MULTS,
    USE_SLOPE_FILTER, SIMPLE_MODE, SIGNAL_SIDES,
    EXCURSION_BARS,
)

__all__ = [
    'Candle',
    'Signal',
    'SignalSide',
    'SignalReason',
    'LRC_LENGTH', 'LRC_BAND_MULT', 'LRC_BAND_MULT_2', 'LRC_BAND_MULT_3',
    'VWAP_WINDOW', 'VWAP_SMA_LENGTH', 'VWAP_EMA_LENGTH', 'VWAP_ATR_PERIOD', 'VWAP_BAND_MULTS',
    'USE_SLOPE_FILTER', 'SIMPLE_MODE', 'SIGNAL_SIDES',
    'EXCURSION_BARS',
]
