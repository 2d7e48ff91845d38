"""
Candle data module.

Provides candle frame construction, validation, and loading from files
saved by the market-data service.
"""
from .loader import CandleLoader
from .preparation import (
    CANDLE_COLUMNS,
    CandleValidationError,
    candles_to_frame,
    normalize_candle_frame,
    validate_candles,
)

__all__ = [
    'CandleLoader',
    'CANDLE_COLUMNS',
    'CandleValidationError',
    'candles_to_frame',
    'normalize_candle_frame',
    'validate_candles',
]
