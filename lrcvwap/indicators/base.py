"""
Base indicator interface.

All indicators should follow this pattern:
1. Calculate index-aligned columns from a candle frame
2. Provide values that the signal rules can interpret
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import pandas as pd


class Indicator(ABC):
    """
    Base class for all indicators.

    Indicators calculate values from candle data that can be used
    for signal generation. They do not generate signals directly.
    """

    @property
    @abstractmethod
    def columns(self) -> List[str]:
        """Names of the columns returned by calculate()."""
        pass

    @abstractmethod
    def calculate(self, candles: pd.DataFrame) -> pd.DataFrame:
        """
        Calculate indicator values from candle data.

        Args:
            candles: Validated candle frame (time, open, high, low, close, volume)

        Returns:
            DataFrame with one row per candle (same index as candles).
            Bars without enough history hold NaN.
        """
        pass

    def get_values_at(self, candles: pd.DataFrame, bar_index: int) -> Optional[pd.Series]:
        """
        Get indicator values at a specific bar.

        Args:
            candles: Candle frame (must include the bars before bar_index)
            bar_index: Position of the bar in the frame

        Returns:
            Row of indicator values, or None if the bar is out of range or
            any value is still undefined
        """
        if bar_index < 0 or bar_index >= len(candles):
            return None
        row = self.calculate(candles).iloc[bar_index]
        if row.isna().any():
            return None
        return row
