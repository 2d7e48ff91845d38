"""
Tests for the Indicator base interface.
"""
from abc import ABC

from lrcvwap.indicators.base import Indicator
from lrcvwap.indicators.linreg import RollingLinearRegression
from lrcvwap.indicators.lrc import LRCChannel
from lrcvwap.indicators.rvwap import RVWAPEngine


CONCRETE = (RollingLinearRegression, LRCChannel, RVWAPEngine)


class TestIndicatorInterface:
    """Test Indicator abstract base class."""

    def test_indicator_is_abstract(self):
        """Indicator should be an ABC."""
        assert issubclass(Indicator, ABC)

    def test_indicator_requires_calculate_and_columns(self):
        """Indicator defines calculate and columns as abstract."""
        assert {"calculate", "columns"} <= set(Indicator.__abstractmethods__)

    def test_concrete_indicators_implement_calculate(self):
        """All concrete indicators implement calculate."""
        for cls in CONCRETE:
            assert issubclass(cls, Indicator)
            assert cls.calculate is not Indicator.calculate
            assert not getattr(cls, "__abstractmethods__", set())

    def test_get_values_at_is_shared(self):
        """get_values_at comes from the base class."""
        for cls in CONCRETE:
            assert cls.get_values_at is Indicator.get_values_at
