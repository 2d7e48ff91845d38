"""
Tests for the rolling linear regression.

Covers:
- Warm-up: bars before the window is full (and series shorter than the window) are NaN.
- Exact fits: a linear series extrapolates exactly with zero residual.
- Closed form on a small series (slope, intercept, mid, sample residual std).
- Large price levels do not lose precision.
"""
import math

import numpy as np
import pandas as pd
import pytest

from lrcvwap.indicators.linreg import RollingLinearRegression, REGRESSION_COLUMNS


def _closes(values):
    return pd.Series(values, dtype=float)


class TestConstruction:
    def test_length_below_two_raises(self):
        with pytest.raises(ValueError, match="length must be >= 2"):
            RollingLinearRegression(1)

    def test_columns(self):
        assert RollingLinearRegression(3).columns == REGRESSION_COLUMNS


class TestWarmUp:
    def test_series_shorter_than_window_is_all_nan(self):
        out = RollingLinearRegression(5).calculate_series(_closes([1, 2, 3, 4]))
        assert len(out) == 4
        assert out.isna().all().all()

    def test_first_defined_bar_is_length_minus_one(self):
        out = RollingLinearRegression(3).calculate_series(_closes([10, 11, 9, 12, 8]))
        assert out.iloc[:2].isna().all().all()
        assert out.iloc[2:].notna().all().all()

    def test_empty_series(self):
        out = RollingLinearRegression(3).calculate_series(_closes([]))
        assert out.empty
        assert list(out.columns) == REGRESSION_COLUMNS


class TestClosedForm:
    def test_three_bar_window(self):
        """closes 10, 11, 9 -> y = -0.5x + 10.5, mid 9.5, residuals (-0.5, 1, -0.5)."""
        out = RollingLinearRegression(3).calculate_series(_closes([10, 11, 9, 12, 8]))
        row = out.iloc[2]
        assert row["slope"] == pytest.approx(-0.5)
        assert row["intercept"] == pytest.approx(10.5)
        assert row["mid"] == pytest.approx(9.5)
        assert row["residual_std"] == pytest.approx(math.sqrt(0.75))

    def test_next_window(self):
        """closes 11, 9, 12 -> slope 0.5, intercept 10.1667, mid 11.1667."""
        out = RollingLinearRegression(3).calculate_series(_closes([10, 11, 9, 12, 8]))
        row = out.iloc[3]
        assert row["slope"] == pytest.approx(0.5)
        assert row["intercept"] == pytest.approx(32 / 3 - 0.5)
        assert row["mid"] == pytest.approx(32 / 3 + 0.5)

    def test_linear_series_has_zero_residual(self):
        values = [3.0 + 2.0 * i for i in range(30)]
        out = RollingLinearRegression(10).calculate_series(_closes(values))
        defined = out.iloc[9:]
        np.testing.assert_allclose(defined["slope"], 2.0, atol=1e-9)
        np.testing.assert_allclose(defined["mid"], values[9:], atol=1e-9)
        np.testing.assert_allclose(defined["residual_std"], 0.0, atol=1e-9)

    def test_constant_series(self):
        out = RollingLinearRegression(4).calculate_series(_closes([7.0] * 8))
        defined = out.iloc[3:]
        np.testing.assert_allclose(defined["slope"], 0.0, atol=1e-12)
        np.testing.assert_allclose(defined["mid"], 7.0)
        np.testing.assert_allclose(defined["residual_std"], 0.0, atol=1e-12)

    def test_large_price_level_keeps_precision(self):
        base = 1e9
        values = [base + 0.5 * i for i in range(50)]
        out = RollingLinearRegression(20).calculate_series(_closes(values))
        np.testing.assert_allclose(out["slope"].iloc[19:], 0.5, atol=1e-6)
        np.testing.assert_allclose(out["residual_std"].iloc[19:], 0.0, atol=1e-5)


class TestCandleInput:
    def test_calculate_uses_close_and_keeps_index(self):
        candles = pd.DataFrame({
            "time": [1, 2, 3],
            "open": [10.0, 11.0, 9.0],
            "high": [12.0, 12.0, 12.0],
            "low": [8.0, 8.0, 8.0],
            "close": [10.0, 11.0, 9.0],
            "volume": [1.0, 1.0, 1.0],
        }, index=[5, 6, 7])
        out = RollingLinearRegression(3).calculate(candles)
        assert list(out.index) == [5, 6, 7]
        assert out["mid"].iloc[2] == pytest.approx(9.5)

    def test_get_values_at(self):
        candles = pd.DataFrame({"close": [10.0, 11.0, 9.0]})
        reg = RollingLinearRegression(3)
        assert reg.get_values_at(candles, 0) is None
        assert reg.get_values_at(candles, 3) is None
        assert reg.get_values_at(candles, 2)["slope"] == pytest.approx(-0.5)
