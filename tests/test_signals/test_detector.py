"""
Tests for SignalDetector.

Covers:
- Indicator frame: candle columns plus every LRC / RVWAP column, input left untouched.
- Idempotence: two runs on the same candles give identical signals and frames.
- Mirror symmetry: reflecting prices around a level flips every signal's side.
- Non-exclusive detectors: several reasons on one bar all appear, in rule order.
- Toggles, side filter, add-on marking, short series, timings.
"""
import numpy as np
import pandas as pd
import pytest

from lrcvwap.data.preparation import CandleValidationError
from lrcvwap.shared.types import Candle, SignalReason, SignalSide
from lrcvwap.signals.config import EngineConfig, SignalToggles
from lrcvwap.signals.detector import SignalDetector, signals_to_frame

MIRROR_LEVEL = 200.0


def _random_walk_candles(n=300, seed=7):
    """Random-walk candles on a 0.25 tick grid (exact under reflection)."""
    rng = np.random.default_rng(seed)
    closes = MIRROR_LEVEL + np.cumsum(rng.integers(-8, 9, n) * 0.25)
    opens = np.concatenate([[MIRROR_LEVEL], closes[:-1]])
    highs = np.maximum(opens, closes) + rng.integers(0, 5, n) * 0.25
    lows = np.minimum(opens, closes) - rng.integers(0, 5, n) * 0.25
    return pd.DataFrame({
        "time": 1_700_000_000_000 + np.arange(n) * 60_000,
        "open": opens,
        "high": highs,
        "low": lows,
        "close": closes,
        "volume": rng.integers(1, 100, n).astype(float),
    })


def _mirror(candles):
    flipped = candles.copy()
    flipped["open"] = 2 * MIRROR_LEVEL - candles["open"]
    flipped["close"] = 2 * MIRROR_LEVEL - candles["close"]
    flipped["high"] = 2 * MIRROR_LEVEL - candles["low"]
    flipped["low"] = 2 * MIRROR_LEVEL - candles["high"]
    return flipped


@pytest.fixture
def candles():
    return _random_walk_candles()


@pytest.fixture
def config():
    return EngineConfig(length=20, vwap_window=20, atr_period=20)


def _synthetic_frame(rows):
    """Indicator frame with a neutral bar and per-bar overrides."""
    base = {
        "close": 100.0,
        "high": 101.0,
        "low": 99.0,
        "mid": 100.0,
        "slope": 0.0,
        "upper1": 104.0,
        "lower1": 96.0,
        "upper2": 104.0,
        "lower2": 96.0,
        "upper3": 106.0,
        "lower3": 94.0,
        "ub1": 103.0,
        "lb1": 97.0,
    }
    frame = pd.DataFrame([{**base, **r} for r in rows])
    frame.insert(0, "time", [1000 * (i + 1) for i in range(len(frame))])
    return frame


class TestIndicatorFrame:
    def test_columns(self, candles, config):
        df = SignalDetector(config).compute_indicators(candles)
        for col in ["time", "close", "mid", "slope", "residual_std", "upper3", "lower3",
                    "rvwap", "sma", "ema", "dev", "ub1", "lb5"]:
            assert col in df.columns
        assert len(df) == len(candles)

    def test_input_not_modified(self, candles, config):
        before = candles.copy()
        SignalDetector(config).detect_signals(candles)
        pd.testing.assert_frame_equal(candles, before)

    def test_accepts_candle_records(self, config):
        records = [
            Candle(time=i, open=10.0, high=11.0, low=9.0, close=10.0 + (i % 3) * 0.1)
            for i in range(30)
        ]
        df = SignalDetector(config).compute_indicators(records)
        assert df["volume"].isna().all()
        assert df["rvwap"].iloc[19:].notna().all()

    def test_invalid_candles_raise(self, config):
        bad = [{"t": 1, "o": 10, "h": 9, "l": 11, "c": 10}]
        with pytest.raises(CandleValidationError, match="high"):
            SignalDetector(config).detect_signals(bad)

    def test_timings_recorded(self, candles, config):
        timings = {}
        SignalDetector(config).detect_signals_with_indicators(candles, timings=timings)
        assert set(timings) == {"indicator_lrc", "indicator_rvwap", "signal_detection"}
        assert all(v >= 0 for v in timings.values())


class TestDeterminism:
    def test_idempotent(self, candles, config):
        detector = SignalDetector(config)
        signals_a, df_a = detector.detect_signals_with_indicators(candles)
        signals_b, df_b = detector.detect_signals_with_indicators(candles)
        assert signals_a == signals_b
        pd.testing.assert_frame_equal(df_a, df_b)

    def test_mirror_flips_every_side(self, candles, config):
        detector = SignalDetector(config)
        original = detector.detect_signals(candles)
        mirrored = detector.detect_signals(_mirror(candles))
        assert len(original) > 0
        assert {(s.time, s.reason, s.side.opposite) for s in original} == {
            (s.time, s.reason, s.side) for s in mirrored
        }

    def test_signals_sorted_by_time(self, candles, config):
        signals = SignalDetector(config).detect_signals(candles)
        times = [s.time for s in signals]
        assert times == sorted(times)

    def test_signal_price_is_bar_close(self, candles, config):
        for s in SignalDetector(config).detect_signals(candles):
            assert candles["time"].iloc[s.bar_index] == s.time
            assert candles["close"].iloc[s.bar_index] == s.price


class TestShortSeries:
    def test_fewer_bars_than_length_gives_no_signals(self, candles):
        detector = SignalDetector(EngineConfig(length=50, vwap_window=10))
        signals, df = detector.detect_signals_with_indicators(candles.iloc[:40])
        assert signals == []
        assert df["mid"].isna().all()

    def test_single_bar(self, candles, config):
        assert SignalDetector(config).detect_signals(candles.iloc[:1]) == []

    def test_empty(self, config):
        assert SignalDetector(config).detect_signals([]) == []


class TestToggles:
    def test_all_disabled_gives_no_signals(self, candles):
        config = EngineConfig(
            length=20,
            vwap_window=20,
            signals=SignalToggles(False, False, False, False),
        )
        assert SignalDetector(config).detect_signals(candles) == []

    def test_all_disabled_warns(self, caplog):
        config = EngineConfig(signals=SignalToggles(False, False, False, False))
        with caplog.at_level("WARNING", logger="lrcvwap.signals.detector"):
            SignalDetector(config)
        assert "every detector is disabled" in caplog.text

    def test_enabled_detector_does_not_warn(self, caplog):
        with caplog.at_level("WARNING", logger="lrcvwap.signals.detector"):
            SignalDetector(EngineConfig(signals=SignalToggles(False, False, False, True)))
        assert caplog.text == ""

    def test_single_detector(self, candles):
        config = EngineConfig(
            length=20,
            vwap_window=20,
            simple_mode=True,
            signals=SignalToggles(True, False, False, False),
        )
        signals = SignalDetector(config).detect_signals(candles)
        assert signals
        assert {s.reason for s in signals} == {SignalReason.LRC_CROSS}

    def test_slope_gate_only_removes_signals(self, candles):
        toggles = SignalToggles(True, False, False, False)
        gated = SignalDetector(EngineConfig(length=20, signals=toggles)).detect_signals(candles)
        plain = SignalDetector(EngineConfig(length=20, signals=toggles, simple_mode=True)).detect_signals(candles)
        gated_keys = {(s.time, s.side) for s in gated}
        assert gated_keys <= {(s.time, s.side) for s in plain}
        assert len(gated) <= len(plain)

    @pytest.mark.parametrize("sides,expected", [("long", SignalSide.LONG), ("short", SignalSide.SHORT)])
    def test_side_filter(self, candles, sides, expected):
        config = EngineConfig(length=20, vwap_window=20, signal_sides=sides)
        signals = SignalDetector(config).detect_signals(candles)
        assert all(s.side == expected for s in signals)


class TestSameBarSignals:
    def _detect(self, rows, monkeypatch, config=None):
        detector = SignalDetector(config or EngineConfig(length=3, vwap_window=3))
        frame = _synthetic_frame(rows)
        monkeypatch.setattr(detector, "compute_indicators", lambda candles, timings=None: frame)
        return detector.detect_signals(None)

    def test_early_and_super_on_same_bar(self, monkeypatch):
        signals = self._detect([{}, {"close": 95.0, "low": 92.0, "lb1": 93.0}], monkeypatch)
        assert [(s.reason, s.side, s.bar_index) for s in signals] == [
            (SignalReason.EARLY, SignalSide.LONG, 1),
            (SignalReason.SUPER, SignalSide.LONG, 1),
        ]

    def test_strong_and_super_on_same_bar(self, monkeypatch):
        signals = self._detect([{}, {"close": 95.0, "low": 93.0}], monkeypatch)
        assert [s.reason for s in signals] == [SignalReason.STRONG, SignalReason.SUPER]
        assert all(s.time == 2000 and s.price == 95.0 for s in signals)

    def test_band_and_cross_on_same_bar(self, monkeypatch):
        rows = [
            {"close": 99.0, "slope": 1.0},
            {"close": 102.0, "high": 107.0, "slope": 1.0},
        ]
        signals = self._detect(rows, monkeypatch)
        assert [(s.reason, s.side) for s in signals] == [
            (SignalReason.SUPER, SignalSide.SHORT),
            (SignalReason.LRC_CROSS, SignalSide.LONG),
        ]

    def test_first_bar_never_signals(self, monkeypatch):
        signals = self._detect([{"close": 95.0, "low": 93.0}], monkeypatch)
        assert signals == []

    def test_same_bar_signals_are_not_add_ons(self, monkeypatch):
        rows = [{}, {"close": 95.0, "low": 93.0}, {"close": 95.0, "low": 93.0}]
        signals = self._detect(rows, monkeypatch)
        assert [s.add_on for s in signals] == [False, False, True, True]


class TestSignalsToFrame:
    def test_columns_and_values(self, candles, config):
        signals = SignalDetector(config).detect_signals(candles)
        frame = signals_to_frame(signals)
        assert list(frame.columns) == ["time", "bar_index", "side", "reason", "price", "add_on"]
        assert len(frame) == len(signals)
        if signals:
            assert frame["side"].iloc[0] == signals[0].side.value

    def test_empty(self):
        frame = signals_to_frame([])
        assert frame.empty
        assert "reason" in frame.columns
