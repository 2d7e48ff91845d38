"""
Multi-tier signal detector composing the LRC and RVWAP indicators.

- Indicators calculate values from candle data
- Rules interpret those values as long/short conditions
- The detector walks the bars in order and emits one Signal per firing rule

Every call is a complete, independent pass over the full history.
"""
import logging
import time
import pandas as pd
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..data.preparation import candles_to_frame
from ..indicators.lrc import LRCChannel
from ..indicators.rvwap import RVWAPEngine
from ..shared.types import Signal, SignalSide
from .config import EngineConfig
from .detector_filters import sort_signals, mark_add_ons, filter_signals_by_side
from .rules import SignalRule, get_signal_rules

logger = logging.getLogger(__name__)

CandleInput = Union[pd.DataFrame, Iterable[Any]]


class SignalDetector:
    """
    Signal detector over the LRC channel and RVWAP bands.

    Detectors (EARLY, STRONG, SUPER, LRC_CROSS) are evaluated independently
    on each bar; more than one may fire on the same bar.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the signal detector.

        Args:
            config: EngineConfig with indicator settings and detector toggles
                (default: EngineConfig())
        """
        self.config = config if config is not None else EngineConfig()
        if not self.config.signals.any_enabled():
            logger.warning(f"{self.config.name}: every detector is disabled, no signals will be emitted")

        self.channel = LRCChannel(
            length=self.config.length,
            band_mult=self.config.band_mult,
            band_mult2=self.config.band_mult2,
            band_mult3=self.config.band_mult3,
            legacy_mid_offset=self.config.legacy_mid_offset,
        )
        self.rvwap = RVWAPEngine(
            window=self.config.vwap_window,
            sma_length=self.config.sma_length,
            ema_length=self.config.ema_length,
            atr_period=self.config.atr_period,
            band_mults=self.config.vwap_band_mults,
        )

    def compute_indicators(
        self,
        candles: CandleInput,
        timings: Optional[Dict[str, float]] = None,
    ) -> pd.DataFrame:
        """
        Validate candles and calculate every indicator column.

        Args:
            candles: Candle frame, Candle records or kline dicts
            timings: If provided, per-indicator elapsed seconds are accumulated here

        Returns:
            Candle columns followed by LRC and RVWAP columns, one row per bar

        Raises:
            CandleValidationError: if the candles are malformed
        """
        def _acc(key: str, elapsed: float) -> None:
            if timings is not None:
                timings[key] = timings.get(key, 0.0) + elapsed

        df = candles_to_frame(candles)

        t0 = time.perf_counter()
        lrc = self.channel.calculate(df)
        _acc("indicator_lrc", time.perf_counter() - t0)

        t0 = time.perf_counter()
        vwap = self.rvwap.calculate(df)
        _acc("indicator_rvwap", time.perf_counter() - t0)

        return pd.concat([df, lrc, vwap], axis=1)

    def detect_signals(self, candles: CandleInput) -> List[Signal]:
        """
        Detect signals from all enabled detectors.

        Args:
            candles: Candle frame, Candle records or kline dicts

        Returns:
            Signals sorted by time (stable within a bar)
        """
        signals, _ = self.detect_signals_with_indicators(candles)
        return signals

    def detect_signals_with_indicators(
        self,
        candles: CandleInput,
        timings: Optional[Dict[str, float]] = None,
    ) -> Tuple[List[Signal], pd.DataFrame]:
        """
        Detect signals and return them together with the indicator frame.

        Args:
            candles: Candle frame, Candle records or kline dicts
            timings: If provided, per-stage elapsed seconds are accumulated here

        Returns:
            Tuple of (signals list, indicator dataframe)
        """
        indicator_df = self.compute_indicators(candles, timings=timings)

        t0 = time.perf_counter()
        rules = get_signal_rules(self.config)
        signals = self._signals_from_rules(indicator_df, rules)
        signals = sort_signals(signals)
        signals = mark_add_ons(signals)
        signals = filter_signals_by_side(signals, self.config.signal_sides)
        if timings is not None:
            timings["signal_detection"] = timings.get("signal_detection", 0.0) + (time.perf_counter() - t0)

        logger.debug(
            f"{self.config.name}: {len(signals)} signals over {len(indicator_df)} bars "
            f"({len(rules)} detectors enabled)"
        )
        return signals, indicator_df

    def _signals_from_rules(
        self,
        indicator_df: pd.DataFrame,
        rules: List[SignalRule],
    ) -> List[Signal]:
        """Walk bars 1..N-1 in order; per bar, emit rule by rule, long before short."""
        signals: List[Signal] = []
        if len(indicator_df) < 2 or not rules:
            return signals

        masks = []
        for rule in rules:
            long_mask, short_mask = rule.evaluate(indicator_df, self.config)
            masks.append((
                rule.reason,
                long_mask.fillna(False).to_numpy(dtype=bool),
                short_mask.fillna(False).to_numpy(dtype=bool),
            ))

        times = indicator_df["time"].to_numpy()
        closes = indicator_df["close"].to_numpy(dtype=float)

        for i in range(1, len(indicator_df)):
            for reason, long_mask, short_mask in masks:
                if long_mask[i]:
                    signals.append(Signal(
                        time=int(times[i]),
                        side=SignalSide.LONG,
                        reason=reason,
                        price=float(closes[i]),
                        bar_index=i,
                    ))
                if short_mask[i]:
                    signals.append(Signal(
                        time=int(times[i]),
                        side=SignalSide.SHORT,
                        reason=reason,
                        price=float(closes[i]),
                        bar_index=i,
                    ))

        return signals


def signals_to_frame(signals: List[Signal]) -> pd.DataFrame:
    """Tabulate signals (time, bar_index, side, reason, price, add_on) for display or CSV export."""
    columns = ["time", "bar_index", "side", "reason", "price", "add_on"]
    return pd.DataFrame(
        [
            {
                "time": s.time,
                "bar_index": s.bar_index,
                "side": s.side.value,
                "reason": s.reason.value,
                "price": s.price,
                "add_on": s.add_on,
            }
            for s in signals
        ],
        columns=columns,
    )
