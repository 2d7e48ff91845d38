"""
Pluggable signal rules over the indicator frame.

Each rule turns indicator columns into long/short boolean masks; the
detector walks the masks bar by bar and builds Signals. Rules are
independent: several may fire on the same bar. Comparisons against NaN are
False, so a rule whose inputs are undefined at a bar simply does not fire
there.
"""
from typing import List, Tuple, Protocol

import pandas as pd

from ..indicators.lrc import cross_masks
from ..shared.types import SignalReason
from .config import EngineConfig


class SignalRule(Protocol):
    """Protocol for a rule that evaluates the whole indicator frame."""

    reason: SignalReason

    def evaluate(
        self,
        df: pd.DataFrame,
        config: EngineConfig,
    ) -> Tuple[pd.Series, pd.Series]:
        """
        Evaluate rule on every bar.

        Args:
            df: Indicator frame (candle columns + LRC + RVWAP columns)
            config: EngineConfig

        Returns:
            (long_mask, short_mask) boolean Series aligned to df
        """
        ...


def _inside_cloud(df: pd.DataFrame) -> pd.Series:
    """Close strictly inside the inner RVWAP band (lb1 < close < ub1)."""
    return (df["close"] > df["lb1"]) & (df["close"] < df["ub1"])


class EarlyRule:
    """Close beyond LRC tier 2 while still inside the inner RVWAP band."""

    reason = SignalReason.EARLY

    def evaluate(self, df: pd.DataFrame, config: EngineConfig) -> Tuple[pd.Series, pd.Series]:
        in_cloud = _inside_cloud(df)
        long_mask = (df["close"] < df["lower2"]) & in_cloud
        short_mask = (df["close"] > df["upper2"]) & in_cloud
        return long_mask, short_mask


class StrongRule:
    """Close beyond both the inner RVWAP band and LRC tier 2."""

    reason = SignalReason.STRONG

    def evaluate(self, df: pd.DataFrame, config: EngineConfig) -> Tuple[pd.Series, pd.Series]:
        long_mask = (df["close"] < df["lb1"]) & (df["close"] < df["lower2"])
        short_mask = (df["close"] > df["ub1"]) & (df["close"] > df["upper2"])
        return long_mask, short_mask


class SuperRule:
    """Bar extreme beyond LRC tier 3 and the inner RVWAP band."""

    reason = SignalReason.SUPER

    def evaluate(self, df: pd.DataFrame, config: EngineConfig) -> Tuple[pd.Series, pd.Series]:
        long_mask = (df["low"] < df["lower3"]) & (df["low"] < df["lb1"])
        short_mask = (df["high"] > df["upper3"]) & (df["high"] > df["ub1"])
        return long_mask, short_mask


class LrcCrossRule:
    """Close crossing the LRC midline, optionally gated by slope direction."""

    reason = SignalReason.LRC_CROSS

    def evaluate(self, df: pd.DataFrame, config: EngineConfig) -> Tuple[pd.Series, pd.Series]:
        return cross_masks(
            df["close"],
            df["mid"],
            slope=df["slope"],
            simple_mode=not config.slope_gate_active,
        )


def get_signal_rules(config: EngineConfig) -> List[SignalRule]:
    """
    Return the rules enabled by config's toggles.

    Order: EARLY, STRONG, SUPER, LRC_CROSS (order of signals within one bar).
    """
    toggles = config.signals
    rules: List[SignalRule] = []
    if toggles.enable_early:
        rules.append(EarlyRule())
    if toggles.enable_strong:
        rules.append(StrongRule())
    if toggles.enable_super:
        rules.append(SuperRule())
    if toggles.enable_lrc_cross:
        rules.append(LrcCrossRule())
    return rules
