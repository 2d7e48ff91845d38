"""
Excursion analysis: how far price moved for and against each signal.

For every signal the entry is the close of the signal bar. Favorable and
adverse excursions are measured from highs/lows of the following bars and
expressed as percent of the entry price (favorable >= 0, adverse <= 0).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..data.preparation import candles_to_frame
from ..shared.defaults import EXCURSION_BARS
from ..shared.types import Signal

logger = logging.getLogger(__name__)

EXCURSION_COLUMNS = [
    "entry_number",
    "time",
    "bar_index",
    "side",
    "reason",
    "entry_price",
    "max_favorable_pct",
    "max_adverse_pct",
    "bars_inspected",
]

FirstTouches = Dict[float, Optional[int]]


def _pct(move: float, entry: float) -> float:
    if entry <= 0:
        return np.nan
    return move / entry * 100


def _excursion_pcts(
    is_long: bool,
    entry: float,
    highest: float,
    lowest: float,
) -> Tuple[float, float]:
    """(max_favorable_pct, max_adverse_pct) for one side given the window extremes."""
    if is_long:
        favorable = _pct(highest - entry, entry)
        adverse = _pct(lowest - entry, entry)
    else:
        favorable = _pct(entry - lowest, entry)
        adverse = _pct(entry - highest, entry)
    if np.isnan(favorable):
        return favorable, adverse
    return max(0.0, favorable), min(0.0, adverse)


class ExcursionAnalyzer:
    """Per-signal excursions and first-touch statistics."""

    def __init__(self, n_bars: int = EXCURSION_BARS):
        """
        Args:
            n_bars: Bars after the signal bar inspected by excursions()
                and first_touches()
        """
        if n_bars < 1:
            raise ValueError(f"n_bars must be >= 1, got {n_bars}")
        self.n_bars = n_bars

    @staticmethod
    def _bar_index(candles: pd.DataFrame, signal: Signal) -> int:
        """Locate the signal bar; trusts bar_index when it matches the signal time."""
        n = len(candles)
        if 0 <= signal.bar_index < n and int(candles["time"].iloc[signal.bar_index]) == signal.time:
            return signal.bar_index
        times = candles["time"].to_numpy()
        pos = int(np.searchsorted(times, signal.time))
        if pos >= n or int(times[pos]) != signal.time:
            raise ValueError(f"Signal time {signal.time} not found in candle data")
        return pos

    def _row(
        self,
        number: int,
        signal: Signal,
        candles: pd.DataFrame,
        start: int,
        end: int,
    ) -> Dict[str, Any]:
        entry = float(candles["close"].iloc[start])
        highest = float(candles["high"].iloc[start:end + 1].max())
        lowest = float(candles["low"].iloc[start:end + 1].min())
        favorable, adverse = _excursion_pcts(signal.is_long, entry, highest, lowest)
        return {
            "entry_number": number,
            "time": signal.time,
            "bar_index": start,
            "side": signal.side.value,
            "reason": signal.reason.value,
            "entry_price": entry,
            "max_favorable_pct": favorable,
            "max_adverse_pct": adverse,
            "bars_inspected": end - start,
        }

    def excursions(
        self,
        candles: Any,
        signals: Iterable[Signal],
        n_bars: Optional[int] = None,
    ) -> pd.DataFrame:
        """
        Max favorable / adverse excursion over the next n_bars bars.

        The window is the signal bar through min(signal bar + n_bars, last bar);
        the signal bar's own high/low is included.

        Args:
            candles: Candle frame or records the signals were detected on
            signals: Signals to analyze
            n_bars: Override for self.n_bars

        Returns:
            DataFrame with EXCURSION_COLUMNS, one row per signal
        """
        n_bars = self.n_bars if n_bars is None else n_bars
        if n_bars < 1:
            raise ValueError(f"n_bars must be >= 1, got {n_bars}")
        df = candles_to_frame(candles)
        last = len(df) - 1
        rows = []
        for number, signal in enumerate(signals, start=1):
            start = self._bar_index(df, signal)
            rows.append(self._row(number, signal, df, start, min(start + n_bars, last)))
        logger.debug(f"Computed excursions for {len(rows)} signals over {n_bars} bars")
        return pd.DataFrame(rows, columns=EXCURSION_COLUMNS)

    def entry_to_entry(self, candles: Any, signals: Sequence[Signal]) -> pd.DataFrame:
        """
        Excursions from each signal bar up to and including the next signal's bar.

        "Next" is the first later signal on a later bar; the last signal runs
        to the end of the history.

        Returns:
            DataFrame with EXCURSION_COLUMNS, one row per signal
        """
        df = candles_to_frame(candles)
        last = len(df) - 1
        starts = [self._bar_index(df, s) for s in signals]
        rows = []
        for k, (signal, start) in enumerate(zip(signals, starts)):
            end = next((s for s in starts[k + 1:] if s > start), last)
            rows.append(self._row(k + 1, signal, df, start, end))
        return pd.DataFrame(rows, columns=EXCURSION_COLUMNS)

    def first_touches(
        self,
        candles: Any,
        signals: Iterable[Signal],
        targets_pct: Sequence[float],
        n_bars: Optional[int] = None,
    ) -> List[FirstTouches]:
        """
        Bars until the favorable move first reaches each target.

        Long touches a target when a later bar's high >= entry * (1 + pct/100);
        short when a later bar's low <= entry * (1 - pct/100). Only bars after
        the signal bar count, up to n_bars of them.

        Returns:
            One dict per signal mapping target pct -> bars to first touch (None if never)
        """
        n_bars = self.n_bars if n_bars is None else n_bars
        df = candles_to_frame(candles)
        highs = df["high"].to_numpy(dtype=float)
        lows = df["low"].to_numpy(dtype=float)
        closes = df["close"].to_numpy(dtype=float)
        last = len(df) - 1

        out: List[FirstTouches] = []
        for signal in signals:
            start = self._bar_index(df, signal)
            entry = closes[start]
            end = min(start + n_bars, last)
            touches: FirstTouches = {}
            for pct in targets_pct:
                touches[pct] = None
                for j in range(start + 1, end + 1):
                    if signal.is_long:
                        hit = highs[j] >= entry * (1 + pct / 100)
                    else:
                        hit = lows[j] <= entry * (1 - pct / 100)
                    if hit:
                        touches[pct] = j - start
                        break
            out.append(touches)
        return out


def win_rate_exclusive(
    first_touches: List[FirstTouches],
    total_signals: int,
    windows: Sequence[Tuple[int, int]],
) -> Dict[float, Dict[str, float]]:
    """
    Percent of signals whose first touch falls in each [lo, hi] bar window.

    Windows are inclusive and expected not to overlap, so each signal is
    counted in at most one window per target.

    Returns:
        {target_pct: {"lo-hi": percent}}
    """
    targets = sorted({t for touches in first_touches for t in touches})
    out: Dict[float, Dict[str, float]] = {}
    for target in targets:
        bars = [touches.get(target) for touches in first_touches]
        out[target] = {}
        for lo, hi in windows:
            hits = sum(1 for b in bars if b is not None and lo <= b <= hi)
            out[target][f"{lo}-{hi}"] = (hits / total_signals * 100) if total_signals else 0.0
    return out


def win_rate_cumulative(
    first_touches: List[FirstTouches],
    total_signals: int,
    cutoffs: Sequence[int],
) -> Dict[float, Dict[str, float]]:
    """
    Percent of signals that touched each target within <= cutoff bars.

    Returns:
        {target_pct: {"<=cutoff": percent}}
    """
    targets = sorted({t for touches in first_touches for t in touches})
    out: Dict[float, Dict[str, float]] = {}
    for target in targets:
        bars = [touches.get(target) for touches in first_touches]
        out[target] = {}
        for cutoff in cutoffs:
            hits = sum(1 for b in bars if b is not None and b <= cutoff)
            out[target][f"<={cutoff}"] = (hits / total_signals * 100) if total_signals else 0.0
    return out


def summarize_by_reason(df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
    """
    Aggregate an excursion frame per (reason, side).

    Returns:
        {"REASON/side": {count, avg_favorable_pct, avg_adverse_pct}}
    """
    out: Dict[str, Dict[str, Any]] = {}
    if df.empty:
        return out
    for (reason, side), grp in df.groupby(["reason", "side"], sort=True):
        out[f"{reason}/{side}"] = {
            "count": len(grp),
            "avg_favorable_pct": float(grp["max_favorable_pct"].mean()),
            "avg_adverse_pct": float(grp["max_adverse_pct"].mean()),
        }
    return out
