"""
Signal ordering, add-on marking and filtering for the detector pipeline.

Pure functions: sort by time (stable), mark add-on signals, filter by side.
Used by SignalDetector after signal generation. Signals are never
deduplicated: independent detectors firing on one bar all stay.
"""
from dataclasses import replace
from typing import List, Optional

from ..shared.types import Signal, SignalSide


def sort_signals(signals: List[Signal]) -> List[Signal]:
    """
    Sort by time ascending; signals with equal time keep their insertion order.

    Args:
        signals: List of signals

    Returns:
        New sorted list
    """
    return sorted(signals, key=lambda s: s.time)


def mark_add_ons(signals: List[Signal]) -> List[Signal]:
    """
    Flag signals that repeat the side of the previous signal.

    A signal is an add-on when the last signal on an earlier bar has the
    same side. Signals on the same bar never make each other add-ons.

    Args:
        signals: Signals sorted by time

    Returns:
        New list of signals with add_on set
    """
    marked: List[Signal] = []
    prior_side: Optional[SignalSide] = None
    bar_side: Optional[SignalSide] = None
    bar_time = None
    for sig in signals:
        if sig.time != bar_time:
            if bar_side is not None:
                prior_side = bar_side
            bar_time = sig.time
        marked.append(replace(sig, add_on=prior_side is not None and sig.side == prior_side))
        bar_side = sig.side
    return marked


def filter_signals_by_side(
    signals: List[Signal],
    signal_sides: str,
) -> List[Signal]:
    """
    Keep only signals of the requested side.

    Args:
        signals: List of signals
        signal_sides: "long", "short", or "all"

    Returns:
        Filtered list (same list if signal_sides == "all")
    """
    if signal_sides == "long":
        return [s for s in signals if s.side == SignalSide.LONG]
    if signal_sides == "short":
        return [s for s in signals if s.side == SignalSide.SHORT]
    return signals
