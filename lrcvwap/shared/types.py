"""
Shared types for the indicator and signal modules.

This module consolidates the Candle record, the SignalSide / SignalReason
enums and the Signal dataclass used across indicators, signals and
evaluation to avoid duplicated definitions.
"""
from typing import Optional
from dataclasses import dataclass
from enum import Enum


class SignalSide(Enum):
    """Direction of a trading signal."""
    LONG = "long"
    SHORT = "short"

    @property
    def opposite(self) -> "SignalSide":
        return SignalSide.SHORT if self is SignalSide.LONG else SignalSide.LONG


class SignalReason(Enum):
    """Detector that produced a signal."""
    LRC_CROSS = "LRC_CROSS"
    EARLY = "EARLY"
    STRONG = "STRONG"
    SUPER = "SUPER"


@dataclass(frozen=True)
class Candle:
    """
    One OHLCV bar.

    time is the bar open time in milliseconds since epoch. volume is None
    when the data source does not report it.
    """
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None


@dataclass
class Signal:
    """
    Directional signal emitted by the detector.

    price is the close of the bar that triggered the signal; bar_index is
    that bar's position in the candle frame.
    """
    time: int
    side: SignalSide
    reason: SignalReason
    price: float
    add_on: bool = False
    bar_index: int = -1

    @property
    def is_long(self) -> bool:
        return self.side is SignalSide.LONG
