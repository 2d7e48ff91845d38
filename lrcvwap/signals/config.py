"""
Engine configuration for indicators and signal detection.

One explicit value object carries every option; nothing is read from
global state. Config validation runs at construction time (fail fast with
clear errors), before any candle is processed.
"""
from dataclasses import dataclass, field, replace
from numbers import Integral
from typing import Dict, Tuple

from ..shared.defaults import (
    LRC_LENGTH, LRC_BAND_MULT, LRC_BAND_MULT_2, LRC_BAND_MULT_3,
    VWAP_WINDOW, VWAP_SMA_LENGTH, VWAP_EMA_LENGTH, VWAP_ATR_PERIOD, VWAP_BAND_MULTS,
    USE_SLOPE_FILTER, SIMPLE_MODE, SIGNAL_SIDES,
)

VALID_SIGNAL_SIDES = ("long", "short", "all")


def _validate_config(
    *,
    length: int,
    band_mults: Tuple[float, float, float],
    vwap_window: int,
    sma_length: int,
    ema_length: int,
    atr_period: int,
    vwap_band_mults: Tuple[float, ...],
    signal_sides: str,
) -> None:
    """Validate indicator and signal parameters. Raises ValueError with clear message on failure."""
    windows = (
        ("length", length), ("vwap_window", vwap_window), ("sma_length", sma_length),
        ("ema_length", ema_length), ("atr_period", atr_period),
    )
    for name, value in windows:
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValueError(f"{name} must be an integer, got {value!r}")
    if length < 2:
        raise ValueError(f"length must be >= 2, got {length}")
    for name, mult in zip(("band_mult", "band_mult2", "band_mult3"), band_mults):
        if mult < 0:
            raise ValueError(f"{name} must be >= 0, got {mult}")
    if vwap_window < 1:
        raise ValueError(f"vwap_window must be >= 1, got {vwap_window}")
    if sma_length < 1:
        raise ValueError(f"sma_length must be >= 1, got {sma_length}")
    if ema_length < 1:
        raise ValueError(f"ema_length must be >= 1, got {ema_length}")
    if atr_period < 1:
        raise ValueError(f"atr_period must be >= 1, got {atr_period}")
    if len(vwap_band_mults) == 0:
        raise ValueError("vwap_band_mults must contain at least one multiplier")
    if any(m < 0 for m in vwap_band_mults):
        raise ValueError(f"vwap_band_mults must all be >= 0, got {list(vwap_band_mults)}")
    if signal_sides not in VALID_SIGNAL_SIDES:
        raise ValueError(
            f"signal_sides must be one of {VALID_SIGNAL_SIDES}, got '{signal_sides}'"
        )


@dataclass
class SignalToggles:
    """Independent on/off switch per detector."""
    enable_lrc_cross: bool = True
    enable_early: bool = True
    enable_strong: bool = True
    enable_super: bool = True

    def any_enabled(self) -> bool:
        return self.enable_lrc_cross or self.enable_early or self.enable_strong or self.enable_super


@dataclass
class EngineConfig:
    """Configuration for one full indicator + signal pass."""

    name: str = "custom"
    description: str = ""

    # Linear regression channel
    length: int = LRC_LENGTH
    band_mult: float = LRC_BAND_MULT
    band_mult2: float = LRC_BAND_MULT_2
    band_mult3: float = LRC_BAND_MULT_3
    legacy_mid_offset: bool = False  # Cosmetic slope * 1.0 midline shift

    # Rolling VWAP
    vwap_window: int = VWAP_WINDOW
    sma_length: int = VWAP_SMA_LENGTH
    ema_length: int = VWAP_EMA_LENGTH
    atr_period: int = VWAP_ATR_PERIOD
    vwap_band_mults: Tuple[float, ...] = VWAP_BAND_MULTS

    # LRC cross gating
    simple_mode: bool = SIMPLE_MODE  # True bypasses the slope gate
    use_slope_filter: bool = USE_SLOPE_FILTER  # Only consulted when simple_mode is False

    # Detectors
    signals: SignalToggles = field(default_factory=SignalToggles)
    signal_sides: str = SIGNAL_SIDES  # "long", "short", or "all"

    def __post_init__(self) -> None:
        if isinstance(self.signals, dict):
            self.signals = SignalToggles(**self.signals)
        self.vwap_band_mults = tuple(float(m) for m in self.vwap_band_mults)
        _validate_config(
            length=self.length,
            band_mults=(self.band_mult, self.band_mult2, self.band_mult3),
            vwap_window=self.vwap_window,
            sma_length=self.sma_length,
            ema_length=self.ema_length,
            atr_period=self.atr_period,
            vwap_band_mults=self.vwap_band_mults,
            signal_sides=self.signal_sides,
        )

    @property
    def slope_gate_active(self) -> bool:
        """Whether LRC crosses must agree with the regression slope."""
        return self.use_slope_filter and not self.simple_mode


# Baseline: every detector on, slope-gated crosses
BASELINE_CONFIG = EngineConfig(
    name="baseline",
    description="All detectors enabled, slope-filtered LRC crosses",
)

PRESET_CONFIGS: Dict[str, EngineConfig] = {
    "baseline": BASELINE_CONFIG,
    # Legacy single-rule behavior: plain midline crosses only
    "simple_cross": EngineConfig(
        name="simple_cross",
        description="Midline crosses without slope gate (legacy single-rule detector)",
        simple_mode=True,
        signals=SignalToggles(
            enable_lrc_cross=True,
            enable_early=False,
            enable_strong=False,
            enable_super=False,
        ),
    ),
    "slope_cross": EngineConfig(
        name="slope_cross",
        description="Midline crosses that agree with the regression slope",
        signals=SignalToggles(
            enable_lrc_cross=True,
            enable_early=False,
            enable_strong=False,
            enable_super=False,
        ),
    ),
    "bands_only": EngineConfig(
        name="bands_only",
        description="EARLY / STRONG / SUPER band detectors, no midline crosses",
        signals=SignalToggles(
            enable_lrc_cross=False,
            enable_early=True,
            enable_strong=True,
            enable_super=True,
        ),
    ),
}


def with_overrides(config: EngineConfig, **overrides) -> EngineConfig:
    """Return a validated copy of config with the given fields replaced."""
    return replace(config, **overrides)
