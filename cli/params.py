#!/usr/bin/env python3
"""
Parameter reference CLI.

Shows all configurable parameters, their valid ranges, and defaults.
"""
from lrcvwap.shared.defaults import (
    LRC_LENGTH, LRC_BAND_MULT, LRC_BAND_MULT_2, LRC_BAND_MULT_3,
    VWAP_WINDOW, VWAP_SMA_LENGTH, VWAP_EMA_LENGTH, VWAP_ATR_PERIOD, VWAP_BAND_MULTS,
    USE_SLOPE_FILTER, SIMPLE_MODE, SIGNAL_SIDES,
    EXCURSION_BARS, EXCURSION_TARGETS_PCT,
)
from lrcvwap.signals.config import PRESET_CONFIGS


def main():
    """Print all configurable parameters with their ranges and defaults."""

    print("=" * 80)
    print("LRC / RVWAP PARAMETER REFERENCE")
    print("=" * 80)
    print()

    print("LINEAR REGRESSION CHANNEL")
    print("-" * 80)
    print()
    print(f"  --length            Regression window: {LRC_LENGTH} (default)")
    print(f"                      Range: >= 2; fewer bars than length = no values")
    print(f"  --band-mult         Tier 1 multiplier: {LRC_BAND_MULT} (default)")
    print(f"  --band-mult2        Tier 2 multiplier: {LRC_BAND_MULT_2} (default)")
    print(f"                      Used by EARLY / STRONG")
    print(f"  --band-mult3        Tier 3 multiplier: {LRC_BAND_MULT_3} (default)")
    print(f"                      Used by SUPER")
    print("  --legacy-mid-offset Shift midline by slope * 1.0 (default: off)")
    print()

    print("ROLLING VWAP")
    print("-" * 80)
    print()
    print(f"  --vwap-window       Window: {VWAP_WINDOW} (default)")
    print(f"                      Range: >= 1")
    print(f"  SMA / EMA of close: {VWAP_SMA_LENGTH} / {VWAP_EMA_LENGTH} (YAML only)")
    print(f"  True-range EMA period: {VWAP_ATR_PERIOD} (YAML only, capped at series length)")
    print(f"  Band multipliers: {list(VWAP_BAND_MULTS)} (YAML only)")
    print("                      ubK/lbK = rvwap +/- dev * multiplier K")
    print()

    print("LRC CROSS GATING:")
    print("-" * 80)
    print()
    print(f"  --simple-mode       Plain midline crosses (default: {SIMPLE_MODE})")
    print(f"  --no-slope-filter   Disable slope gate (default filter: {USE_SLOPE_FILTER})")
    print("                      Gate applies only when simple mode is off")
    print()

    print("DETECTORS:")
    print("-" * 80)
    print()
    print("  --disable-lrc-cross Close crosses the regression midline")
    print("  --disable-early     Close beyond LRC tier 2 while inside RVWAP band 1")
    print("  --disable-strong    Close beyond both LRC tier 2 and RVWAP band 1")
    print("  --disable-super     Wick beyond both LRC tier 3 and RVWAP band 1")
    print(f"  --sides             Options: {', '.join(('long', 'short', 'all'))} (default: {SIGNAL_SIDES})")
    print()

    print("EXCURSION ANALYSIS:")
    print("-" * 80)
    print()
    print(f"  --excursion-bars    Bars after entry: {EXCURSION_BARS} (default)")
    print(f"  Targets: {', '.join(f'+{t}%' for t in EXCURSION_TARGETS_PCT)}")
    print()

    print("PRESETS:")
    print("-" * 80)
    print()
    for name, preset in PRESET_CONFIGS.items():
        print(f"  {name:<18}  {preset.description}")
    print()


if __name__ == "__main__":
    main()
